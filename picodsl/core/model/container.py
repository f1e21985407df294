# picodsl/core/model/container.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List

import networkx as nx

if TYPE_CHECKING:
    from .pipeline import PipelineNode


class Container(ABC):
    """Composite of pipelines: the building brick of a topology.

    Contract:

    1. ``add_to_graph(graph)``: add the children first, then the edges the
       container's ordering imposes between them.
    2. ``starting_nodes()`` / ``ending_nodes()``: the boundary used to wire
       this container into an enclosing one. Always computed from the current
       children, never cached.

    A single pipeline is the trivial container of one.
    """

    def __init__(self) -> None:
        self.children: List[Container] = []

    @abstractmethod
    def add_to_graph(self, graph: nx.DiGraph) -> None:
        ...

    @abstractmethod
    def starting_nodes(self) -> List["PipelineNode"]:
        ...

    @abstractmethod
    def ending_nodes(self) -> List["PipelineNode"]:
        ...

    def all_pipelines(self) -> List["PipelineNode"]:
        """Every pipeline below this container, in declaration order."""
        return [p for child in self.children for p in child.all_pipelines()]

    def run_graph_processors(self, graph: nx.DiGraph) -> None:
        for child in self.children:
            child.run_graph_processors(graph)
