# picodsl/core/graph/builder.py
"""PipelineConfig: root of a declaration and owner of the dependency graph.

Flow::

    config = gocd(declare)          # or: with PipelineConfig() as config: ...
      declare(config)               # groups, pipelines, contexts
      GraphBuilder.build(...)       # containers -> networkx.DiGraph
      run_graph_processors(graph)   # per-pipeline hooks needing the full graph
      GraphValidator.validate(...)  # first violation aborts
"""
from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional

import networkx as nx
from omegaconf import DictConfig

from ..errors import PreconditionError
from ..model.container import Container
from ..model.pipeline import PipelineNode
from ..utils.config import SettingsLike, load_settings
from .context import ContextStack
from .groups import ParallelContainer, PipelineGroup, SequenceContainer
from .paths import Matcher, PathFinder
from .validator import GraphValidator

logger = logging.getLogger(__name__)


class GraphBuilder:
    """Asks each root container to add its pipelines and edges to one graph."""

    def __init__(self, graph: Optional[nx.DiGraph] = None):
        self.graph = graph if graph is not None else nx.DiGraph()

    def build(self, containers: Iterable[Container]) -> nx.DiGraph:
        for container in containers:
            container.add_to_graph(self.graph)
        logger.debug(
            f"Graph built: {self.graph.number_of_nodes()} pipeline(s), {self.graph.number_of_edges()} edge(s)"
        )
        return self.graph


class PipelineConfig:
    """One configuration build: its own context stack, settings and graph."""

    def __init__(self, settings: SettingsLike = None):
        self.settings: DictConfig = load_settings(settings)
        self.graph: nx.DiGraph = nx.DiGraph()
        self.pipelines: List[PipelineGroup] = []
        self.context_stack = ContextStack()
        self.finalized = False

    def _add_group(self, group: PipelineGroup, block: Optional[Callable]) -> PipelineGroup:
        if self.finalized:
            raise PreconditionError("Configuration is already finalized")
        self.pipelines.append(group)
        if block is not None:
            block(group)
        return group

    def sequence(self, block: Optional[Callable[[SequenceContainer], None]] = None) -> SequenceContainer:
        return self._add_group(SequenceContainer(self.context_stack, self.settings), block)

    def parallel(self, block: Optional[Callable[[ParallelContainer], None]] = None) -> ParallelContainer:
        return self._add_group(ParallelContainer(self.context_stack, self.settings), block)

    def environments(self) -> None:
        """Reserved; environments are not modelled yet."""

    def finalize(self) -> "PipelineConfig":
        if self.finalized:
            raise PreconditionError("Configuration is already finalized")
        if len(self.context_stack):
            raise PreconditionError(f"{len(self.context_stack)} context(s) still open at finalize")

        GraphBuilder(self.graph).build(self.pipelines)
        for group in self.pipelines:
            group.run_graph_processors(self.graph)
        GraphValidator(self.settings).validate(self.graph)

        self.finalized = True
        logger.info(f"Configuration finalized with {len(self.pipelines)} top-level group(s)")
        return self

    # ==================== QUERIES ====================

    def all_pipelines(self) -> List[PipelineNode]:
        return [p for group in self.pipelines for p in group.all_pipelines()]

    def find(self, name: str) -> Optional[PipelineNode]:
        return next((p for p in self.all_pipelines() if p.name == name), None)

    def path_to_pipeline(self, target: PipelineNode, matcher: Matcher) -> str:
        return PathFinder.from_settings(self.graph, self.settings).path_to_pipeline(target, matcher)

    def __enter__(self) -> "PipelineConfig":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.finalize()


def gocd(
    block: Optional[Callable[[PipelineConfig], None]] = None,
    *,
    settings: SettingsLike = None,
) -> PipelineConfig:
    """Declare a configuration with ``block`` and return it finalized."""
    config = PipelineConfig(settings)
    if block is not None:
        block(config)
    return config.finalize()
