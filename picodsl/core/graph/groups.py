# picodsl/core/graph/groups.py
"""Sequence and parallel groups, composite containers of pipelines.

Wiring rule for both shapes: every ending node of a predecessor gets an edge
to every starting node of its successor. That cross product is what lets the
two shapes nest arbitrarily.
"""
from __future__ import annotations

import logging
from abc import abstractmethod
from typing import Callable, List, Optional, TypeVar

import networkx as nx
from omegaconf import DictConfig

from ..errors import PreconditionError
from ..model.container import Container
from ..model.pipeline import PipelineNode
from .context import Context, ContextStack, Enhancer, ParallelContext, SequenceContext

logger = logging.getLogger(__name__)

G = TypeVar("G", bound="PipelineGroup")


def _connect(graph: nx.DiGraph, sources: List[PipelineNode], targets: List[PipelineNode]) -> None:
    for src in sources:
        for dst in targets:
            graph.add_edge(src, dst)


def _assign_group(name: str) -> Callable[[Context], None]:
    def init(context: Context) -> None:
        context.add_enhancer(Enhancer.set_group_if_unset(name))
    return init


class PipelineGroup(Container):
    """Container that pipelines, nested groups and contexts are declared on.

    Every declaring method takes an optional ``block`` that receives the new
    object and runs at once; the object is attached to this group before the
    block runs, so ``with``-style declarations work the same way.
    """

    def __init__(self, stack: ContextStack, settings: DictConfig) -> None:
        super().__init__()
        self.stack = stack
        self.settings = settings

    def pipeline(self, name: str, block: Optional[Callable[[PipelineNode], None]] = None) -> PipelineNode:
        """Create a pipeline and add it to this group."""
        node = PipelineNode(name, capture_site=bool(self.settings.diagnostics.capture_definition_site))
        self.children.append(node)
        if block is not None:
            block(node)
        return node

    def context(
        self,
        block: Optional[Callable[[Context], None]] = None,
        init: Optional[Callable[[Context], None]] = None,
    ) -> Context:
        """Open a context on this group.

        With ``block`` the context opens, runs ``init`` then ``block`` and
        closes before returning. Without it, use the result in a ``with``.
        """
        context = self.create_context(init)
        if block is not None:
            with context:
                block(context)
        return context

    def group(self, name: str, block: Optional[Callable[[Context], None]] = None) -> Context:
        """Context assigning ``name`` as group of every pipeline that has none yet."""
        return self.context(block, init=_assign_group(name))

    @abstractmethod
    def create_context(self, init: Optional[Callable[[Context], None]] = None) -> Context:
        ...

    def _declare(self, child: G, block: Optional[Callable[[G], None]]) -> G:
        self.children.append(child)
        if block is not None:
            block(child)
        return child

    def __enter__(self: G) -> G:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        return None

    def __repr__(self) -> str:
        names = ", ".join(p.name for p in self.all_pipelines())
        return f"{type(self).__name__}([{names}])"


class SequenceContainer(PipelineGroup):
    """Children run one after another."""

    def create_context(self, init: Optional[Callable[[Context], None]] = None) -> SequenceContext:
        return SequenceContext(self, self.stack, init)

    def add_to_graph(self, graph: nx.DiGraph) -> None:
        for child in self.children:
            child.add_to_graph(graph)
        if not self.children:
            logger.warning("Empty sequence contributes nothing to the graph")
            return

        for first, second in zip(self.children, self.children[1:]):
            _connect(graph, first.ending_nodes(), second.starting_nodes())
        logger.debug(f"Wired {self!r}: {len(self.children)} step(s)")

    def starting_nodes(self) -> List[PipelineNode]:
        if not self.children:
            raise PreconditionError("An empty sequence has no starting pipelines")
        return self.children[0].starting_nodes()

    def ending_nodes(self) -> List[PipelineNode]:
        if not self.children:
            raise PreconditionError("An empty sequence has no ending pipelines")
        return self.children[-1].ending_nodes()

    def parallel(self, block: Optional[Callable[["ParallelContainer"], None]] = None) -> "ParallelContainer":
        """Parallel step forked from the pipeline declared just before it, if any."""
        last = self.children[-1] if self.children else None
        fork = last if isinstance(last, PipelineNode) else None
        return self._declare(ParallelContainer(self.stack, self.settings, fork), block)


class ParallelContainer(PipelineGroup):
    """Children run independently, optionally all after one fork pipeline."""

    def __init__(
        self,
        stack: ContextStack,
        settings: DictConfig,
        fork: Optional[PipelineNode] = None,
    ) -> None:
        super().__init__(stack, settings)
        self.fork = fork

    def create_context(self, init: Optional[Callable[[Context], None]] = None) -> ParallelContext:
        return ParallelContext(self, self.stack, init)

    def add_to_graph(self, graph: nx.DiGraph) -> None:
        for child in self.children:
            child.add_to_graph(graph)
        if not self.children:
            logger.warning("Empty parallel block contributes nothing to the graph")
            return

        if self.fork is not None:
            for child in self.children:
                _connect(graph, self.fork.ending_nodes(), child.starting_nodes())
        logger.debug(f"Wired {self!r}: {len(self.children)} branch(es), fork={self.fork!r}")

    def starting_nodes(self) -> List[PipelineNode]:
        return [node for child in self.children for node in child.starting_nodes()]

    def ending_nodes(self) -> List[PipelineNode]:
        return [node for child in self.children for node in child.ending_nodes()]

    def sequence(self, block: Optional[Callable[[SequenceContainer], None]] = None) -> SequenceContainer:
        return self._declare(SequenceContainer(self.stack, self.settings), block)
