# picodsl/core/graph/paths.py
"""Dependency-path queries over a finalized pipeline graph."""
from __future__ import annotations

import logging
from typing import Callable, List, Optional

import networkx as nx
from omegaconf import DictConfig

from ..errors import PathNotFoundError
from ..model.pipeline import PipelineNode
from ..utils.config import DEFAULT_SETTINGS

logger = logging.getLogger(__name__)

Matcher = Callable[[PipelineNode], bool]


class PathFinder:
    """Shortest dependency paths from matching ancestors to a pipeline.

    The graph is only read, so one finder (or several) may query a frozen
    graph concurrently.
    """

    def __init__(
        self,
        graph: nx.DiGraph,
        separator: str = DEFAULT_SETTINGS["path"]["separator"],
        tie_break: str = DEFAULT_SETTINGS["path"]["tie_break"],
    ):
        self.graph = graph
        self.separator = separator
        self.tie_break = tie_break

    @classmethod
    def from_settings(cls, graph: nx.DiGraph, settings: DictConfig) -> "PathFinder":
        return cls(graph, separator=settings.path.separator, tie_break=settings.path.tie_break)

    def candidates(self, matcher: Matcher) -> List[PipelineNode]:
        """Matching pipelines in declaration order, or by name for ``tie_break="name"``."""
        matched = [node for node in self.graph.nodes if matcher(node)]
        if self.tie_break == "name":
            matched.sort(key=lambda node: node.name)
        return matched

    def shortest_path(self, target: PipelineNode, matcher: Matcher) -> List[PipelineNode]:
        """Fewest-edge path from any matching pipeline to ``target`` (both ends included).

        Equal lengths keep the first candidate in ``candidates()`` order.
        """
        if target not in self.graph:
            raise PathNotFoundError(target.name, target.definition_site)

        candidates = self.candidates(matcher)
        if not candidates:
            logger.warning(f"No pipeline matches the path query towards '{target.name}'")

        best: Optional[List[PipelineNode]] = None
        for candidate in candidates:
            try:
                path = nx.shortest_path(self.graph, candidate, target)
            except nx.NetworkXNoPath:
                continue
            if best is None or len(path) < len(best):
                best = path

        if best is None:
            raise PathNotFoundError(target.name, target.definition_site)
        return best

    def path_to_pipeline(self, target: PipelineNode, matcher: Matcher) -> str:
        """Names of the edge sources along the shortest path, joined by the separator.

        The target itself is not part of the result.
        """
        path = self.shortest_path(target, matcher)
        return self.separator.join(node.name for node in path[:-1])


def path_to_pipeline(
    graph: nx.DiGraph,
    target: PipelineNode,
    matcher: Matcher,
    separator: str = DEFAULT_SETTINGS["path"]["separator"],
    tie_break: str = DEFAULT_SETTINGS["path"]["tie_break"],
) -> str:
    """e.g. for A -> B -> C and a matcher selecting A, the path to C is "A/B"."""
    return PathFinder(graph, separator, tie_break).path_to_pipeline(target, matcher)
