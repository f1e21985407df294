# picodsl/core/graph/validator.py
"""Graph validation run when a configuration is finalized.

Checks run in order and the first violation aborts: no repair, no
collection of further errors.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

import networkx as nx
from omegaconf import DictConfig

from ..errors import DuplicatePipelineError, StructuralValidationError
from ..model.pipeline import PipelineNode
from ..utils.config import load_settings

logger = logging.getLogger(__name__)


class GraphValidator:
    """Applies a series of checks to a completed pipeline graph."""

    def __init__(self, settings: Optional[DictConfig] = None, checks: Optional[List[str]] = None):
        """
        Args:
            settings: Build settings; the ``validation`` section selects checks.
            checks: Explicit list of checks, overriding the settings.
                    Known: ["stage_or_template", "unique_names"].
        """
        self.settings = settings if settings is not None else load_settings()
        self.checks = checks if checks is not None else self._checks_from_settings(self.settings)

    @staticmethod
    def _checks_from_settings(settings: DictConfig) -> List[str]:
        checks = []
        if settings.validation.require_stage_or_template:
            checks.append("stage_or_template")
        if settings.validation.unique_names:
            checks.append("unique_names")
        return checks

    def validate(self, graph: nx.DiGraph) -> None:
        for check in self.checks:
            if check == "stage_or_template":
                self._check_stage_or_template(graph)
            elif check == "unique_names":
                self._check_unique_names(graph)
            else:
                logger.warning(f"Unknown validation check: {check}")
        logger.info(
            f"Validated {graph.number_of_nodes()} pipeline(s), {graph.number_of_edges()} dependency edge(s)"
        )

    @staticmethod
    def _check_stage_or_template(graph: nx.DiGraph) -> None:
        for pipeline in graph.nodes:
            if pipeline.template is None and not pipeline.stages:
                raise StructuralValidationError(pipeline.name)

    @staticmethod
    def _check_unique_names(graph: nx.DiGraph) -> None:
        seen: Dict[str, PipelineNode] = {}
        for pipeline in graph.nodes:
            if seen.setdefault(pipeline.name, pipeline) is not pipeline:
                raise DuplicatePipelineError(pipeline.name)
