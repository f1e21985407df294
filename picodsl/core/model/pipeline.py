# picodsl/core/model/pipeline.py
"""PipelineNode: one declared pipeline and its graph identity."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from traceback import FrameSummary
from typing import Any, Callable, Dict, List, Optional

import networkx as nx

from ..errors import PreconditionError
from .container import Container
from .materials import Materials
from .site import capture_definition_site

GraphProcessor = Callable[["PipelineNode", nx.DiGraph], None]


class LockBehavior(str, Enum):
    UNLOCK_WHEN_FINISHED = "unlockWhenFinished"
    LOCK_ON_FAILURE = "lockOnFailure"
    NONE = "none"


@dataclass(frozen=True)
class Template:
    """Reference to a pipeline template; ``stage`` is the template's last stage."""
    name: str
    stage: str


@dataclass
class Job:
    name: str
    tasks: List[str] = field(default_factory=list)


@dataclass
class Stage:
    """A pipeline stage. Its body (jobs, attributes) is opaque to graph construction."""
    name: str
    manual_approval: bool = False
    jobs: Dict[str, Job] = field(default_factory=dict)
    attributes: Dict[str, Any] = field(default_factory=dict)

    def job(self, name: str, *tasks: str) -> Job:
        job = Job(name, list(tasks))
        self.jobs[name] = job
        return job


class PipelineNode(Container):
    """Leaf of the topology. Compared and hashed by identity, not by name.

    Mutated by its own declaration block and by context enhancers; treated as
    read-only once the owning configuration is finalized.
    """

    def __init__(self, name: str, *, capture_site: bool = True) -> None:
        super().__init__()
        self.name = name
        self.stages: List[Stage] = []
        self.template: Optional[Template] = None
        self.tags: Dict[str, str] = {}
        self.parameters: Dict[str, str] = {}
        self.environment_variables: Dict[str, str] = {}
        self.lock_behavior: LockBehavior = LockBehavior.UNLOCK_WHEN_FINISHED
        self.group: Optional[str] = None
        self.material_config: Optional[Materials] = None
        self.graph_processors: List[GraphProcessor] = []
        self.definition_site: List[FrameSummary] = capture_definition_site() if capture_site else []

    # ==================== DECLARATION ====================

    def stage(
        self,
        name: str,
        manual_approval: bool = False,
        block: Optional[Callable[[Stage], None]] = None,
    ) -> Stage:
        stage = Stage(name, manual_approval)
        if block is not None:
            block(stage)
        self.stages.append(stage)
        return stage

    def materials(self, block: Optional[Callable[[Materials], None]] = None) -> Materials:
        materials = Materials()
        if block is not None:
            block(materials)
        self.material_config = materials
        return materials

    def tag(self, key: str, value: str) -> None:
        self.tags[key] = value

    def parameter(self, key: str, value: str) -> None:
        self.parameters[key] = value

    def environment(self, key: str, value: Any) -> None:
        self.environment_variables[key] = value if isinstance(value, str) else str(value)

    def add_graph_processor(self, processor: GraphProcessor) -> None:
        """Run ``processor(self, graph)`` once the whole graph is built."""
        self.graph_processors.append(processor)

    @property
    def last_stage(self) -> str:
        if self.template is None and not self.stages:
            raise PreconditionError(f"Pipeline '{self.name}' has neither template nor stages")
        if self.template is not None:
            return self.template.stage
        return self.stages[-1].name

    # ==================== CONTAINER ====================

    def add_to_graph(self, graph: nx.DiGraph) -> None:
        graph.add_node(self)

    def starting_nodes(self) -> List["PipelineNode"]:
        return [self]

    def ending_nodes(self) -> List["PipelineNode"]:
        return [self]

    def all_pipelines(self) -> List["PipelineNode"]:
        return [self]

    def run_graph_processors(self, graph: nx.DiGraph) -> None:
        for processor in self.graph_processors:
            processor(self, graph)

    def __enter__(self) -> "PipelineNode":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        return None

    def __repr__(self) -> str:
        return f"PipelineNode({self.name!r})"
