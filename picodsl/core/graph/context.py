# picodsl/core/graph/context.py
"""Declaration contexts: scoped metadata applied to every pipeline of a group.

A context is opened on a group (sequence or parallel), collects enhancers
while its body runs and, when it closes, applies each enhancer in
registration order to every pipeline currently in that group, including
pipelines declared before the context was opened.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Iterator, List, Optional

from ..errors import PreconditionError
from ..model.pipeline import PipelineNode

if TYPE_CHECKING:
    from .groups import ParallelContainer, PipelineGroup, SequenceContainer

logger = logging.getLogger(__name__)


class EnhancerKind(str, Enum):
    SET_GROUP_IF_UNSET = "set_group_if_unset"
    GENERIC = "generic"


@dataclass(frozen=True)
class Enhancer:
    """Deferred per-pipeline mutation applied when its context closes."""
    kind: EnhancerKind
    group: Optional[str] = None
    action: Optional[Callable[[PipelineNode], None]] = None

    @classmethod
    def set_group_if_unset(cls, group: str) -> "Enhancer":
        return cls(EnhancerKind.SET_GROUP_IF_UNSET, group=group)

    @classmethod
    def generic(cls, action: Callable[[PipelineNode], None]) -> "Enhancer":
        return cls(EnhancerKind.GENERIC, action=action)

    def apply(self, pipeline: PipelineNode) -> None:
        if self.kind is EnhancerKind.SET_GROUP_IF_UNSET:
            # first assignment wins: inner contexts close (and assign) first
            if pipeline.group is None:
                pipeline.group = self.group
        else:
            self.action(pipeline)


class ContextStack:
    """Open contexts of one configuration build. Never shared between builds."""

    def __init__(self) -> None:
        self._contexts: List[Context] = []

    @property
    def current(self) -> Optional["Context"]:
        return self._contexts[-1] if self._contexts else None

    def push(self, context: "Context") -> None:
        self._contexts.append(context)

    def pop(self, context: "Context") -> None:
        if self.current is not context:
            raise PreconditionError("Contexts must be closed in reverse order of opening")
        self._contexts.pop()

    def __len__(self) -> int:
        return len(self._contexts)

    def __iter__(self) -> Iterator["Context"]:
        return iter(self._contexts)


class Context:
    """Scope object handed to a context body.

    Usable as ``with group.context() as ctx:`` or through the ``block``
    argument of ``group.context(block)``.
    """

    def __init__(
        self,
        owner: "PipelineGroup",
        stack: ContextStack,
        init: Optional[Callable[["Context"], None]] = None,
    ) -> None:
        self.owner = owner
        self.stack = stack
        self.data: Dict[str, str] = {}
        self.enhancers: List[Enhancer] = []
        self._init = init
        self._state = "new"

    def add_enhancer(self, enhancer: Enhancer) -> None:
        self.enhancers.append(enhancer)

    def for_all(self, enhance: Callable[[PipelineNode], None]) -> None:
        """Apply ``enhance`` to every pipeline of the owning group when this context closes."""
        self.add_enhancer(Enhancer.generic(enhance))

    def pipeline(self, name: str, block: Optional[Callable[[PipelineNode], None]] = None) -> PipelineNode:
        return self.owner.pipeline(name, block)

    def group(self, name: str, block: Optional[Callable[["Context"], None]] = None) -> "Context":
        return self.owner.group(name, block)

    def context(
        self,
        block: Optional[Callable[["Context"], None]] = None,
        init: Optional[Callable[["Context"], None]] = None,
    ) -> "Context":
        return self.owner.context(block, init)

    # ==================== LIFECYCLE ====================

    def open(self) -> None:
        if self._state != "new":
            raise PreconditionError(f"Context on {self.owner!r} was already opened")
        self._state = "open"
        self.stack.push(self)
        logger.debug(f"Opened context on {self.owner!r} (depth {len(self.stack)})")
        if self._init is not None:
            self._init(self)

    def close(self) -> None:
        if self._state != "open":
            raise PreconditionError(f"Context on {self.owner!r} is not open")
        if self.enhancers:
            pipelines = self.owner.all_pipelines()
            for pipeline in pipelines:
                for enhancer in self.enhancers:
                    enhancer.apply(pipeline)
            logger.debug(
                f"Applied {len(self.enhancers)} enhancer(s) to {len(pipelines)} pipeline(s) of {self.owner!r}"
            )
        self.stack.pop(self)
        self._state = "closed"

    def __enter__(self) -> "Context":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
        elif self._state == "open" and self.stack.current is self:
            self.stack.pop(self)
            self._state = "closed"


class SequenceContext(Context):
    owner: "SequenceContainer"

    def parallel(self, block: Optional[Callable[["ParallelContainer"], None]] = None) -> "ParallelContainer":
        return self.owner.parallel(block)


class ParallelContext(Context):
    owner: "ParallelContainer"

    def sequence(self, block: Optional[Callable[["SequenceContainer"], None]] = None) -> "SequenceContainer":
        return self.owner.sequence(block)
