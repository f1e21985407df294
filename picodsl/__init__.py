# picodsl/__init__.py
"""picodsl: declare continuous-delivery pipeline topologies in Python.

Pipelines are composed into sequences and parallel blocks; the declaration
compiles into a dependency graph that an external renderer turns into CI
configuration.

Usage::

    from picodsl import gocd

    def declare(config):
        with config.sequence() as seq:
            seq.pipeline("build", lambda p: p.stage("compile"))
            with seq.parallel() as par:
                par.pipeline("test1", lambda p: p.stage("run"))
                par.pipeline("test2", lambda p: p.stage("run"))
            seq.pipeline("deploy", lambda p: p.stage("rollout"))

    config = gocd(declare)
    config.graph        # networkx.DiGraph of PipelineNode
"""
__version__ = "0.1.0"

from .core.errors import (
    DuplicatePipelineError,
    PathNotFoundError,
    PicoDslError,
    PreconditionError,
    StructuralValidationError,
)
from .core.graph import (
    Context,
    ContextStack,
    Enhancer,
    EnhancerKind,
    GraphBuilder,
    GraphValidator,
    ParallelContainer,
    ParallelContext,
    PathFinder,
    PipelineConfig,
    PipelineGraph,
    SequenceContainer,
    SequenceContext,
    gocd,
    path_to_pipeline,
)
from .core.model import Job, LockBehavior, Material, Materials, PipelineNode, Stage, Template
from .core.utils import configure_logging, kebab_case, load_settings

__all__ = [
    "__version__",
    "Context",
    "ContextStack",
    "DuplicatePipelineError",
    "Enhancer",
    "EnhancerKind",
    "GraphBuilder",
    "GraphValidator",
    "Job",
    "LockBehavior",
    "Material",
    "Materials",
    "ParallelContainer",
    "ParallelContext",
    "PathFinder",
    "PathNotFoundError",
    "PicoDslError",
    "PipelineConfig",
    "PipelineGraph",
    "PipelineNode",
    "PreconditionError",
    "SequenceContainer",
    "SequenceContext",
    "Stage",
    "StructuralValidationError",
    "Template",
    "configure_logging",
    "gocd",
    "kebab_case",
    "load_settings",
    "path_to_pipeline",
]
