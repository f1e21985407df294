"""Pipeline topology graph: groups, contexts, graph construction and queries.

Sequences and parallel blocks of pipelines compile into a networkx DiGraph
whose edges mean "must complete before".
"""

from .builder import GraphBuilder, PipelineConfig, gocd
from .context import Context, ContextStack, Enhancer, EnhancerKind, ParallelContext, SequenceContext
from .groups import ParallelContainer, PipelineGroup, SequenceContainer
from .paths import PathFinder, path_to_pipeline
from .validator import GraphValidator
from .visualize import PipelineGraph

__all__ = [
    "Context",
    "ContextStack",
    "Enhancer",
    "EnhancerKind",
    "GraphBuilder",
    "GraphValidator",
    "ParallelContainer",
    "ParallelContext",
    "PathFinder",
    "PipelineConfig",
    "PipelineGraph",
    "PipelineGroup",
    "SequenceContainer",
    "SequenceContext",
    "gocd",
    "path_to_pipeline",
]
