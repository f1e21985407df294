"""Pipeline data model: nodes, stages, templates, materials."""

from .container import Container
from .materials import Material, Materials
from .pipeline import GraphProcessor, Job, LockBehavior, PipelineNode, Stage, Template
from .site import capture_definition_site

__all__ = [
    "Container",
    "GraphProcessor",
    "Job",
    "LockBehavior",
    "Material",
    "Materials",
    "PipelineNode",
    "Stage",
    "Template",
    "capture_definition_site",
]
