# picodsl/core/errors.py
"""Errors raised while declaring, finalizing or querying a pipeline configuration.

All of them abort the current build; nothing here is retried or recovered.
"""
from __future__ import annotations

from traceback import FrameSummary
from typing import List, Optional


class PicoDslError(Exception):
    """Base class for all picodsl errors."""


class StructuralValidationError(PicoDslError, ValueError):
    """A finalized configuration contains an underspecified pipeline."""

    def __init__(self, pipeline_name: str, message: Optional[str] = None):
        self.pipeline_name = pipeline_name
        super().__init__(message or f"pipeline {pipeline_name} has neither template nor stage")


class DuplicatePipelineError(StructuralValidationError):
    """Two distinct pipelines in one graph share a name."""

    def __init__(self, pipeline_name: str):
        super().__init__(pipeline_name, f"pipeline name '{pipeline_name}' is declared more than once")


class PreconditionError(PicoDslError, ValueError):
    """An operation was invoked on a declaration that cannot support it."""


class PathNotFoundError(PicoDslError, LookupError):
    """No matching candidate has a dependency path to the target pipeline.

    ``definition_site`` holds the call-site frames captured when the target
    pipeline was declared, with library-internal frames removed.
    """

    def __init__(self, target_name: str, definition_site: Optional[List[FrameSummary]] = None):
        self.target_name = target_name
        self.definition_site = list(definition_site or [])
        message = f"no path found to {target_name}"
        if self.definition_site:
            frame = self.definition_site[-1]
            message += f" (declared at {frame.filename}:{frame.lineno} in {frame.name})"
        super().__init__(message)

    def format_definition_site(self) -> str:
        """Render the captured declaration frames like a traceback body."""
        return "".join(
            f'  File "{f.filename}", line {f.lineno}, in {f.name}\n'
            + (f"    {f.line}\n" if f.line else "")
            for f in self.definition_site
        )
