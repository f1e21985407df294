from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Material:
    """One material entry; ``attributes`` are passed through to the renderer untouched."""
    kind: str
    attributes: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Materials:
    """Materials of a pipeline. Opaque to graph construction."""
    entries: List[Material] = field(default_factory=list)

    def add(self, kind: str, **attributes: Any) -> Material:
        material = Material(kind, dict(attributes))
        self.entries.append(material)
        return material

    def git(self, url: str, branch: str = "master", **attributes: Any) -> Material:
        return self.add("git", url=url, branch=branch, **attributes)

    def upstream(self, pipeline: str, stage: Optional[str] = None, **attributes: Any) -> Material:
        """Dependency on another pipeline (``stage`` defaults to its last stage at render time)."""
        return self.add("dependency", pipeline=pipeline, stage=stage, **attributes)

    def __len__(self) -> int:
        return len(self.entries)
