"""Declaration call-site capture for diagnostics."""
from __future__ import annotations

import os
import traceback
from traceback import FrameSummary
from typing import List

# Frames from anywhere inside the picodsl package are builder internals.
_PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def _is_internal(filename: str) -> bool:
    return os.path.abspath(filename).startswith(_PACKAGE_DIR + os.sep)


def capture_definition_site() -> List[FrameSummary]:
    """Current call stack (outermost first) without picodsl's own frames."""
    return [frame for frame in traceback.extract_stack() if not _is_internal(frame.filename)]
