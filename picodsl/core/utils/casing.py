"""Identifier casing helpers."""
from __future__ import annotations

import re

_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def kebab_case(value: str) -> str:
    """camelCase / PascalCase -> kebab-case.

    "camelCaseTwice" -> "camel-case-twice", "CamelCase" -> "camel-case".
    Already hyphenated lower-case input is returned unchanged.
    """
    return _BOUNDARY.sub("-", value).lower()
