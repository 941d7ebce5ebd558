"""Compiled patterns for ``let NAME = ARGS`` declaration lines."""

from __future__ import annotations

import re
from typing import Optional

from ksd.models import Declaration

DECLARATION_REGEX = r"let\s+(\w+)\s+=\s+(.+)"
# Applied to everything after ``=``; the rows between the brackets may span lines.
DATATABLE_REGEX = r"datatable\s*(\([^)]*\))\s*\[([^\]]*)\]"


class PatternMatcher:
    """Immutable wrapper around one compiled declaration pattern.

    Callers pass a single line without its terminator; the pattern never sees
    the rest of the file, so the argument capture cannot cross a line break.
    """

    __slots__ = ("_regex",)

    def __init__(self, pattern: str = DECLARATION_REGEX) -> None:
        self._regex = re.compile(pattern)

    @property
    def pattern(self) -> str:
        return self._regex.pattern

    def match(self, text: str) -> Optional[Declaration]:
        """Return the captures and end offset of the first match in ``text``."""
        found = self._regex.search(text)
        if found is None:
            return None
        return Declaration(name=found.group(1), inline_args=found.group(2), end=found.end())


DECLARATION_MATCHER = PatternMatcher()
DATATABLE_PATTERN = re.compile(DATATABLE_REGEX)
DATATABLE_KEYWORD = re.compile(r"datatable\b")
