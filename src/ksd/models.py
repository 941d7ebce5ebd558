"""Core ksd data models and errors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


@dataclass(slots=True)
class SourceFile:
    """A declaration file located under the build root."""

    path: Path
    relative_path: Path


class DeclarationKind(str, Enum):
    FUNCTION = "function"
    TABLE = "table"


@dataclass(frozen=True, slots=True)
class Declaration:
    """Captures of a declaration line and the offset where the match ends."""

    name: Optional[str]
    inline_args: Optional[str]
    end: int


@dataclass(slots=True)
class TransformResult:
    """Everything needed to render one control-command script."""

    folder: str
    docstring: str
    name: str
    inline_args: str
    body: str
    kind: DeclarationKind = DeclarationKind.FUNCTION


class ErrorKind(str, Enum):
    MISSING_DECLARATION = "MissingDeclaration"
    MALFORMED_DECLARATION = "MalformedDeclaration"
    MALFORMED_CAPTURE = "MalformedCapture"
    UNESCAPED_QUOTE = "UnescapedQuote"


class KsdError(Exception):
    """Base class for errors reported to the user."""


class ExtractionError(KsdError):
    """A source file could not be turned into a script.

    ``line`` is the number of lines consumed before the failure. Columns are
    not tracked, so ``col`` is always 0.
    """

    def __init__(
        self,
        kind: ErrorKind,
        path: Path,
        detail: str,
        *,
        line: int = 0,
        col: int = 0,
    ) -> None:
        self.kind = kind
        self.path = path
        self.line = line
        self.col = col
        self.detail = detail
        super().__init__(f"{path} ({line},{col}): {kind.value}: {detail}")


class BuildIOError(KsdError):
    """File system or decoding failure, tagged with the operation and path."""

    def __init__(self, operation: str, path: Path, cause: Exception) -> None:
        self.operation = operation
        self.path = path
        self.cause = cause
        reason = getattr(cause, "strerror", None) or str(cause)
        super().__init__(f"{operation} {path}: {reason}")
