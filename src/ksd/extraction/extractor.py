"""Turn ``let`` function declarations into ``.create-or-alter`` scripts.

A source file is a run of ``//`` comment lines followed by a single
declaration::

    // Returns x plus one.
    let Foo = (x: long) { x + 1 }

The comments directly above the declaration become the docstring, and the
declaration is rewritten as a control command that keeps the function body
untouched::

    .create-or-alter function with (folder="math", docstring="Returns x plus one.") Foo(x: long) { x + 1 }

Table declarations (``let T = datatable (A:string) []``) become
``.create-merge table`` commands; rows inside the brackets are ignored.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, TextIO, Tuple

from ksd.config import COMMENT_MARKER
from ksd.extraction.pattern import (
    DATATABLE_KEYWORD,
    DATATABLE_PATTERN,
    DECLARATION_MATCHER,
    PatternMatcher,
)
from ksd.models import DeclarationKind, ErrorKind, ExtractionError, TransformResult
from ksd.utils.files import relative_folder

LOGGER = logging.getLogger(__name__)

SCRIPT_HEADER = '.create-or-alter function with (folder="{folder}", docstring="{docstring}") {name}{inline_args}'
TABLE_HEADER = '.create-merge table {name}{inline_args} with (folder="{folder}", docstring="{docstring}")\n'


def render_script(result: TransformResult) -> str:
    """Render the control-command header followed by the untouched body."""
    template = TABLE_HEADER if result.kind is DeclarationKind.TABLE else SCRIPT_HEADER
    header = template.format(
        folder=result.folder,
        docstring=result.docstring,
        name=result.name,
        inline_args=result.inline_args,
    )
    return header + result.body


class DeclarationExtractor:
    """Extracts the docstring and declaration of one source file."""

    def __init__(
        self,
        matcher: PatternMatcher = DECLARATION_MATCHER,
        *,
        comment_marker: str = COMMENT_MARKER,
        stop_at_code: bool = False,
    ) -> None:
        self.matcher = matcher
        self.comment_marker = comment_marker
        self.stop_at_code = stop_at_code

    def extract(self, stream: TextIO, relative_path: Path) -> TransformResult:
        """Read ``stream`` to the end and build its transform result.

        ``stream`` should not translate newlines (open it with
        ``newline="\\n"``) so the body is carried through exactly.
        """
        comments, declaration_line = self._locate_declaration(stream, relative_path)
        consumed = len(comments)
        docstring = self.docstring_from(comments)

        # Only the declaration's own line is matched; everything after the
        # match, including the rest of this line, is body.
        head, newline, tail = declaration_line.partition("\n")
        found = self.matcher.match(head)
        if found is None:
            raise ExtractionError(
                ErrorKind.MALFORMED_DECLARATION,
                relative_path,
                f"could not parse let statement based on regex: {self.matcher.pattern}",
                line=consumed,
            )
        if found.name is None or found.inline_args is None:
            missing = "name" if found.name is None else "args"
            raise ExtractionError(
                ErrorKind.MALFORMED_CAPTURE,
                relative_path,
                f"missing {missing}",
                line=consumed,
            )

        folder = relative_folder(relative_path)
        for label, value in (("folder", folder), ("docstring", docstring)):
            if '"' in value:
                raise ExtractionError(
                    ErrorKind.UNESCAPED_QUOTE,
                    relative_path,
                    f"{label} contains a double quote: {value}",
                    line=consumed,
                )
            # A trailing backslash would escape the closing quote of the header.
            if value.endswith("\\"):
                raise ExtractionError(
                    ErrorKind.UNESCAPED_QUOTE,
                    relative_path,
                    f"{label} ends with a backslash: {value}",
                    line=consumed,
                )

        LOGGER.debug("%s: name=%s docstring=%r", relative_path, found.name, docstring)
        body = head[found.end :] + newline + tail + stream.read()
        if DATATABLE_KEYWORD.match(found.inline_args):
            return self._table_result(
                folder, docstring, found.name, found.inline_args + body, relative_path, consumed
            )
        return TransformResult(
            folder=folder,
            docstring=docstring,
            name=found.name,
            inline_args=found.inline_args,
            body=body,
        )

    def docstring_from(self, comments: List[str]) -> str:
        """Join the comment lines directly above the declaration.

        Scans upwards from the declaration and stops at the first blank line.
        Lines that are not comments are skipped unless ``stop_at_code`` is set.
        """
        parts: List[str] = []
        for raw in reversed(comments):
            line = raw.strip()
            if not line:
                break
            if line.startswith(self.comment_marker):
                parts.append(line[len(self.comment_marker) :].lstrip())
            elif self.stop_at_code:
                break
        parts.reverse()
        return " ".join(parts).rstrip()

    def _table_result(
        self,
        folder: str,
        docstring: str,
        name: str,
        definition: str,
        relative_path: Path,
        consumed: int,
    ) -> TransformResult:
        table = DATATABLE_PATTERN.match(definition)
        if table is None:
            raise ExtractionError(
                ErrorKind.MALFORMED_DECLARATION,
                relative_path,
                "expected 'datatable (<columns>) []' for table declaration",
                line=consumed,
            )
        rows = table.group(2).strip()
        if rows:
            LOGGER.warning("%s: datatable rows are not synced and will be ignored: %s", relative_path, rows)

        return TransformResult(
            folder=folder,
            docstring=docstring,
            name=name,
            inline_args=table.group(1),
            body="",
            kind=DeclarationKind.TABLE,
        )

    def _locate_declaration(self, stream: TextIO, relative_path: Path) -> Tuple[List[str], str]:
        comments: List[str] = []
        for line in iter(stream.readline, ""):
            if line.lstrip().startswith("let"):
                return comments, line
            comments.append(line)

        raise ExtractionError(
            ErrorKind.MISSING_DECLARATION,
            relative_path,
            "no declaration found before end of file",
            line=len(comments),
        )
