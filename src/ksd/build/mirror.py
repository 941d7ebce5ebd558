"""Mirror source paths into the output directory."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from ksd.models import BuildIOError

LOGGER = logging.getLogger(__name__)


def _default_file_mode() -> int:
    """Mode a plain ``open(..., "w")`` would create, given the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


class OutputMirror:
    """Writes scripts under ``out_root`` using the source's relative path."""

    def __init__(self, out_root: Path) -> None:
        self.out_root = out_root

    def output_path(self, relative_path: Path) -> Path:
        return self.out_root / relative_path

    def write(self, relative_path: Path, text: str) -> Path:
        """Write ``text`` for ``relative_path`` and return the output path.

        Content goes to a temporary sibling first and is renamed into place,
        so the target is either fully written or left untouched.
        """
        target = self.output_path(relative_path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise BuildIOError("creating directory", target.parent, exc) from exc

        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                newline="\n",
                dir=target.parent,
                prefix=f".{target.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                handle.write(text)
            # NamedTemporaryFile creates 0600 files.
            os.chmod(tmp_name, _default_file_mode())
            os.replace(tmp_name, target)
        except OSError as exc:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise BuildIOError("writing", target, exc) from exc

        LOGGER.debug("Wrote %s", target)
        return target
