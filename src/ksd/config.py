"""Build configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

DEFAULT_OUT_DIR = Path(".out")
SOURCE_EXTENSIONS: Tuple[str, ...] = (".kql", ".csl", ".kusto")
COMMENT_MARKER = "//"


@dataclass(slots=True)
class BuildConfig:
    out_dir: Path = DEFAULT_OUT_DIR
    extensions: Tuple[str, ...] = SOURCE_EXTENSIONS
    comment_marker: str = COMMENT_MARKER
    # End the docstring scan at the first code line instead of skipping it.
    stop_at_code: bool = False
    keep_going: bool = False

    def __post_init__(self) -> None:
        self.out_dir = Path(self.out_dir)
        self.extensions = tuple(ext.lower() for ext in self.extensions)

    def resolve_out_root(self, root: Path) -> Path:
        if self.out_dir.is_absolute():
            return self.out_dir
        return root / self.out_dir
