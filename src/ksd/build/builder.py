"""Build pipeline: walk sources, extract declarations, write scripts."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ksd.build.mirror import OutputMirror
from ksd.config import BuildConfig
from ksd.extraction.extractor import DeclarationExtractor, render_script
from ksd.models import BuildIOError, KsdError, SourceFile
from ksd.utils.files import iter_source_paths

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class BuildStats:
    built: int = 0
    failed: int = 0
    outputs: List[Path] = field(default_factory=list)
    errors: List[KsdError] = field(default_factory=list)

    def record_success(self, output: Path) -> None:
        self.built += 1
        self.outputs.append(output)

    def record_failure(self, error: KsdError) -> None:
        self.failed += 1
        self.errors.append(error)


class Builder:
    """Coordinates building every source file under a root directory."""

    def __init__(
        self,
        root: Path,
        config: Optional[BuildConfig] = None,
        *,
        extractor: Optional[DeclarationExtractor] = None,
    ) -> None:
        self.root = root
        self.config = config if config is not None else BuildConfig()
        self.out_root = self.config.resolve_out_root(root)
        self.mirror = OutputMirror(self.out_root)
        self.extractor = extractor or DeclarationExtractor(
            comment_marker=self.config.comment_marker,
            stop_at_code=self.config.stop_at_code,
        )

    def source_files(self) -> List[SourceFile]:
        return [
            SourceFile(path=path, relative_path=path.relative_to(self.root))
            for path in iter_source_paths(
                self.root, self.config.extensions, exclude=self.out_root
            )
        ]

    def build(self) -> BuildStats:
        """Build all sources.

        Stops at the first failure unless ``keep_going`` is configured, in
        which case every error is collected on the returned stats. Scripts
        written before a failure are kept.
        """
        stats = BuildStats()
        sources = self.source_files()
        if not sources:
            LOGGER.warning("No source files found under %s", self.root)
            return stats

        for source in sources:
            try:
                LOGGER.info("Building: %s", source.relative_path)
                stats.record_success(self.build_file(source))
            except KsdError as exc:
                LOGGER.debug("Failed to build %s: %s", source.relative_path, exc)
                if not self.config.keep_going:
                    raise
                stats.record_failure(exc)

        return stats

    def build_file(self, source: SourceFile) -> Path:
        """Build a single source file and return the written script path."""
        try:
            with source.path.open("r", encoding="utf-8", newline="\n") as handle:
                result = self.extractor.extract(handle, source.relative_path)
        except (OSError, UnicodeDecodeError) as exc:
            raise BuildIOError("reading", source.relative_path, exc) from exc

        return self.mirror.write(source.relative_path, render_script(result))
