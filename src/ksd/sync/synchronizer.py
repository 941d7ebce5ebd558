"""Push built scripts to a cluster database (not implemented yet)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List
from urllib.parse import urlparse

from ksd.models import KsdError
from ksd.utils.files import iter_source_paths

LOGGER = logging.getLogger(__name__)


class SyncNotImplementedError(KsdError):
    """Raised once the sync plan is known; no scripts are pushed."""


@dataclass(slots=True)
class Connection:
    endpoint: str
    database: str


@dataclass(slots=True)
class SyncItem:
    script: Path
    relative_path: Path


def parse_endpoint(url: str) -> Connection:
    """Split ``https://<cluster>/<database>`` into cluster endpoint and database."""
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError(f"invalid cluster endpoint: {url!r}")

    database = parsed.path.strip("/")
    if not database:
        raise ValueError(
            "endpoint must target a database, and not a cluster. "
            "Does the endpoint end with the database name?"
        )
    return Connection(endpoint=f"{parsed.scheme}://{parsed.netloc}", database=database)


def plan_sync(out_root: Path, extensions: Iterable[str]) -> List[SyncItem]:
    """List built scripts under ``out_root`` in the order they would be pushed."""
    return [
        SyncItem(script=path, relative_path=path.relative_to(out_root))
        for path in iter_source_paths(out_root, extensions)
    ]


def synchronize(connection: Connection, items: List[SyncItem]) -> None:
    for item in items:
        LOGGER.debug("Would sync %s to %s", item.relative_path, connection.database)
    raise SyncNotImplementedError(
        f"sync is not implemented yet, {len(items)} script(s) were not pushed "
        f"to {connection.endpoint}/{connection.database}"
    )
