"""Streaming stage for build pipelines.

Feeds each incoming file through the conflict engine and yields the
accepted files once the source is exhausted. Nothing is yielded before
then, so an ``abort`` part-way through a stream emits no files at all.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterable, AsyncIterator, Iterable

from rich.console import Console

from writeguard.engine import Conflicts
from writeguard.errors import ConfigurationError
from writeguard.file import VirtualFile
from writeguard.schemas.conflict import ConflictOptions

logger = logging.getLogger(__name__)


async def _aiter(source: Iterable[VirtualFile] | AsyncIterable[VirtualFile]):
    if isinstance(source, AsyncIterable):
        async for item in source:
            yield item
    else:
        for item in source:
            yield item


async def conflict_stage(
    source: Iterable[VirtualFile] | AsyncIterable[VirtualFile],
    options: ConflictOptions | dict | str | None = None,
    console: Console | None = None,
) -> AsyncIterator[VirtualFile]:
    """Filter a stream of proposed files down to those approved for writing.

    Files without contents are dropped. The destination of each file is
    ``dest / file.basename``.

    Raises:
        ConfigurationError: If ``dest`` is not configured. Raised on the
            first iteration, before the source is consumed.
    """
    conflicts = Conflicts(options, console=console)
    if not conflicts.options.dest:
        raise ConfigurationError("expected destination path to be a string or function")

    async for file in _aiter(source):
        if conflicts.session.abort:
            continue
        if file.is_null():
            logger.debug("Dropping empty file %s", file.path)
            continue

        existing = VirtualFile(conflicts.options.resolve_dest(file), cwd=conflicts.options.cwd)
        await conflicts.detect(file, existing)

    for file in list(conflicts.session.files):
        yield file
