from __future__ import annotations

import asyncio
import contextlib
import logging
from pathlib import Path

from watchfiles import Change, awatch

from route_params.core.languages import is_supported_file
from route_params.core.ports.watcher import ChangeHandler

logger = logging.getLogger(__name__)


class WatchfilesWatcher:
    """Watch a directory tree and hand changed TypeScript files to a callback.

    Deleted files are dropped since there is nothing left to lint. Implements
    the ``FileWatcherPort`` protocol.
    """

    def __init__(
        self,
        directory: str | Path,
        on_change: ChangeHandler,
    ) -> None:
        self._directory = Path(directory)
        self._on_change = on_change
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._watch())
        logger.info("Watcher started for %s", self._directory)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Watcher stopped for %s", self._directory)

    async def _watch(self) -> None:
        async for changes in awatch(self._directory):
            paths = {
                Path(p)
                for change, p in changes
                if change != Change.deleted and is_supported_file(Path(p)) and "node_modules" not in Path(p).parts
            }
            if paths:
                logger.info("Detected changes in %d file(s)", len(paths))
                try:
                    await self._on_change(paths)
                except Exception:
                    logger.exception("Error in watcher callback")
