from collections.abc import Callable, Coroutine
from pathlib import Path
from typing import Any, Protocol

# Receives the changed route module paths of one batch.
ChangeHandler = Callable[[set[Path]], Coroutine[Any, Any, None]]


class FileWatcherPort(Protocol):
    """Watches a project tree and hands changed TypeScript files to a ``ChangeHandler``."""

    async def start(self) -> None: ...

    async def stop(self) -> None: ...
