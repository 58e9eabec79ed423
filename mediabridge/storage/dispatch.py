"""Fire-and-forget boundary for external sends.

The share chooser, directory picker and reindex notifier are handed a
message and never awaited by the caller. Each send becomes an asyncio task
owned by a DispatchChannel; failures are logged when the task finishes.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

from mediabridge.storage.errors import ExternalDispatchFailedError

logger = logging.getLogger(__name__)


class DispatchChannel:
    """Schedules coroutines without awaiting them.

    Keeps a reference to every in-flight task so it is not garbage collected
    before it runs; ``drain()`` waits for them on shutdown.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def send(self, message: Coroutine[Any, Any, Any], label: str) -> None:
        """Schedule ``message`` and return immediately.

        Args:
            message: Coroutine performing the external send.
            label: Short description used in log lines.
        """
        try:
            task = asyncio.get_running_loop().create_task(message)
        except RuntimeError as e:
            message.close()
            failure = ExternalDispatchFailedError(f"{label}: no running event loop")
            logger.warning(f"{failure} ({e})")
            return
        self._tasks.add(task)
        task.add_done_callback(lambda t: self._finished(t, label))

    def _finished(self, task: asyncio.Task[Any], label: str) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.debug(f"Dispatch cancelled: {label}")
            return
        exc = task.exception()
        if exc is not None:
            failure = ExternalDispatchFailedError(f"{label}: {exc}")
            logger.warning(f"{failure}")
        else:
            logger.debug(f"Dispatched: {label}")

    async def drain(self) -> None:
        """Wait for all in-flight sends to finish. Failures stay swallowed."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
