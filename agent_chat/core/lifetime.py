# Role: Teardown signal for one mounted chat component. Timers started through a Lifetime are cancelled when it
# closes, and code resuming after an await checks `closed` before touching state.

from __future__ import annotations

import asyncio
from typing import Set


class Lifetime:
    def __init__(self) -> None:
        self._closed = False
        self._tasks: Set[asyncio.Task] = set()

    @property
    def closed(self) -> bool:
        return self._closed

    def track(self, task: asyncio.Task) -> asyncio.Task:
        if self._closed:
            task.cancel()
            return task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def sleep(self, delay: float) -> bool:
        """Sleep for `delay` seconds. Returns False if the lifetime closed first."""
        if self._closed:
            return False
        task = self.track(asyncio.ensure_future(asyncio.sleep(delay)))
        try:
            await task
        except asyncio.CancelledError:
            if not self._closed:
                # The caller itself was cancelled; let that propagate.
                raise
            return False
        return not self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()
