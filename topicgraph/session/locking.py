"""
Session Lock

asyncio.Lock that is created inside the event loop that first waits on
it. A session may be built outside any loop and driven by successive
`asyncio.run` calls; each loop gets its own lock.
"""

import asyncio
from typing import Optional


class SessionLock:
    """FIFO mutation lock bound to the running event loop."""

    def __init__(self):
        self._lock: Optional[asyncio.Lock] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def _current(self) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        if self._lock is None or self._loop is not loop:
            self._lock = asyncio.Lock()
            self._loop = loop
        return self._lock

    def locked(self) -> bool:
        return self._lock is not None and self._lock.locked()

    async def __aenter__(self):
        await self._current().acquire()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self._lock.release()
