from __future__ import annotations

import asyncio
from typing import Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class TimerBackend(Protocol):
    """
    Deferred-execution primitive the engine schedules on.

    `now_ms` must be monotonic; `call_later` treats a delay <= 0 as "as soon as possible".
    """

    def now_ms(self) -> float: ...

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioTimers:
    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self.loop = loop or asyncio.get_running_loop()

    def now_ms(self) -> float:
        return self.loop.time() * 1000.0

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(max(delay_ms, 0.0) / 1000.0, callback)
