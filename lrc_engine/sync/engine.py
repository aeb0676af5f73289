from __future__ import annotations

import enum
import logging
from typing import Callable

from lrc_engine.lrc.model import LyricLine, TagSet
from lrc_engine.lrc.parse import parse_lrc
from lrc_engine.sync.timers import AsyncioTimers, TimerBackend, TimerHandle

logger = logging.getLogger(__name__)

LineCallback = Callable[[int, str], None]


class PlaybackState(enum.Enum):
    PAUSED = "paused"
    PLAYING = "playing"


class LrcEngine:
    """
    Fires `on_line(line_num, text)` for each lyric line at its due time.

    Logical playback position is `now - start_ref`; every delay is recomputed
    from a line's absolute time against that position, so a late timer never
    pushes later lines back. At most one timer is pending at any moment.

    The engine is single-threaded: call play/stop/toggle from the thread that
    runs the timer backend (the event loop for the default asyncio backend).
    """

    def __init__(
        self,
        lrc_text: str,
        on_line: LineCallback,
        *,
        timers: TimerBackend | None = None,
    ):
        doc = parse_lrc(lrc_text)
        self._tags = doc.tags
        self._lines = doc.lines
        self._on_line = on_line
        self._timers = timers

        self._state = PlaybackState.PAUSED
        self._cursor = 0
        self._start_ref: float | None = None
        self._paused_at: float | None = None
        self._pending: TimerHandle | None = None
        self._session = 0

    @property
    def tags(self) -> TagSet:
        return self._tags

    @property
    def lines(self) -> tuple[LyricLine, ...]:
        return self._lines

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def cursor(self) -> int:
        """
        Index of the next line that has not fired yet.

        Advanced before `on_line` runs, so inside the callback it reads `line_num + 1`.
        """
        return self._cursor

    @property
    def position_ms(self) -> float:
        if self._start_ref is None:
            return 0.0
        if self._state is PlaybackState.PLAYING:
            return self._now() - self._start_ref
        if self._paused_at is not None:
            return self._paused_at - self._start_ref
        return 0.0

    def play(self, start_time_ms: float = 0) -> None:
        if not self._lines:
            logger.debug("play() ignored: no timed lines")
            return

        # resolve the clock first so a failing backend leaves the state untouched
        now = self._now()

        self._cancel_pending()
        self._session += 1
        self._state = PlaybackState.PLAYING

        # past the end -> replay the last line
        cursor = len(self._lines) - 1
        for i, line in enumerate(self._lines):
            if line.time >= start_time_ms:
                cursor = i
                break
        self._cursor = cursor

        self._start_ref = now - start_time_ms
        self._paused_at = None
        logger.debug("play from %sms, cursor=%d", start_time_ms, cursor)
        self._schedule_next()

    def stop(self) -> None:
        was_playing = self._state is PlaybackState.PLAYING
        self._state = PlaybackState.PAUSED
        self._session += 1
        self._cancel_pending()
        if was_playing and self._start_ref is not None:
            self._paused_at = self._now()

    def toggle(self) -> None:
        if self._state is PlaybackState.PLAYING:
            # stop() records the pause instant
            self.stop()
            return

        if self._paused_at is None or self._start_ref is None:
            self.play(0)
        else:
            self.play(self._paused_at - self._start_ref)

    def _now(self) -> float:
        return self._backend().now_ms()

    def _backend(self) -> TimerBackend:
        if self._timers is None:
            self._timers = AsyncioTimers()
        return self._timers

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _schedule_next(self) -> None:
        if self._state is not PlaybackState.PLAYING or self._cursor >= len(self._lines):
            return
        assert self._start_ref is not None

        delay = self._lines[self._cursor].time - (self._now() - self._start_ref)
        session = self._session

        self._cancel_pending()
        self._pending = self._backend().call_later(delay, lambda: self._fire(session))

    def _fire(self, session: int) -> None:
        # a timer the backend failed to revoke must not fire a line
        if session != self._session or self._state is not PlaybackState.PLAYING:
            return
        self._pending = None

        idx = self._cursor
        self._cursor = idx + 1
        try:
            self._emit(idx)
        finally:
            # on_line may have called stop()/play() itself
            if session == self._session:
                self._schedule_next()

    def _emit(self, idx: int) -> None:
        if not (0 <= idx < len(self._lines)):
            return
        self._on_line(idx, self._lines[idx].text)
