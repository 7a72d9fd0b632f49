"""Tick-driven animation scheduling.

One logical timer drives all time-based state. Subscribers register
with their own cadence (``interval_ms``) and are invoked from inside
the timer callback, at most once per base tick. Ticks are atomic: a
tick that arrives while another is still running is skipped, and
``stop()`` only prevents further ticks.

Two subscribers ship with the module:

- ``PlaybackController`` steps a discrete year index (play / pause /
  step / seek) and hands the selected frame to a callback.
- ``OrbitAnimator`` advances every orbit's phase angle continuously.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, Optional, Protocol, TypeVar

from launchatlas.core.orbit_geometry import OrbitGeometryEngine
from launchatlas.utils.constants import FRAME_INTERVAL_MS, PLAYBACK_INTERVAL_MS

logger = logging.getLogger(__name__)

FrameT = TypeVar("FrameT")


class Timer(Protocol):
    """Periodic timer abstraction injected into the scheduler."""

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None: ...

    def stop(self) -> None: ...

    @property
    def is_active(self) -> bool: ...


class ManualTimer:
    """Timer driven by explicit ``fire()`` calls instead of a clock."""

    def __init__(self) -> None:
        self._callback: Optional[Callable[[], None]] = None
        self.interval_ms: Optional[int] = None

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        self.interval_ms = interval_ms
        self._callback = callback

    def stop(self) -> None:
        self._callback = None

    @property
    def is_active(self) -> bool:
        return self._callback is not None

    def fire(self, times: int = 1) -> None:
        """Deliver ``times`` ticks; stops early once the timer is stopped."""
        for _ in range(times):
            if self._callback is None:
                return
            self._callback()


class TickSubscriber(Protocol):
    """Anything with ``on_tick``.

    A subscriber may also expose a boolean ``is_active``; while it is
    False the scheduler skips it and its cadence restarts from zero, so
    the first firing after reactivation is a full interval away.
    """

    def on_tick(self) -> None: ...


@dataclass
class _Subscription:
    subscriber: TickSubscriber
    interval_ms: int
    elapsed_ms: int = 0


class AnimationScheduler:
    """Single timer fanning out to subscribers with independent cadences."""

    def __init__(self, timer: Timer, base_interval_ms: int = FRAME_INTERVAL_MS):
        if base_interval_ms <= 0:
            raise ValueError("base_interval_ms must be positive")
        self._timer = timer
        self._base_interval_ms = base_interval_ms
        self._subscriptions: list[_Subscription] = []
        self._in_tick = False
        self._tick_count = 0

    def subscribe(self, subscriber: TickSubscriber, interval_ms: Optional[int] = None) -> None:
        """Register ``subscriber``; it fires every ``interval_ms`` (default: every tick)."""
        interval = self._base_interval_ms if interval_ms is None else interval_ms
        if interval <= 0:
            raise ValueError("interval_ms must be positive")
        self._subscriptions.append(_Subscription(subscriber, interval))

    def unsubscribe(self, subscriber: TickSubscriber) -> None:
        self._subscriptions = [s for s in self._subscriptions if s.subscriber is not subscriber]

    def start(self) -> None:
        if self._timer.is_active:
            return
        self._timer.start(self._base_interval_ms, self.tick)
        logger.debug("Scheduler started (%d ms base tick)", self._base_interval_ms)

    def stop(self) -> None:
        """Stop scheduling ticks. A tick already in progress completes."""
        self._timer.stop()
        logger.debug("Scheduler stopped after %d ticks", self._tick_count)

    @property
    def is_running(self) -> bool:
        return self._timer.is_active

    @property
    def tick_count(self) -> int:
        return self._tick_count

    def tick(self) -> None:
        """Timer callback. Fires every subscriber whose cadence has elapsed."""
        if self._in_tick:
            logger.debug("Skipping overlapping tick")
            return
        self._in_tick = True
        try:
            self._tick_count += 1
            for sub in list(self._subscriptions):
                if not getattr(sub.subscriber, "is_active", True):
                    sub.elapsed_ms = 0
                    continue
                sub.elapsed_ms += self._base_interval_ms
                if sub.elapsed_ms >= sub.interval_ms:
                    sub.elapsed_ms %= sub.interval_ms
                    sub.subscriber.on_tick()
        finally:
            self._in_tick = False


class PlaybackState(enum.Enum):
    STOPPED = "stopped"
    PLAYING = "playing"


class EndOfTimeline(enum.Enum):
    """What playback does after showing the last year."""

    STOP = "stop"
    LOOP = "loop"


class PlaybackController(Generic[FrameT]):
    """Year-index playback over a discovered timeline.

    ``frame_lookup(year)`` selects the frame for a year (typically a
    cumulative snapshot); ``on_frame(year, frame)`` receives it every
    time the active index changes.
    """

    def __init__(
        self,
        years: Sequence[int],
        frame_lookup: Callable[[int], FrameT],
        on_frame: Optional[Callable[[int, FrameT], None]] = None,
        end_policy: EndOfTimeline = EndOfTimeline.STOP,
    ):
        self._years = list(years)
        self._frame_lookup = frame_lookup
        self._on_frame = on_frame
        self._end_policy = end_policy
        self._index = 0
        self._state = PlaybackState.STOPPED

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def is_playing(self) -> bool:
        return self._state is PlaybackState.PLAYING

    is_active = is_playing

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_year(self) -> Optional[int]:
        return self._years[self._index] if self._years else None

    @property
    def last_index(self) -> int:
        return max(0, len(self._years) - 1)

    @property
    def years(self) -> list[int]:
        return list(self._years)

    def current_frame(self) -> Optional[FrameT]:
        year = self.current_year
        return None if year is None else self._frame_lookup(year)

    def play(self) -> None:
        """Stopped -> Playing. At the end of a STOP timeline, rewinds first."""
        if self.is_playing or not self._years:
            return
        if self._end_policy is EndOfTimeline.STOP and self._index >= self.last_index:
            self._set_index(0)
        self._state = PlaybackState.PLAYING

    def pause(self) -> None:
        self._state = PlaybackState.STOPPED

    def toggle(self) -> None:
        if self.is_playing:
            self.pause()
        else:
            self.play()

    def step_forward(self) -> None:
        if self._index < self.last_index:
            self._set_index(self._index + 1)

    def step_backward(self) -> None:
        if self._index > 0:
            self._set_index(self._index - 1)

    def seek(self, index: int) -> None:
        """Jump to ``index`` (clamped to the timeline) and emit its frame."""
        if not self._years:
            return
        self._set_index(min(max(index, 0), self.last_index), force=True)

    def seek_year(self, year: int) -> None:
        """Jump to the last timeline index whose year is <= ``year``."""
        eligible = [i for i, y in enumerate(self._years) if y <= year]
        self.seek(eligible[-1] if eligible else 0)

    def on_tick(self) -> None:
        if not self.is_playing:
            return
        if self._index < self.last_index:
            self._set_index(self._index + 1)
        elif self._end_policy is EndOfTimeline.LOOP:
            self._set_index(0)

        if self._end_policy is EndOfTimeline.STOP and self._index >= self.last_index:
            self._state = PlaybackState.STOPPED
            logger.debug("Playback reached %s and stopped", self.current_year)

    def _set_index(self, index: int, force: bool = False) -> None:
        if index == self._index and not force:
            return
        self._index = index
        if self._on_frame is not None:
            year = self._years[index]
            self._on_frame(year, self._frame_lookup(year))


class OrbitAnimator:
    """Continuous cadence: advances every orbit's phase by its speed per tick."""

    def __init__(
        self,
        engine: OrbitGeometryEngine,
        on_frame: Optional[Callable[[dict[str, tuple[float, float]]], None]] = None,
    ):
        self._engine = engine
        self._on_frame = on_frame
        self._running = True

    @property
    def is_running(self) -> bool:
        return self._running

    is_active = is_running

    def start(self) -> None:
        self._running = True

    def stop(self) -> None:
        self._running = False

    def on_tick(self) -> None:
        if not self._running:
            return
        self._engine.advance()
        if self._on_frame is not None:
            self._on_frame(self._engine.positions())


def build_playback_scheduler(
    timer: Timer,
    playback: Optional[PlaybackController] = None,
    animator: Optional[OrbitAnimator] = None,
    frame_interval_ms: int = FRAME_INTERVAL_MS,
    playback_interval_ms: int = PLAYBACK_INTERVAL_MS,
) -> AnimationScheduler:
    """Scheduler with the playback and orbit cadences wired in."""
    scheduler = AnimationScheduler(timer, base_interval_ms=frame_interval_ms)
    if playback is not None:
        scheduler.subscribe(playback, playback_interval_ms)
    if animator is not None:
        scheduler.subscribe(animator)
    return scheduler
