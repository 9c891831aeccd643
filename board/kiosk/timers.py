"""Countdown timers shown on every kiosk.

Two fixed timers, ``t7`` and ``t17``.  A running timer is defined by
its absolute ``target_at`` (epoch milliseconds); ``remaining_ms`` is
only a display value and is always recomputed from ``target_at`` and
the clock, so a countdown survives restarts and sleeping devices.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)

T7 = 't7'
T17 = 't17'
DURATIONS_MS = {
    T7: 7 * 60 * 1000,
    T17: 17 * 60 * 1000,
}


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class TimerState:
    running: bool
    target_at: Optional[int]
    remaining_ms: int

    @classmethod
    def idle(cls, key: str) -> 'TimerState':
        return cls(running=False, target_at=None, remaining_ms=DURATIONS_MS[key])

    def to_dict(self) -> dict:
        return {'running': self.running, 'targetAt': self.target_at, 'remainingMs': self.remaining_ms}


class TimerBoard:
    """State machine for both timers.

    ``on_change`` is called with the serialized state after every
    change (used for persistence); ``on_fire`` with the timer key when
    a countdown reaches zero.
    """

    def __init__(self, *, clock: Callable[[], int] = now_ms,
                 on_change: Optional[Callable[[dict], None]] = None,
                 on_fire: Optional[Callable[[str], None]] = None):
        self.clock = clock
        self.on_change = on_change
        self.on_fire = on_fire
        self.timers: dict[str, TimerState] = {k: TimerState.idle(k) for k in DURATIONS_MS}

    def __getitem__(self, key: str) -> TimerState:
        return self.timers[key]

    def to_dict(self) -> dict:
        return {k: t.to_dict() for k, t in self.timers.items()}

    def _changed(self) -> None:
        if self.on_change:
            self.on_change(self.to_dict())

    def start(self, key: str) -> None:
        duration = DURATIONS_MS[key]
        self.timers[key] = TimerState(running=True, target_at=self.clock() + duration, remaining_ms=duration)
        self._changed()

    def stop(self, key: str) -> None:
        # Partial progress is discarded.
        self.timers[key] = TimerState.idle(key)
        self._changed()

    def tick(self) -> list[str]:
        """Recompute running timers; return the keys that fired."""
        now = self.clock()
        fired = []
        changed = False
        for key, t in self.timers.items():
            if not t.running or t.target_at is None:
                continue
            remaining = max(0, t.target_at - now)
            if remaining != t.remaining_ms:
                t.remaining_ms = remaining
                changed = True
            if remaining <= 0:
                fired.append(key)
                self.timers[key] = TimerState.idle(key)
                changed = True
        if changed:
            self._changed()
        for key in fired:
            logger.info('timer %s finished', key)
            if self.on_fire:
                self.on_fire(key)
        return fired

    def restore(self, data: Optional[dict]) -> None:
        """Load persisted state, recomputing ``remaining_ms`` from ``targetAt``.

        Unknown keys and malformed entries are ignored; the affected
        timer stays idle.  An expired countdown is left at zero and
        fires on the next :meth:`tick`.
        """
        if not isinstance(data, dict):
            return
        now = self.clock()
        for key in DURATIONS_MS:
            raw = data.get(key)
            if not isinstance(raw, dict):
                continue
            target = raw.get('targetAt')
            if raw.get('running') and isinstance(target, (int, float)):
                target = int(target)
                self.timers[key] = TimerState(running=True, target_at=target,
                                              remaining_ms=max(0, target - now))
            else:
                self.timers[key] = TimerState.idle(key)
        self._changed()


def mmss(ms: int) -> str:
    total = max(0, ms // 1000)
    return f"{total // 60:02d}:{total % 60:02d}"
