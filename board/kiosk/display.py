"""
Kiosk display loop.

A display polls the snapshot of its room and keeps the two countdown
timers running.  Everything happens on the loop thread through
:meth:`KioskDisplay.step`, called every ``TICK_INTERVAL_S`` seconds:

* right after mounting (one tick later) the persisted timers are loaded
  and a first fetch is issued;
* every ``POLL_INTERVAL_S`` a fetch is issued, but only inside the
  operating window [09:00, 20:00) local time;
* every ``HARD_CHECK_INTERVAL_S`` the loop checks whether the last hard
  refresh is ``HARD_REFRESH_AFTER_S`` old and, if so, fetches whatever
  the hour;
* running timers are recomputed and fire when they reach zero.

Fetches may run on an executor; their results are picked up by the
loop thread on a later step, so the display state only ever changes on
that thread.  Once closed, late results are dropped.
"""
from __future__ import annotations

import logging
import queue
import threading
import time
from concurrent.futures import Executor, Future
from datetime import datetime, timezone as dt_timezone
from typing import Any, Callable, Optional

from django.utils import timezone
from django.utils.dateparse import parse_datetime

from .client import KioskFetchError
from .persistence import TimerStateFile
from .timers import DURATIONS_MS, T7, T17, TimerBoard, mmss

logger = logging.getLogger(__name__)

TICK_INTERVAL_S = 0.2
POLL_INTERVAL_S = 60
HARD_CHECK_INTERVAL_S = 30
HARD_REFRESH_AFTER_S = 5 * 60
OPEN_HOUR = 9
CLOSE_HOUR = 20

DEFAULT_COLOR = '#0ea5e9'
EMPTY = '—'
# Older assignments used lowercase codes for the appointment type.
TYPE_LABELS = {
    'primera_vez': 'Primera Vez',
    'emergencia': 'Emergencia',
    'tratamiento': 'En Tratamiento',
}


def within_operating_window(moment: datetime) -> bool:
    return OPEN_HOUR <= moment.hour < CLOSE_HOUR


def type_label(value: Optional[str]) -> str:
    if not value:
        return EMPTY
    return TYPE_LABELS.get(value, str(value))


def scheduled_label(value: Optional[str]) -> str:
    if not value:
        return EMPTY
    try:
        moment = parse_datetime(value)
    except ValueError:
        return EMPTY
    if moment is None:
        return EMPTY
    if timezone.is_naive(moment):
        moment = timezone.make_aware(moment)
    return timezone.localtime(moment).strftime('%H:%M')


class KioskDisplay:
    """Polling/timer state machine of one kiosk.

    ``fetch`` receives the room id and returns the ``current`` response
    envelope, raising :class:`KioskFetchError` on failure.  ``clock``
    returns epoch seconds.
    """

    def __init__(self, room_id: int, fetch: Callable[[int], dict], *,
                 state_file: Optional[TimerStateFile] = None,
                 alert: Optional[Callable[[str], None]] = None,
                 clock: Callable[[], float] = time.time,
                 executor: Optional[Executor] = None):
        self.room_id = room_id
        self.fetch = fetch
        self.state_file = state_file
        self.alert = alert
        self.clock = clock
        self.executor = executor

        self.snapshot: Optional[dict[str, Any]] = None
        self.error: Optional[str] = None
        self.closed = False
        self.timers = TimerBoard(
            clock=lambda: int(self.clock() * 1000),
            on_change=self._persist_timers,
            on_fire=self._fire_alert,
        )

        self._mounted = False
        self._deferred_pending = False
        self._timers_loaded = False
        self._next_poll = 0.0
        self._next_hard_check = 0.0
        self._last_hard = 0.0
        self._inflight: Optional[Future] = None
        self._commands: queue.SimpleQueue = queue.SimpleQueue()

    # -- lifecycle -------------------------------------------------------------

    def mount(self) -> None:
        now = self.clock()
        self._mounted = True
        self._deferred_pending = True
        self._last_hard = now
        self._next_poll = now + POLL_INTERVAL_S
        self._next_hard_check = now + HARD_CHECK_INTERVAL_S

    def close(self) -> None:
        self.closed = True
        if self.executor is not None:
            self.executor.shutdown(wait=False, cancel_futures=True)

    def run(self, stop: threading.Event, render: Optional[Callable[[str], None]] = None) -> None:
        """Step until ``stop`` is set, rendering whenever the view changes."""
        last = None
        self.mount()
        try:
            while not stop.is_set():
                self.step()
                if render is not None:
                    text = self.render()
                    if text != last:
                        render(text)
                        last = text
                stop.wait(TICK_INTERVAL_S)
        finally:
            self.close()

    def step(self) -> None:
        if self.closed:
            return
        if not self._mounted:
            self.mount()
            return
        now = self.clock()

        if self._deferred_pending:
            self._deferred_pending = False
            self._load_timers()
            self.refresh()

        self._drain_commands()
        self._collect_fetch()

        if now >= self._next_poll:
            self._next_poll = now + POLL_INTERVAL_S
            if within_operating_window(self._local(now)):
                self.refresh()

        if now >= self._next_hard_check:
            self._next_hard_check = now + HARD_CHECK_INTERVAL_S
            if now - self._last_hard >= HARD_REFRESH_AFTER_S:
                self._last_hard = now
                self.refresh()

        self.timers.tick()

    # -- fetching ------------------------------------------------------------

    def refresh(self) -> None:
        """Fetch the room snapshot now (or as soon as the worker is free)."""
        if self.closed:
            return
        if self.executor is None:
            self._apply(self._fetch_safely())
            return
        self._collect_fetch()
        if self._inflight is None:
            self._inflight = self.executor.submit(self._fetch_safely)

    def _fetch_safely(self) -> tuple[Optional[dict], Optional[str]]:
        try:
            return self.fetch(self.room_id), None
        except KioskFetchError as e:
            return None, str(e)

    def _collect_fetch(self) -> None:
        if self._inflight is not None and self._inflight.done():
            future, self._inflight = self._inflight, None
            if not future.cancelled():
                self._apply(future.result())

    def _apply(self, result: tuple[Optional[dict], Optional[str]]) -> None:
        if self.closed:
            logger.debug('room %s: dropping response received after close', self.room_id)
            return
        data, error = result
        if error is not None:
            # Keep showing the last snapshot.
            logger.warning('room %s: fetch failed: %s', self.room_id, error)
            self.error = error
            return
        self.snapshot = data
        self.error = None

    # -- timers ----------------------------------------------------------------

    def send(self, command: str) -> None:
        """Queue ``start <key>`` / ``stop <key>`` from any thread."""
        self._commands.put(command)

    def _drain_commands(self) -> None:
        while True:
            try:
                command = self._commands.get_nowait()
            except queue.Empty:
                return
            action, _, key = command.strip().partition(' ')
            key = key.strip()
            if key not in DURATIONS_MS or action not in ('start', 'stop'):
                logger.info('room %s: unknown command %r', self.room_id, command)
                continue
            if action == 'start':
                self.timers.start(key)
            else:
                self.timers.stop(key)

    def _load_timers(self) -> None:
        if self.state_file is not None:
            self.timers.restore(self.state_file.load())
        self._timers_loaded = True

    def _persist_timers(self, data: dict) -> None:
        # Saving before the first load would clobber the stored countdowns.
        if self.state_file is None or not self._timers_loaded:
            return
        try:
            self.state_file.save(data)
        except OSError as e:
            logger.warning('room %s: could not save timers: %s', self.room_id, e)

    def _fire_alert(self, key: str) -> None:
        if self.alert is None:
            return
        try:
            self.alert(key)
        except Exception:  # noqa: BLE001 - a failed beep never stops the display
            logger.debug('room %s: alert for %s failed', self.room_id, key, exc_info=True)

    # -- rendering -----------------------------------------------------------

    def _local(self, epoch: float) -> datetime:
        return timezone.localtime(datetime.fromtimestamp(epoch, tz=dt_timezone.utc))

    def render(self) -> str:
        payload = (self.snapshot or {}).get('payload') or {}
        active = within_operating_window(self._local(self.clock()))
        lines = [
            f"Cubículo {self.room_id}  [{payload.get('doctorColor') or DEFAULT_COLOR}]",
            f"Polling: 1 min {'(activo)' if active else '(fuera de horario)'} · Hard: 5 min",
            '',
            f"Doctor/a:        {payload.get('doctorName') or EMPTY}",
            f"Asistente:       {payload.get('assistantName') or EMPTY}",
            f"Paciente:        {payload.get('patientName') or EMPTY}",
            f"Expediente:      {payload.get('recordNumber') or EMPTY}",
            f"Tipo de cita:    {type_label(payload.get('type'))}",
            f"Diente a tratar: {payload.get('tooth') or EMPTY}",
            f"Hora:            {scheduled_label(payload.get('scheduledAt'))}",
            '',
        ]
        for key, title in ((T7, 'Temporizador 7:00 '), (T17, 'Temporizador 17:00')):
            t = self.timers[key]
            lines.append(f"{title}  {mmss(t.remaining_ms)}  {'[en curso]' if t.running else ''}".rstrip())
        lines.append('')
        lines.append(f"Error: {self.error}" if self.error else 'Kiosco Dental')
        return '\n'.join(lines)
