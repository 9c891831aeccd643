import io
import json
from concurrent.futures import Future
from datetime import datetime, timezone as dt_timezone

import pytest
import requests

from board.kiosk.alerts import TerminalAlert
from board.kiosk.client import NO_CACHE_HEADERS, KioskFetchError, SnapshotClient
from board.kiosk.display import KioskDisplay, scheduled_label, type_label
from board.kiosk.persistence import TimerStateFile
from board.kiosk.timers import T7, T17, TimerBoard, mmss

# 10:00 and 21:00 in Mexico City (UTC-6)
IN_HOURS = datetime(2026, 10, 19, 16, 0, tzinfo=dt_timezone.utc).timestamp()
AFTER_HOURS = datetime(2026, 10, 20, 3, 0, tzinfo=dt_timezone.utc).timestamp()

SNAPSHOT = {
    'ok': True,
    'roomId': 1,
    'payload': {
        'doctorName': 'Dra. Ana López',
        'doctorColor': '#22c55e',
        'assistantName': 'Laura',
        'patientName': 'Juan Pérez',
        'recordNumber': 'EXP-1001',
        'type': 'Primera Vez',
        'tooth': '16',
        'scheduledAt': '2026-10-19T20:30:00.000Z',
    },
    'updatedAt': '2026-10-19T18:00:00.000Z',
}


@pytest.fixture(autouse=True)
def _local_tz(settings):
    settings.TIME_ZONE = 'America/Mexico_City'


class FakeClock:
    def __init__(self, start):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class CountingFetch:
    def __init__(self, *results):
        self.calls = 0
        self.results = list(results) or [SNAPSHOT]

    def __call__(self, room_id):
        self.calls += 1
        result = self.results[min(self.calls, len(self.results)) - 1]
        if isinstance(result, Exception):
            raise result
        return result


class ManualExecutor:
    """Runs submitted jobs only when told to."""

    def __init__(self):
        self.jobs = []

    def submit(self, fn):
        future = Future()
        self.jobs.append((fn, future))
        return future

    def run_all(self):
        for fn, future in self.jobs:
            future.set_result(fn())
        self.jobs = []

    def shutdown(self, wait=True, cancel_futures=False):
        pass


# -- timers ------------------------------------------------------------------

def test_start_tick_stop():
    now = [1_000_000]
    changes = []
    board = TimerBoard(clock=lambda: now[0], on_change=changes.append)

    board.start(T7)
    assert board[T7].running
    assert board[T7].target_at == 1_000_000 + 7 * 60 * 1000

    now[0] += 60_000
    board.tick()
    assert board[T7].remaining_ms == 6 * 60 * 1000
    assert board[T17].running is False

    board.stop(T7)
    assert board[T7].running is False
    assert board[T7].target_at is None
    assert board[T7].remaining_ms == 7 * 60 * 1000
    assert changes[-1][T7] == {'running': False, 'targetAt': None, 'remainingMs': 420000}


def test_timer_fires_once_and_resets():
    now = [0]
    fired = []
    board = TimerBoard(clock=lambda: now[0], on_fire=fired.append)
    board.start(T17)
    now[0] += 17 * 60 * 1000
    assert board.tick() == [T17]
    assert board.tick() == []
    assert fired == [T17]
    assert board[T17].running is False
    assert board[T17].remaining_ms == 17 * 60 * 1000


def test_restore_recomputes_remaining_from_target():
    now = [10_000_000]
    board = TimerBoard(clock=lambda: now[0])
    board.restore({
        't7': {'running': True, 'targetAt': now[0] + 90_000, 'remainingMs': 420000},
        't17': {'running': True, 'targetAt': 'soon'},
        'bogus': {'running': True, 'targetAt': 1},
    })
    assert board[T7].running
    assert board[T7].remaining_ms == 90_000
    assert board[T17].running is False


def test_mmss():
    assert mmss(7 * 60 * 1000) == '07:00'
    assert mmss(61_999) == '01:01'
    assert mmss(0) == '00:00'
    assert mmss(-5) == '00:00'


# -- persistence ---------------------------------------------------------------

def test_state_file_round_trip(tmp_path):
    f = TimerStateFile(4, tmp_path / 'state')
    assert f.load() is None
    f.save({'t7': {'running': True, 'targetAt': 123, 'remainingMs': 5}})
    assert f.path.name == 'kiosk-timers-4.json'
    assert f.load()['t7']['targetAt'] == 123


def test_corrupt_state_file_is_ignored(tmp_path):
    f = TimerStateFile(1, tmp_path)
    f.path.write_text('{not json', encoding='utf-8')
    assert f.load() is None


# -- display -------------------------------------------------------------------

def test_initial_fetch_is_deferred_one_step():
    clock = FakeClock(IN_HOURS)
    fetch = CountingFetch()
    d = KioskDisplay(1, fetch, clock=clock)
    d.step()
    assert fetch.calls == 0
    d.step()
    assert fetch.calls == 1
    assert d.snapshot == SNAPSHOT


def test_polls_every_minute_inside_operating_hours():
    clock = FakeClock(IN_HOURS)
    fetch = CountingFetch()
    d = KioskDisplay(1, fetch, clock=clock)
    d.step()
    d.step()
    clock.advance(59)
    d.step()
    assert fetch.calls == 1
    clock.advance(1)
    d.step()
    assert fetch.calls == 2


def test_only_hard_refresh_outside_operating_hours():
    clock = FakeClock(AFTER_HOURS)
    fetch = CountingFetch()
    d = KioskDisplay(1, fetch, clock=clock)
    d.step()
    d.step()
    for _ in range(4):
        clock.advance(60)
        d.step()
    assert fetch.calls == 1
    clock.advance(60)
    d.step()
    assert fetch.calls == 2


def test_fetch_error_keeps_last_snapshot():
    clock = FakeClock(IN_HOURS)
    fetch = CountingFetch(SNAPSHOT, KioskFetchError('503 Service Unavailable'))
    d = KioskDisplay(1, fetch, clock=clock)
    d.step()
    d.step()
    clock.advance(60)
    d.step()
    assert d.snapshot == SNAPSHOT
    assert d.error == '503 Service Unavailable'
    text = d.render()
    assert 'Dra. Ana López' in text
    assert text.endswith('Error: 503 Service Unavailable')


def test_background_fetch_is_applied_on_a_later_step():
    executor = ManualExecutor()
    d = KioskDisplay(1, CountingFetch(), clock=FakeClock(IN_HOURS), executor=executor)
    d.step()
    d.step()
    assert d.snapshot is None
    executor.run_all()
    d.step()
    assert d.snapshot == SNAPSHOT


def test_results_after_close_are_dropped():
    executor = ManualExecutor()
    d = KioskDisplay(1, CountingFetch(), clock=FakeClock(IN_HOURS), executor=executor)
    d.step()
    d.step()
    d.close()
    executor.run_all()
    d.step()
    d.refresh()
    assert d.snapshot is None


def test_expired_persisted_timer_fires_after_load(tmp_path):
    clock = FakeClock(IN_HOURS)
    state = TimerStateFile(2, tmp_path)
    past = int((clock() - 120) * 1000)
    state.save({'t7': {'running': True, 'targetAt': past, 'remainingMs': 300000}})
    alerts = []
    d = KioskDisplay(2, CountingFetch(), state_file=state, alert=alerts.append, clock=clock)
    d.step()
    d.step()
    assert alerts == [T7]
    assert d.timers[T7].running is False
    assert d.timers[T7].remaining_ms == 7 * 60 * 1000
    assert json.loads(state.path.read_text())['t7']['running'] is False


def test_timers_are_not_saved_before_first_load(tmp_path):
    state = TimerStateFile(3, tmp_path)
    d = KioskDisplay(3, CountingFetch(), state_file=state, clock=FakeClock(IN_HOURS))
    d.timers.start(T7)
    assert not state.path.exists()


def test_commands_and_failing_alert(tmp_path):
    clock = FakeClock(IN_HOURS)

    def broken_alert(key):
        raise RuntimeError('no audio device')

    state = TimerStateFile(1, tmp_path)
    d = KioskDisplay(1, CountingFetch(), state_file=state, alert=broken_alert, clock=clock)
    d.step()
    d.step()
    d.send('start t7')
    d.send('launch t99')
    d.step()
    assert d.timers[T7].running
    assert json.loads(state.path.read_text())['t7']['running'] is True

    clock.advance(7 * 60)
    d.step()
    assert d.timers[T7].running is False
    # the loop keeps going
    clock.advance(1)
    d.step()


def test_render_labels():
    d = KioskDisplay(3, CountingFetch(), clock=FakeClock(IN_HOURS))
    text = d.render()
    assert text.startswith('Cubículo 3  [#0ea5e9]')
    assert 'Paciente:        —' in text
    assert 'Temporizador 7:00   07:00' in text
    assert text.endswith('Kiosco Dental')

    d.snapshot = SNAPSHOT
    text = d.render()
    assert '[#22c55e]' in text
    assert 'Hora:            14:30' in text
    assert 'Tipo de cita:    Primera Vez' in text


def test_type_and_time_labels():
    assert type_label('primera_vez') == 'Primera Vez'
    assert type_label('tratamiento') == 'En Tratamiento'
    assert type_label('Otro Diente') == 'Otro Diente'
    assert type_label(None) == '—'
    assert scheduled_label('no es fecha') == '—'
    assert scheduled_label('') == '—'


# -- client / alert ------------------------------------------------------------

class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append((url, headers, timeout))
        if self.exc:
            raise self.exc
        return self.response

    def close(self):
        pass


def _response(status, body):
    r = requests.Response()
    r.status_code = status
    r._content = json.dumps(body).encode()
    return r


def test_client_sends_no_cache_headers():
    session = FakeSession(_response(200, SNAPSHOT))
    client = SnapshotClient('http://kiosco.local/', timeout=3, session=session)
    assert client.current(1) == SNAPSHOT
    assert session.calls == [('http://kiosco.local/api/rooms/1/current', NO_CACHE_HEADERS, 3)]


@pytest.mark.parametrize('session', [
    FakeSession(exc=requests.ConnectionError('refused')),
    FakeSession(_response(500, {'ok': False, 'error': {'code': 'server_error'}})),
    FakeSession(_response(200, {'ok': False})),
])
def test_client_errors(session):
    with pytest.raises(KioskFetchError):
        SnapshotClient('http://kiosco.local', session=session).current(1)


def test_terminal_alert():
    out = io.StringIO()
    TerminalAlert(out)('t7')
    assert out.getvalue() == '\a\a\a'
    out.close()
    TerminalAlert(out)('t7')
