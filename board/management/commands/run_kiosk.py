import sys
import threading
from concurrent.futures import ThreadPoolExecutor

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from board.kiosk.alerts import TerminalAlert
from board.kiosk.client import SnapshotClient
from board.kiosk.display import KioskDisplay
from board.kiosk.persistence import TimerStateFile

CLEAR_SCREEN = '\x1b[2J\x1b[H'


class Command(BaseCommand):
    help = "Run the kiosk display for one room (type 'start t7', 'stop t17', 'quit')."

    def add_arguments(self, parser):
        parser.add_argument('room_id', type=int)
        parser.add_argument('--base-url', default=None, help='Board server, defaults to KIOSK_BASE_URL')
        parser.add_argument('--state-dir', default=None, help='Timer state directory, defaults to KIOSK_STATE_DIR')
        parser.add_argument('--once', action='store_true', help='Fetch and render once, then exit')

    def handle(self, *args, **opts):
        room_id = opts['room_id']
        if room_id < 1:
            raise CommandError('room_id must be a positive integer')
        client = SnapshotClient(opts['base_url'] or settings.KIOSK_BASE_URL, timeout=settings.KIOSK_HTTP_TIMEOUT)
        state_file = TimerStateFile(room_id, opts['state_dir'] or settings.KIOSK_STATE_DIR)

        if opts['once']:
            display = KioskDisplay(room_id, client.current, state_file=state_file)
            display.mount()
            display.step()
            display.close()
            client.close()
            self.stdout.write(display.render())
            return

        display = KioskDisplay(
            room_id,
            client.current,
            state_file=state_file,
            alert=TerminalAlert(self.stdout),
            executor=ThreadPoolExecutor(max_workers=1, thread_name_prefix=f'kiosk-{room_id}'),
        )
        stop = threading.Event()
        reader = threading.Thread(target=self._read_commands, args=(display, stop), daemon=True)
        reader.start()
        try:
            display.run(stop, render=lambda text: self.stdout.write(CLEAR_SCREEN + text))
        except KeyboardInterrupt:
            stop.set()
        finally:
            client.close()
        self.stdout.write(self.style.SUCCESS(f"Kiosk {room_id} stopped"))

    def _read_commands(self, display, stop):
        for line in sys.stdin:
            line = line.strip()
            if line in ('quit', 'exit'):
                break
            if line:
                display.send(line)
        stop.set()
