import json
import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class TimerStateFile:
    """Durable timer state of one kiosk, one JSON file per room."""

    def __init__(self, room_id: int, directory):
        self.directory = Path(directory)
        self.path = self.directory / f"kiosk-timers-{room_id}.json"

    def load(self) -> Optional[dict]:
        if not self.path.exists():
            return None
        try:
            with open(self.path, encoding='utf-8') as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            # A corrupt file only costs the running countdowns.
            logger.warning('ignoring unreadable timer state %s: %s', self.path, e)
            return None

    def save(self, data: dict) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix('.tmp')
        with open(tmp, 'w', encoding='utf-8') as f:
            json.dump(data, f)
        os.replace(tmp, self.path)
