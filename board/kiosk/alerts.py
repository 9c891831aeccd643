import logging
import sys

logger = logging.getLogger(__name__)


class TerminalAlert:
    """Timer alert for terminal kiosks: the bell character.

    Terminals offer no vibration, so the bell is the whole alert.
    Output failures (closed stream, detached terminal) are ignored.
    """

    def __init__(self, stream=None, repeat: int = 3):
        self.stream = stream or sys.stdout
        self.repeat = repeat

    def __call__(self, key: str) -> None:
        try:
            self.stream.write('\a' * self.repeat)
            self.stream.flush()
        except (OSError, ValueError) as e:
            logger.debug('alert for %s not delivered: %s', key, e)
