#!/usr/bin/env python
"""
Command line entry point for the kiosk board.

Besides the stock Django commands (``runserver``, ``migrate``...) this
exposes the board's own commands, e.g. ``seed_catalog`` and
``run_kiosk <roomId>``.
"""
import os
import sys


def main() -> None:
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'kiosko.settings')
    try:
        from django.core.management import execute_from_command_line  # type: ignore
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Is it installed in the active virtual environment?"
        ) from exc
    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
