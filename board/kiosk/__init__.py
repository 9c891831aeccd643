"""Kiosk display client.

Started with ``python manage.py run_kiosk <roomId>``; see
:mod:`board.kiosk.display` for the polling and timer rules.
"""
