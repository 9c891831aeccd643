"""Kiosk board application.

Room snapshots, the doctor/assistant/patient catalogs, the PIN based
admin session and the kiosk display client (``board.kiosk``).
"""
