"""
Management command to load a small demo catalog.

Idempotent: entries are matched by name and only missing ones are
created, so it can be re-run on a populated database.
"""
from django.core.management.base import BaseCommand

from board.models import Assistant, Doctor, Patient

DOCTORS = [
    ('Dra. Ana López', '#0ea5e9'),
    ('Dr. Carlos Méndez', '#22c55e'),
    ('Dra. Sofía Ramírez', '#a855f7'),
    ('Dr. Jorge Herrera', '#f97316'),
]
ASSISTANTS = ['Laura Torres', 'Miguel Ortiz', 'Paola Díaz']
PATIENTS = [
    ('Juan Pérez', 'EXP-1001', '16'),
    ('María García', 'EXP-1002', '26'),
    ('Luis Hernández', 'EXP-1003', ''),
    ('Fernanda Ruiz', 'EXP-1004', '36'),
]


class Command(BaseCommand):
    help = 'Create demo doctors, assistants and patients (idempotent).'

    def handle(self, *args, **options):
        created = 0
        for name, color in DOCTORS:
            _, was_created = Doctor.objects.get_or_create(name=name, defaults={'color': color})
            created += was_created
        for name in ASSISTANTS:
            _, was_created = Assistant.objects.get_or_create(name=name)
            created += was_created
        for name, record_number, tooth in PATIENTS:
            _, was_created = Patient.objects.get_or_create(
                name=name, defaults={'record_number': record_number, 'default_tooth': tooth},
            )
            created += was_created
        self.stdout.write(self.style.SUCCESS(f'Catalog ready ({created} new entries)'))
