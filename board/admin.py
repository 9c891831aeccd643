"""
Django admin registrations for the board models.

Handy during development to inspect what each room currently holds
and to fix catalog entries by hand at ``/admin/``.
"""

from django.contrib import admin

from .models import Assistant, Doctor, Patient, RoomState


@admin.register(RoomState)
class RoomStateAdmin(admin.ModelAdmin):
    list_display = ('room_id', 'doctor_name', 'updated_at')
    ordering = ('room_id',)

    @admin.display(description='Doctor/a')
    def doctor_name(self, obj):
        return (obj.payload or {}).get('doctorName', '—')


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ('name', 'color', 'active')
    list_filter = ('active',)
    search_fields = ('name',)


@admin.register(Assistant)
class AssistantAdmin(admin.ModelAdmin):
    list_display = ('name', 'active')
    list_filter = ('active',)
    search_fields = ('name',)


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('name', 'record_number', 'default_tooth', 'active')
    list_filter = ('active',)
    search_fields = ('name', 'record_number')
