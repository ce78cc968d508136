"""
Django admin registrations for the appointments models.

Patients and appointments are shown read-mostly: the natural key and
the audit timestamps are system-managed and never edited by hand.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User, Patient, Appointment, AuditEvent


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('username', 'role', 'is_staff', 'is_superuser')
    list_filter = ('role', 'is_staff')
    search_fields = ('username', 'first_name', 'last_name')
    fieldsets = BaseUserAdmin.fieldsets + (('Role', {'fields': ('role',)}),)


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('name', 'id', 'created_date', 'modified_date')
    search_fields = ('name', 'ssn')
    readonly_fields = ('id', 'ssn', 'created_date', 'modified_date')


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('reason', 'date', 'patient', 'created_date')
    list_filter = ('date',)
    search_fields = ('reason', 'patient__name')
    list_select_related = ('patient',)
    readonly_fields = ('id', 'created_date', 'modified_date')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'object_type', 'object_id', 'user', 'created_at')
    list_filter = ('action', 'object_type')
    search_fields = ('object_id', 'user__username')
