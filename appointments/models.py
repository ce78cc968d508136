"""
Database models for the appointments backend.

Patients are identified by a client-supplied natural key (``ssn``) in
addition to their generated UUID.  Appointments point at their patient
through a plain foreign key with no reverse accessor.
"""
from __future__ import annotations

import uuid
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Custom user model carrying the caller's role.

    Only users with the ``doctor`` role may use the appointment API.
    """
    ROLE_DOCTOR = 'doctor'
    ROLE_CHOICES = [
        ('doctor', 'Doctor'),
        ('staff', 'Staff'),
        ('admin', 'Administrator'),
    ]
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default='staff', db_index=True)

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class Patient(models.Model):
    """A patient, created lazily on first bulk appointment request."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    ssn = models.CharField(max_length=64, editable=False)
    created_date = models.DateTimeField(auto_now_add=True)
    modified_date = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'patient'
        constraints = [
            models.UniqueConstraint(fields=['ssn'], name='idx_patient_ssn'),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"


class Appointment(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    reason = models.CharField(max_length=255)
    # Naive local timestamp; the project runs with USE_TZ = False.
    date = models.DateTimeField()
    patient = models.ForeignKey(
        Patient, on_delete=models.PROTECT, related_name='+', db_column='patient_id'
    )
    created_date = models.DateTimeField(auto_now_add=True)
    modified_date = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'appointment'
        indexes = [
            models.Index(fields=['patient', 'date'], name='idx_appointment_patient_date'),
        ]

    def __str__(self) -> str:
        return f"{self.reason} @ {self.date:%Y-%m-%d %H:%M}"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    # Stored as text so UUID and integer keys fit the same column.
    object_id = models.CharField(max_length=64, blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.action} {self.object_type or ''}:{self.object_id or ''}"
