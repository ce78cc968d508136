"""
Data-access helpers for patients and appointments.

Each function maps onto a single query.  None of them opens a
transaction; callers in :mod:`appointments.services` own the unit of
work.
"""
from __future__ import annotations

from typing import Iterable, Optional

from appointments.functions import UnicodeLower
from appointments.models import Appointment, Patient


def find_patient_by_ssn(ssn: str) -> Optional[Patient]:
    return Patient.objects.filter(ssn=ssn).first()


def create_patient(*, name: str, ssn: str) -> Patient:
    return Patient.objects.create(name=name, ssn=ssn)


def save_appointments(appointments: Iterable[Appointment]) -> list[Appointment]:
    """Insert all appointments in one statement and return them in order.

    Primary keys are generated client-side (``uuid4``) and the audit
    timestamps are filled in by the fields' ``pre_save`` hooks, so the
    returned objects are complete without a re-read.
    """
    return Appointment.objects.bulk_create(list(appointments))


def find_appointments_by_reason_with_patient(reason: str) -> list[Appointment]:
    """Case-insensitive substring match on reason, patient eagerly loaded.

    Both sides are lower-cased with Unicode rules on every backend.
    """
    return list(
        Appointment.objects.select_related('patient')
        .annotate(reason_lower=UnicodeLower('reason'))
        .filter(reason_lower__contains=reason.lower())
        .order_by('date', 'id')
    )


def delete_appointments_by_patient(patient: Patient) -> int:
    deleted, _ = Appointment.objects.filter(patient=patient).delete()
    return deleted


def find_latest_appointment_by_ssn(ssn: str) -> Optional[Appointment]:
    return (
        Appointment.objects.filter(patient__ssn=ssn)
        .order_by('-date')
        .first()
    )
