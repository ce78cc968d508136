"""
Appointment use cases.

Each public function is one unit of work: it opens a single
``transaction.atomic()`` block and returns model instances for the view
layer to serialize.  Natural keys never reach the logs unmasked.
"""
from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional

from django.db import transaction

from appointments import repositories
from appointments.exceptions import AppointmentNotFound, PatientNotFound
from appointments.masking import mask_ssn
from appointments.models import Appointment
from appointments.services.audit import log_action
from appointments.services.patients import resolve_patient

logger = logging.getLogger(__name__)


def create_bulk_appointments(*, ssn: str, patient_name: str,
                             details: Iterable[Mapping[str, object]]) -> list[Appointment]:
    """Create one appointment per ``{'reason', 'date'}`` entry for the patient.

    The patient is resolved (or created) first; all rows commit together
    or not at all.  The result keeps the order of ``details``.
    """
    logger.debug('Starting bulk appointment creation for SSN=%s', mask_ssn(ssn))
    with transaction.atomic():
        patient, created = resolve_patient(ssn=ssn, name=patient_name)
        logger.info('Using %s patient [id=%s] for appointment creation',
                    'new' if created else 'existing', patient.id)

        appointments = [
            Appointment(reason=d['reason'], date=d['date'], patient=patient)
            for d in details
        ]
        saved = repositories.save_appointments(appointments)

    logger.info('Created %d appointments for patient id=%s', len(saved), patient.id)
    return saved


def find_appointments_by_reason(reason: str) -> list[Appointment]:
    """Return appointments whose reason equals ``reason`` ignoring case.

    Candidates are fetched with a substring match and then narrowed to
    whole-string equality; the narrowing is the contract.
    """
    keyword = reason.strip()
    logger.debug("Searching appointments by reason='%s'", keyword)
    wanted = keyword.lower()
    with transaction.atomic():
        candidates = repositories.find_appointments_by_reason_with_patient(keyword)
    matches = [a for a in candidates if a.reason.lower() == wanted]
    logger.info('Found %d appointments matching the reason', len(matches))
    return matches


def delete_appointments_for_patient(ssn: str, *, user=None) -> int:
    """Delete every appointment of the patient owning ``ssn``.

    Raises :class:`PatientNotFound` when no such patient exists.  The
    patient row itself is kept.
    """
    logger.debug('Deleting appointments for SSN=%s', mask_ssn(ssn))
    with transaction.atomic():
        patient = repositories.find_patient_by_ssn(ssn)
        if patient is None:
            raise PatientNotFound(ssn)
        count = repositories.delete_appointments_by_patient(patient)
        log_action(user=user, action='appointments_delete', object_type='patient',
                   object_id=patient.id, detail={'deleted': count, 'ssn': mask_ssn(ssn)})

    logger.info('Deleted %d appointments for patient id=%s', count, patient.id)
    return count


def get_latest_appointment_for_patient(ssn: str) -> Appointment:
    logger.debug('Retrieving latest appointment for SSN=%s', mask_ssn(ssn))
    with transaction.atomic():
        if repositories.find_patient_by_ssn(ssn) is None:
            raise PatientNotFound(ssn)
        appointment: Optional[Appointment] = repositories.find_latest_appointment_by_ssn(ssn)
        if appointment is None:
            raise AppointmentNotFound(ssn)

    logger.info('Latest appointment id=%s retrieved for patient ssn=%s', appointment.id, mask_ssn(ssn))
    return appointment
