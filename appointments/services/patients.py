import logging

from django.db import IntegrityError, transaction

from appointments import repositories
from appointments.exceptions import PatientConflict
from appointments.masking import mask_ssn
from appointments.models import Patient

logger = logging.getLogger(__name__)


def resolve_patient(*, ssn: str, name: str) -> tuple[Patient, bool]:
    """Return the patient owning ``ssn``, creating it with ``name`` if absent.

    Creation happens inside a savepoint so that losing a race against a
    concurrent insert leaves the caller's transaction usable; the winner's
    row is then read back.  Returns ``(patient, created)``.
    """
    patient = repositories.find_patient_by_ssn(ssn)
    if patient is not None:
        return patient, False

    logger.info('No existing patient found for SSN=%s, creating new record', mask_ssn(ssn))
    try:
        with transaction.atomic():
            return repositories.create_patient(name=name, ssn=ssn), True
    except IntegrityError:
        logger.warning('Concurrent creation detected for SSN=%s, re-reading', mask_ssn(ssn))

    patient = repositories.find_patient_by_ssn(ssn)
    if patient is None:
        raise PatientConflict(ssn)
    return patient, False
