from datetime import datetime
from unittest import mock

import pytest
from django.db import DatabaseError

from appointments import repositories
from appointments.exceptions import AppointmentNotFound, PatientConflict, PatientNotFound
from appointments.models import Appointment, AuditEvent, Patient
from appointments.services import appointments as svc
from appointments.services.patients import resolve_patient

pytestmark = pytest.mark.django_db


def details(*pairs):
    return [{'reason': r, 'date': d} for r, d in pairs]


def test_resolve_patient_creates_once_then_reuses():
    p1, created1 = resolve_patient(ssn='111-22-3333', name='Ann Lee')
    p2, created2 = resolve_patient(ssn='111-22-3333', name='Someone Else')
    assert created1 is True and created2 is False
    assert p1.pk == p2.pk
    assert p2.name == 'Ann Lee'
    assert Patient.objects.count() == 1
    assert p1.created_date is not None and p1.modified_date is not None


def test_resolve_patient_rereads_after_losing_creation_race(monkeypatch):
    winner = Patient.objects.create(name='Winner', ssn='111-22-3333')
    real_find = repositories.find_patient_by_ssn
    calls = []

    def stale_first_read(ssn):
        calls.append(ssn)
        # The first lookup misses, as if the other writer had not committed yet.
        return None if len(calls) == 1 else real_find(ssn)

    monkeypatch.setattr(repositories, 'find_patient_by_ssn', stale_first_read)
    patient, created = resolve_patient(ssn='111-22-3333', name='Loser')
    assert created is False
    assert patient.pk == winner.pk
    assert len(calls) == 2
    assert Patient.objects.count() == 1


def test_resolve_patient_raises_conflict_when_reread_misses(monkeypatch):
    Patient.objects.create(name='Winner', ssn='111-22-3333')
    monkeypatch.setattr(repositories, 'find_patient_by_ssn', lambda ssn: None)
    with pytest.raises(PatientConflict) as exc:
        resolve_patient(ssn='111-22-3333', name='Loser')
    assert exc.value.status_code == 409


def test_bulk_create_keeps_input_order_and_links_patient():
    created = svc.create_bulk_appointments(
        ssn='555-66-7777', patient_name='Bob Brown',
        details=details(('B', datetime(2025, 8, 5)), ('A', datetime(2025, 8, 1)), ('C', datetime(2025, 8, 3))),
    )
    assert [a.reason for a in created] == ['B', 'A', 'C']
    patient = Patient.objects.get(ssn='555-66-7777')
    assert all(a.patient_id == patient.pk for a in created)
    assert all(a.created_date is not None for a in created)
    assert Appointment.objects.filter(patient=patient).count() == 3


def test_bulk_create_is_atomic(monkeypatch):
    def boom(appointments):
        raise DatabaseError('insert failed')

    monkeypatch.setattr(repositories, 'save_appointments', boom)
    with pytest.raises(DatabaseError):
        svc.create_bulk_appointments(
            ssn='555-66-7777', patient_name='Bob Brown',
            details=details(('Initial', datetime(2025, 8, 1))),
        )
    # The new patient was rolled back with the appointments.
    assert not Patient.objects.filter(ssn='555-66-7777').exists()


def test_find_by_reason_is_exact_and_case_insensitive():
    svc.create_bulk_appointments(
        ssn='1', patient_name='P One',
        details=details(('Checkup', datetime(2025, 1, 1)), ('Checkup visit', datetime(2025, 1, 2)),
                        ('Pre-checkup', datetime(2025, 1, 3)), ('cHeCkUp', datetime(2025, 1, 4))),
    )
    found = svc.find_appointments_by_reason('checkup')
    assert [a.reason for a in found] == ['Checkup', 'cHeCkUp']
    assert found[0].patient.ssn == '1'


def test_delete_removes_only_that_patients_appointments_and_audits(doctor):
    svc.create_bulk_appointments(ssn='222-33-4444', patient_name='Alice',
                                 details=details(('Dental', datetime(2025, 7, 10)), ('Vision', datetime(2025, 7, 11))))
    svc.create_bulk_appointments(ssn='999-99-9999', patient_name='Other',
                                 details=details(('Dental', datetime(2025, 7, 10))))

    assert svc.delete_appointments_for_patient('222-33-4444', user=doctor) == 2
    assert Appointment.objects.count() == 1
    assert Patient.objects.filter(ssn='222-33-4444').exists()

    event = AuditEvent.objects.get(action='appointments_delete')
    assert event.user == doctor
    assert event.detail == {'deleted': 2, 'ssn': '***-**-4444'}
    assert event.object_id == str(Patient.objects.get(ssn='222-33-4444').pk)


def test_delete_unknown_patient_raises_not_found():
    with pytest.raises(PatientNotFound) as exc:
        svc.delete_appointments_for_patient('000-00-0000')
    assert "'000-00-0000'" in exc.value.message
    assert not AuditEvent.objects.exists()


def test_latest_picks_max_date():
    svc.create_bulk_appointments(
        ssn='555-66-7777', patient_name='Bob Brown',
        details=details(('Initial', datetime(2025, 8, 1, 8)), ('Follow-up', datetime(2025, 8, 5, 9, 30)),
                        ('Final check', datetime(2025, 8, 3, 11, 15))),
    )
    latest = svc.get_latest_appointment_for_patient('555-66-7777')
    assert latest.reason == 'Follow-up'
    assert latest.date == datetime(2025, 8, 5, 9, 30)


def test_latest_with_tied_dates_returns_one_of_them():
    svc.create_bulk_appointments(
        ssn='1', patient_name='P One',
        details=details(('A', datetime(2025, 8, 5)), ('B', datetime(2025, 8, 5)), ('C', datetime(2025, 8, 1))),
    )
    assert svc.get_latest_appointment_for_patient('1').reason in {'A', 'B'}


def test_latest_distinguishes_missing_patient_from_missing_appointments():
    with pytest.raises(PatientNotFound):
        svc.get_latest_appointment_for_patient('1')
    Patient.objects.create(name='P One', ssn='1')
    with pytest.raises(AppointmentNotFound) as exc:
        svc.get_latest_appointment_for_patient('1')
    assert exc.value.message == "No appointments found for SSN '1'"


def test_find_by_reason_folds_non_ascii_case():
    svc.create_bulk_appointments(
        ssn='1', patient_name='P One',
        details=details(('Ärztliche Kontrolle', datetime(2025, 1, 1)),
                        ('Ärztliche Kontrolle extra', datetime(2025, 1, 2))),
    )
    found = svc.find_appointments_by_reason('ärztliche kontrolle')
    assert [a.reason for a in found] == ['Ärztliche Kontrolle']
    assert [a.reason for a in svc.find_appointments_by_reason('ÄRZTLICHE KONTROLLE')] == ['Ärztliche Kontrolle']


def test_unicode_lower_prefilter_keeps_non_ascii_candidates():
    svc.create_bulk_appointments(ssn='1', patient_name='P One',
                                 details=details(('Öffentliche Impfung', datetime(2025, 1, 1))))
    candidates = repositories.find_appointments_by_reason_with_patient('öffentliche')
    assert [a.reason for a in candidates] == ['Öffentliche Impfung']


def test_find_by_reason_logs_trimmed_keyword_once(monkeypatch):
    logger = mock.Mock()
    monkeypatch.setattr(svc, 'logger', logger)
    svc.find_appointments_by_reason('  Checkup  ')
    logger.debug.assert_called_once_with("Searching appointments by reason='%s'", 'Checkup')
    logger.info.assert_called_once_with('Found %d appointments matching the reason', 0)
