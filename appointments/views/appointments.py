"""
Appointment endpoints.

All views require an authenticated caller with the ``doctor`` role.
Input is validated by serializers before the service layer is called,
so blank parameters never reach the database.  Service errors
(:mod:`appointments.exceptions`) are rendered by the project's DRF
exception handler.
"""
from __future__ import annotations

from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from appointments.permissions import IsDoctorRole
from appointments.serializers.appointment import (
    AppointmentSerializer,
    AppointmentWithPatientSerializer,
    BulkAppointmentCreateSerializer,
    ReasonQuerySerializer,
    SsnQuerySerializer,
)
from appointments.services import appointments as appointment_service

_ssn_param = openapi.Parameter('ssn', openapi.IN_QUERY, type=openapi.TYPE_STRING, required=True)
_reason_param = openapi.Parameter('reason', openapi.IN_QUERY, type=openapi.TYPE_STRING)


@swagger_auto_schema(method='post', request_body=BulkAppointmentCreateSerializer,
                     responses={200: AppointmentSerializer(many=True)})
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsDoctorRole])
def create_bulk(request):
    """Create several appointments for one patient, creating the patient if needed."""
    s = BulkAppointmentCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    created = appointment_service.create_bulk_appointments(
        ssn=s.validated_data['ssn'],
        patient_name=s.validated_data['patientName'],
        details=s.validated_data['appointmentDetails'],
    )
    return Response(AppointmentSerializer(created, many=True).data)


def _search_by_reason(request):
    q = ReasonQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    found = appointment_service.find_appointments_by_reason(q.validated_data['reason'])
    return Response(AppointmentWithPatientSerializer(found, many=True).data)


def _delete_by_ssn(request):
    q = SsnQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    ssn = q.validated_data['ssn']
    deleted = appointment_service.delete_appointments_for_patient(ssn, user=request.user)
    return Response({'deletedCount': deleted, 'ssn': ssn})


@swagger_auto_schema(method='get', manual_parameters=[_reason_param],
                     responses={200: AppointmentWithPatientSerializer(many=True)})
@swagger_auto_schema(method='delete', manual_parameters=[_ssn_param])
@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated, IsDoctorRole])
def appointments(request):
    """GET: search by exact reason (case-insensitive).  DELETE: remove all of a patient's appointments."""
    if request.method == 'DELETE':
        return _delete_by_ssn(request)
    return _search_by_reason(request)


@swagger_auto_schema(method='get', manual_parameters=[_ssn_param],
                     responses={200: AppointmentSerializer()})
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsDoctorRole])
def latest(request):
    """Return the patient's appointment with the most recent date."""
    q = SsnQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    appointment = appointment_service.get_latest_appointment_for_patient(q.validated_data['ssn'])
    return Response(AppointmentSerializer(appointment).data)
