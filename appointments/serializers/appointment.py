from rest_framework import serializers

from appointments.models import Appointment, Patient


def _messages(label):
    return {
        'required': f'{label} must not be blank',
        'blank': f'{label} must not be blank',
        'null': f'{label} must not be blank',
    }


class AppointmentDetailsSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=255, error_messages=_messages('Reason'))
    date = serializers.DateTimeField(error_messages={
        'required': 'Date must not be null',
        'null': 'Date must not be null',
    })


class BulkAppointmentCreateSerializer(serializers.Serializer):
    patientName = serializers.CharField(max_length=255, error_messages=_messages('Patient name'))
    ssn = serializers.CharField(max_length=64, error_messages=_messages('SSN'))
    appointmentDetails = AppointmentDetailsSerializer(
        many=True,
        allow_empty=False,
        error_messages={'empty': 'Appointment details list must not be empty'},
    )


class ReasonQuerySerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=255, error_messages=_messages('Reason'))


class SsnQuerySerializer(serializers.Serializer):
    ssn = serializers.CharField(max_length=64, error_messages=_messages('SSN'))


class PatientSerializer(serializers.ModelSerializer):
    class Meta:
        model = Patient
        fields = ['name', 'ssn']


class AppointmentSerializer(serializers.ModelSerializer):
    """Appointment without its owner; ``patient`` is always null."""
    patient = serializers.SerializerMethodField()

    class Meta:
        model = Appointment
        fields = ['id', 'reason', 'date', 'patient']

    def get_patient(self, obj):
        return None


class AppointmentWithPatientSerializer(AppointmentSerializer):
    patient = PatientSerializer(read_only=True)
