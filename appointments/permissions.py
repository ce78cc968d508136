"""
Custom permission classes for role based access control.
"""
from rest_framework.permissions import BasePermission

from appointments.models import User


class IsDoctorRole(BasePermission):
    """Allow access only to users with the doctor role."""
    message = 'Only doctors may manage appointments.'

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and getattr(user, "role", None) == User.ROLE_DOCTOR)
