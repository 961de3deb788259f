# permissions.py
from rest_framework.permissions import BasePermission


class IsModerationStaff(BasePermission):
    """Admins, moderators and is_staff users may review flags."""

    message = "Only staff can review flags."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if not getattr(user, "is_active", 1) or getattr(user, "is_deleted", 0):
            return False
        return bool(getattr(user, "is_moderation_staff", False))
