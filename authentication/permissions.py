from rest_framework import permissions

from .models import CustomUser


class IsStaffMember(permissions.BasePermission):
    """
    Permission to allow any active restaurant user (manager or staff)
    """
    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.is_active and user.role in CustomUser.Role.values


class IsManager(permissions.BasePermission):
    """
    Permission to only allow managers
    """
    message = 'Only managers can perform this action.'

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.is_active and user.role == CustomUser.Role.MANAGER


class IsManagerOrReadOnly(permissions.BasePermission):
    """
    Staff can read, managers can write
    """
    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return IsStaffMember().has_permission(request, view)
        return IsManager().has_permission(request, view)
