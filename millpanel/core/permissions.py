from rest_framework.permissions import BasePermission


class IsSuperAdmin(BasePermission):
    """Allows access only to users with the superadmin role"""
    message = 'Super admin access required'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_superadmin)
