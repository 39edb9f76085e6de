from rest_framework.permissions import BasePermission


class IsAdmin(BasePermission):
    """Authenticated user holding the ``admin`` role."""

    message = "Access denied. Admin only."

    def has_permission(self, request, view) -> bool:
        user = request.user
        return bool(
            user and user.is_authenticated and getattr(user, "role", None) == "admin"
        )
