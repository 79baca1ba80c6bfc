from rest_framework.permissions import BasePermission

from events.services.access import is_admin


class IsEventAdmin(BasePermission):
    """Allows event operators only."""

    message = "Event administrator access required."

    def has_permission(self, request, view) -> bool:
        return is_admin(request.user)
