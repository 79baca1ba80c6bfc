"""Who may operate events (check-in, reconcile, exports)."""

from events.conf import get_setting


def is_admin(user) -> bool:
    if user is None or not user.is_authenticated:
        return False
    if user.is_staff or user.is_superuser:
        return True
    return user.groups.filter(name=get_setting("ADMIN_GROUP")).exists()
