"""Django signals for cache invalidation.

Counter writes made with QuerySet.update() bypass these signals; the ORM
store invalidates for those itself.
"""

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from events.cache import invalidate_event
from events.models import Event, Registration


@receiver([post_save, post_delete], sender=Event)
def invalidate_event_cache(sender, instance, **kwargs):
    """Invalidate caches when an event is saved or deleted."""
    invalidate_event(instance.pk)


@receiver([post_save, post_delete], sender=Registration)
def invalidate_registration_cache(sender, instance, **kwargs):
    """Invalidate the owning event's caches when a registration changes."""
    invalidate_event(instance.event_id)
