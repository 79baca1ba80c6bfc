from django.contrib import admin, messages

from events.models import Event, Registration
from events.services.registration_service import RegistrationService
from events.stores.django_store import DjangoEventStore


class RegistrationInline(admin.TabularInline):
    model = Registration
    extra = 0
    fields = ["user_name", "user_email", "registered_at", "checked_in_at"]
    readonly_fields = ["registered_at"]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "location", "starts_at", "registered", "capacity", "is_closed"]
    list_filter = ["is_closed"]
    search_fields = ["title", "location"]
    readonly_fields = ["registered"]
    inlines = [RegistrationInline]
    actions = ["reconcile_registered"]

    @admin.action(description="Reconcile registered counts")
    def reconcile_registered(self, request, queryset):
        service = RegistrationService(DjangoEventStore())
        for event in queryset:
            service.reconcile(str(event.pk))
        self.message_user(
            request, f"Reconciled {queryset.count()} event(s).", messages.SUCCESS
        )


@admin.register(Registration)
class RegistrationAdmin(admin.ModelAdmin):
    list_display = ["user_name", "user_email", "event", "registered_at", "checked_in_at"]
    list_filter = ["event"]
    search_fields = ["user_name", "user_email", "user_id"]
    readonly_fields = ["ticket_qr_data"]
