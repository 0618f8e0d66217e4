from django.contrib import admin, messages

from ticketing.domain import Principal, Role
from ticketing.domain.errors import TicketNotActiveError
from ticketing.models import Event, Member, Organization, Ticket
from ticketing.services import TicketService
from ticketing.stores import DjangoTicketStore


class MemberInline(admin.TabularInline):
    model = Member
    extra = 0


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = ["name", "contact_email", "is_active", "created_at"]
    search_fields = ["name"]
    inlines = [MemberInline]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "organization", "starts_at", "capacity", "status", "is_approved"]
    list_filter = ["status", "is_approved", "organization"]
    search_fields = ["title"]


@admin.register(Ticket)
class TicketAdmin(admin.ModelAdmin):
    """Read-only view of tickets; status only changes through the ticket service."""

    list_display = ["ticket_id", "event", "holder", "status", "price", "issued_at", "used_at"]
    list_filter = ["status", "event__organization"]
    search_fields = ["ticket_id"]
    readonly_fields = [
        "ticket_id",
        "event",
        "holder",
        "status",
        "price",
        "qr_payload",
        "issued_at",
        "used_at",
        "used_by",
    ]
    actions = ["cancel_tickets"]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    @admin.action(description="Cancel selected tickets")
    def cancel_tickets(self, request, queryset):
        service = TicketService(DjangoTicketStore())
        principal = Principal(user_id=request.user.pk, role=Role.ADMIN)
        cancelled = skipped = 0
        for ticket_id in queryset.values_list("ticket_id", flat=True):
            try:
                service.cancel(str(ticket_id), principal)
            except TicketNotActiveError:
                skipped += 1
            else:
                cancelled += 1

        self.message_user(request, f"Cancelled {cancelled} tickets", messages.SUCCESS)
        if skipped:
            self.message_user(
                request, f"Skipped {skipped} tickets that were not active", messages.WARNING
            )
