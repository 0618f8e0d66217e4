"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
The one-live-ticket-per-holder rule and positive capacity are enforced here as
database constraints, not only in application code.
"""

import uuid

from django.conf import settings
from django.db import models

from ticketing.domain import EventStatus, Role, TicketStatus

OCCUPYING_STATUSES = sorted(status.value for status in TicketStatus.occupying())


class Organization(models.Model):
    """Persistence model for organizations that run events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255, unique=True)
    contact_email = models.EmailField()
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return self.name


class Member(models.Model):
    """Role and organization membership of a user."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="member"
    )
    role = models.CharField(max_length=20, choices=[(r.value, r.name.title()) for r in Role])
    organization = models.ForeignKey(
        Organization,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="members",
    )
    is_approved = models.BooleanField(default=False)

    def __str__(self) -> str:
        return f"{self.user} ({self.role})"


class Event(models.Model):
    """Persistence model for events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization = models.ForeignKey(
        Organization, on_delete=models.CASCADE, related_name="events"
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="created_events"
    )
    title = models.CharField(max_length=255)
    starts_at = models.DateTimeField()
    ends_at = models.DateTimeField()
    capacity = models.PositiveIntegerField()
    ticket_price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    status = models.CharField(
        max_length=20,
        choices=[(s.value, s.name.title()) for s in EventStatus],
        default=EventStatus.DRAFT.value,
    )
    is_approved = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["starts_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(capacity__gte=1), name="event_capacity_positive"
            ),
        ]
        indexes = [
            models.Index(fields=["organization"], name="event_org_idx"),
            models.Index(fields=["status", "is_approved"], name="event_status_idx"),
        ]

    def __str__(self) -> str:
        return self.title


class Ticket(models.Model):
    """Persistence model for issued tickets."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    ticket_id = models.UUIDField(unique=True, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="tickets")
    holder = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="tickets"
    )
    qr_payload = models.TextField(unique=True)
    status = models.CharField(
        max_length=20,
        choices=[(s.value, s.name.title()) for s in TicketStatus],
        default=TicketStatus.ACTIVE.value,
    )
    price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    issued_at = models.DateTimeField()
    used_at = models.DateTimeField(null=True, blank=True)
    used_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="redeemed_tickets",
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-issued_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "holder"],
                condition=models.Q(status__in=OCCUPYING_STATUSES),
                name="unique_live_ticket_per_holder",
            ),
            models.CheckConstraint(
                condition=models.Q(price__gte=0), name="ticket_price_non_negative"
            ),
        ]
        indexes = [
            models.Index(fields=["event", "status"], name="ticket_event_status_idx"),
            models.Index(fields=["holder", "-issued_at"], name="ticket_holder_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.ticket_id} - {self.status}"
