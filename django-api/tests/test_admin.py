"""Tests for the ticket admin.

Run with: pytest tests/test_admin.py -v
"""

from decimal import Decimal
from uuid import uuid4

import pytest
from django.urls import reverse
from django.utils import timezone

from ticketing.domain import Role
from ticketing.models import Ticket as TicketRow


@pytest.fixture
def make_ticket(db_event, make_user):
    def make(username, status="active"):
        return TicketRow.objects.create(
            ticket_id=uuid4(),
            event=db_event,
            holder=make_user(username, Role.STUDENT),
            qr_payload=str(uuid4()),
            status=status,
            price=Decimal("20.00"),
            issued_at=timezone.now(),
        )

    return make


@pytest.mark.django_db
class TestTicketAdmin:
    """Tests for TicketAdmin."""

    def test_change_form_cannot_rewrite_status(self, admin_client, make_ticket):
        """Given a used ticket, posting the change form leaves it used."""
        row = make_ticket("guest", status="used")

        admin_client.post(
            reverse("admin:ticketing_ticket_change", args=[row.pk]),
            {"status": "active", "price": "0", "_save": "Save"},
        )

        row.refresh_from_db()
        assert row.status == "used"
        assert row.price == Decimal("20.00")

    def test_cancel_action_goes_through_the_service(self, admin_client, make_ticket):
        """Given active and used tickets, the action cancels only the active one."""
        active = make_ticket("first")
        used = make_ticket("second", status="used")

        response = admin_client.post(
            reverse("admin:ticketing_ticket_changelist"),
            {"action": "cancel_tickets", "_selected_action": [active.pk, used.pk]},
        )

        assert response.status_code == 302
        active.refresh_from_db()
        used.refresh_from_db()
        assert active.status == "cancelled"
        assert used.status == "used"

    def test_tickets_cannot_be_added_or_deleted(self, admin_client, make_ticket):
        """Given the admin, add and delete pages are forbidden."""
        row = make_ticket("guest")

        assert admin_client.get(reverse("admin:ticketing_ticket_add")).status_code == 403
        delete_url = reverse("admin:ticketing_ticket_delete", args=[row.pk])
        assert admin_client.get(delete_url).status_code == 403
