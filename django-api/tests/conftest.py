"""Pytest configuration and shared fixtures."""

from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from tests.factories import NOW, Clock, make_event
from ticketing.domain import Event, EventStatus, OrganizationId, Principal, Role
from ticketing.models import Event as EventRow
from ticketing.models import Member, Organization
from ticketing.services import TicketService
from ticketing.stores import InMemoryTicketStore


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def clock() -> Clock:
    return Clock(NOW)


@pytest.fixture
def org_id() -> OrganizationId:
    return OrganizationId(uuid4())


@pytest.fixture
def other_org_id() -> OrganizationId:
    return OrganizationId(uuid4())


@pytest.fixture
def store() -> InMemoryTicketStore:
    return InMemoryTicketStore()


@pytest.fixture
def service(store: InMemoryTicketStore, clock: Clock) -> TicketService:
    return TicketService(store, clock=clock)


@pytest.fixture
def event(store: InMemoryTicketStore, org_id: OrganizationId) -> Event:
    event = make_event(org_id, capacity=2, price="15.50")
    store.save_event(event)
    return event


@pytest.fixture
def organizer(org_id: OrganizationId) -> Principal:
    return Principal(user_id=100, role=Role.ORGANIZER, organization_id=org_id)


@pytest.fixture
def foreign_organizer(other_org_id: OrganizationId) -> Principal:
    return Principal(user_id=200, role=Role.ORGANIZER, organization_id=other_org_id)


@pytest.fixture
def admin() -> Principal:
    return Principal(user_id=1, role=Role.ADMIN)


@pytest.fixture
def db_org(db):
    return Organization.objects.create(name="Chess Club", contact_email="chess@campus.edu")


@pytest.fixture
def db_other_org(db):
    return Organization.objects.create(name="Film Society", contact_email="film@campus.edu")


@pytest.fixture
def make_user(db, django_user_model):
    def make(username, role, organization=None, is_approved=True):
        user = django_user_model.objects.create_user(username=username, password="s3cret-pass")
        Member.objects.create(
            user=user, role=role.value, organization=organization, is_approved=is_approved
        )
        return user

    return make


@pytest.fixture
def student_user(make_user):
    return make_user("student", Role.STUDENT)


@pytest.fixture
def organizer_user(make_user, db_org):
    return make_user("organizer", Role.ORGANIZER, organization=db_org)


@pytest.fixture
def foreign_organizer_user(make_user, db_other_org):
    return make_user("rival", Role.ORGANIZER, organization=db_other_org)


@pytest.fixture
def staff_user(make_user):
    return make_user("staff", Role.ADMIN)


@pytest.fixture
def make_db_event(db_org, organizer_user):
    def make(capacity=2, ticket_price="20.00", starts_in=timedelta(days=7), **fields):
        starts_at = timezone.now() + starts_in
        defaults = {
            "organization": db_org,
            "created_by": organizer_user,
            "title": "Chess Open",
            "starts_at": starts_at,
            "ends_at": starts_at + timedelta(hours=4),
            "capacity": capacity,
            "ticket_price": Decimal(ticket_price),
            "status": EventStatus.PUBLISHED.value,
            "is_approved": True,
        }
        defaults.update(fields)
        return EventRow.objects.create(**defaults)

    return make


@pytest.fixture
def db_event(make_db_event):
    return make_db_event()
