"""Django ORM implementation of the TicketStore."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

from django.conf import settings
from django.db import IntegrityError, InterfaceError, OperationalError, transaction
from django.db.models import Count, QuerySet
from django.db.models.functions import TruncHour
from django.utils import timezone

from ticketing import models
from ticketing.domain import (
    Capacity,
    Event,
    EventId,
    EventStatus,
    HourlyScans,
    Money,
    OrganizationId,
    Ticket,
    TicketCredential,
    TicketId,
    TicketStatus,
)
from ticketing.domain.capacity import reserve_slot
from ticketing.domain.errors import (
    AlreadyClaimedError,
    EventNotFoundError,
    StoreUnavailableError,
)
from ticketing.stores.interfaces import TicketStore

logger = logging.getLogger(__name__)

OCCUPYING = [status.value for status in TicketStatus.occupying()]


def to_domain_event(row: models.Event) -> Event:
    return Event(
        id=EventId(row.id),
        organization_id=OrganizationId(row.organization_id),
        title=row.title,
        capacity=Capacity(row.capacity),
        ticket_price=Money(row.ticket_price),
        status=EventStatus(row.status),
        is_approved=row.is_approved,
        starts_at=row.starts_at,
        ends_at=row.ends_at,
    )


def to_domain_ticket(row: models.Ticket) -> Ticket:
    return Ticket(
        ticket_id=TicketId(row.ticket_id),
        event_id=EventId(row.event_id),
        holder_id=row.holder_id,
        status=TicketStatus(row.status),
        price=Money(row.price),
        issued_at=row.issued_at,
        credential=row.qr_payload,
        used_at=row.used_at,
        used_by=row.used_by_id,
    )


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except (OperationalError, InterfaceError) as exc:
        logger.warning("Ticket store unavailable during %s: %s", operation, exc)
        raise StoreUnavailableError(operation) from exc


def _expirable(now: datetime) -> QuerySet:
    ended = models.Event.objects.filter(ends_at__lte=now).values("pk")
    return models.Ticket.objects.filter(status=TicketStatus.ACTIVE.value, event_id__in=ended)


class DjangoTicketStore(TicketStore):
    """Relational store using Django ORM.

    Claims lock the event row for the duration of the transaction so the
    occupying-ticket count cannot go stale between the ledger check and the
    insert. The partial unique constraint on (event, holder) backs up the
    duplicate guard where row locks are unavailable.

    Status writes filter on ticket columns only, with event conditions in an
    ``event_id IN (...)`` subquery. A join would make Django rewrite the
    UPDATE as ``id IN (SELECT ...)`` (or a separate SELECT on MySQL), and the
    status predicate would no longer be re-checked on the row being written.
    """

    def __init__(self, max_attempts: int | None = None) -> None:
        if max_attempts is None:
            max_attempts = settings.TICKETING_CLAIM_MAX_ATTEMPTS
        self._max_attempts = max(1, max_attempts)

    def get_event(self, event_id: EventId) -> Event | None:
        with _store_errors("get_event"):
            row = models.Event.objects.filter(pk=event_id.value).first()
        return to_domain_event(row) if row else None

    def issue_ticket(self, credential: TicketCredential, payload: str) -> Ticket:
        for attempt in range(1, self._max_attempts + 1):
            try:
                return self._issue_once(credential, payload)
            except OperationalError as exc:
                logger.warning(
                    "Claim attempt %d/%d for event %s failed: %s",
                    attempt,
                    self._max_attempts,
                    credential.event_id,
                    exc,
                )
            except InterfaceError as exc:
                raise StoreUnavailableError("issue_ticket") from exc
        raise StoreUnavailableError("issue_ticket")

    def _issue_once(self, credential: TicketCredential, payload: str) -> Ticket:
        event_id = str(credential.event_id)
        try:
            with transaction.atomic():
                event_row = (
                    models.Event.objects.select_for_update()
                    .filter(pk=credential.event_id.value)
                    .first()
                )
                if event_row is None:
                    raise EventNotFoundError(event_id)

                live = models.Ticket.objects.filter(
                    event_id=event_row.pk, status__in=OCCUPYING
                )
                if live.filter(holder_id=credential.holder_id).exists():
                    raise AlreadyClaimedError(event_id)
                reserve_slot(to_domain_event(event_row), live.count())

                row = models.Ticket.objects.create(
                    ticket_id=credential.ticket_id.value,
                    event_id=event_row.pk,
                    holder_id=credential.holder_id,
                    qr_payload=payload,
                    status=TicketStatus.ACTIVE.value,
                    price=event_row.ticket_price,
                    issued_at=credential.issued_at,
                )
        except IntegrityError as exc:
            # Only the partial unique index on (event, holder) means a lost
            # claim race; any other violation is a bug and propagates.
            if not self._holds_live_ticket(credential):
                raise
            raise AlreadyClaimedError(event_id) from exc
        return to_domain_ticket(row)

    def _holds_live_ticket(self, credential: TicketCredential) -> bool:
        return models.Ticket.objects.filter(
            event_id=credential.event_id.value,
            holder_id=credential.holder_id,
            status__in=OCCUPYING,
        ).exists()

    def find_by_credential(self, payload: str) -> Ticket | None:
        with _store_errors("find_by_credential"):
            row = models.Ticket.objects.filter(qr_payload=payload).first()
        return to_domain_ticket(row) if row else None

    def get_ticket(self, ticket_id: TicketId) -> Ticket | None:
        with _store_errors("get_ticket"):
            row = models.Ticket.objects.filter(ticket_id=ticket_id.value).first()
        return to_domain_ticket(row) if row else None

    def mark_used(
        self,
        payload: str,
        organization_id: OrganizationId,
        used_by: int,
        now: datetime,
    ) -> Ticket | None:
        open_events = models.Event.objects.filter(
            organization_id=organization_id.value, ends_at__gt=now
        ).values("pk")
        with _store_errors("mark_used"):
            updated = models.Ticket.objects.filter(
                qr_payload=payload,
                status=TicketStatus.ACTIVE.value,
                event_id__in=open_events,
            ).update(
                status=TicketStatus.USED.value,
                used_at=now,
                used_by_id=used_by,
                updated_at=now,
            )
            if not updated:
                return None
            return to_domain_ticket(models.Ticket.objects.get(qr_payload=payload))

    def cancel_ticket(self, ticket_id: TicketId) -> Ticket | None:
        with _store_errors("cancel_ticket"):
            rows = models.Ticket.objects.filter(
                ticket_id=ticket_id.value, status=TicketStatus.ACTIVE.value
            )
            if not rows.update(status=TicketStatus.CANCELLED.value, updated_at=timezone.now()):
                return None
            return to_domain_ticket(models.Ticket.objects.get(ticket_id=ticket_id.value))

    def expire_tickets(self, now: datetime) -> int:
        with _store_errors("expire_tickets"):
            return _expirable(now).update(status=TicketStatus.EXPIRED.value, updated_at=now)

    def count_expirable(self, now: datetime) -> int:
        with _store_errors("count_expirable"):
            return _expirable(now).count()

    def count_by_status(self, event_id: EventId) -> dict[TicketStatus, int]:
        counts = {status: 0 for status in TicketStatus}
        with _store_errors("count_by_status"):
            rows = (
                models.Ticket.objects.filter(event_id=event_id.value)
                .order_by()
                .values_list("status")
                .annotate(total=Count("id"))
            )
            for status, total in rows:
                counts[TicketStatus(status)] = total
        return counts

    def list_for_holder(self, holder_id: int) -> list[Ticket]:
        with _store_errors("list_for_holder"):
            rows = models.Ticket.objects.filter(holder_id=holder_id).order_by("-issued_at")
            return [to_domain_ticket(row) for row in rows]

    def recent_redemptions(self, event_id: EventId, limit: int) -> list[Ticket]:
        with _store_errors("recent_redemptions"):
            rows = models.Ticket.objects.filter(
                event_id=event_id.value, status=TicketStatus.USED.value
            ).order_by("-used_at")[:limit]
            return [to_domain_ticket(row) for row in rows]

    def redemptions_by_hour(self, event_id: EventId) -> list[HourlyScans]:
        with _store_errors("redemptions_by_hour"):
            rows = (
                models.Ticket.objects.filter(
                    event_id=event_id.value, status=TicketStatus.USED.value
                )
                .annotate(hour=TruncHour("used_at"))
                .values("hour")
                .annotate(scans=Count("id"))
                .order_by("hour")
            )
            return [HourlyScans(hour=row["hour"], scans=row["scans"]) for row in rows]
