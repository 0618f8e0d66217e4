"""QR payload codec.

A credential binds exactly four immutable facts: ticket, event, holder and
issuance time. Ticket status is never part of the payload. The encoded string
is stored with the ticket and looked up by exact equality, so ``decode`` only
accepts the canonical form ``encode`` produces.
"""

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Self
from uuid import UUID, uuid4

from ticketing.domain.errors import MalformedCredentialError
from ticketing.domain.value_objects import EventId, TicketId

PAYLOAD_KEYS = ("ticketId", "eventId", "userId", "timestamp")


def truncate_to_millis(moment: datetime) -> datetime:
    return moment.replace(microsecond=moment.microsecond // 1000 * 1000)


def _format_timestamp(moment: datetime) -> str:
    text = moment.astimezone(UTC).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


@dataclass(frozen=True)
class TicketCredential:
    ticket_id: TicketId
    event_id: EventId
    holder_id: int
    issued_at: datetime

    @classmethod
    def issue(cls, event_id: EventId, holder_id: int, now: datetime) -> Self:
        """Build a credential with a fresh ticket identifier."""
        return cls(
            ticket_id=TicketId(uuid4()),
            event_id=event_id,
            holder_id=holder_id,
            issued_at=truncate_to_millis(now),
        )


def encode(credential: TicketCredential) -> str:
    payload = {
        "ticketId": str(credential.ticket_id),
        "eventId": str(credential.event_id),
        "userId": str(credential.holder_id),
        "timestamp": _format_timestamp(credential.issued_at),
    }
    return json.dumps(payload, separators=(",", ":"))


def decode(payload: str) -> TicketCredential:
    """Parse a QR payload.

    Raises:
        MalformedCredentialError: If the payload is not a canonical credential.
    """
    try:
        data = json.loads(payload)
    except (TypeError, ValueError) as exc:
        raise MalformedCredentialError("not json") from exc

    if not isinstance(data, dict) or tuple(data) != PAYLOAD_KEYS:
        raise MalformedCredentialError("unexpected fields")
    if not all(isinstance(value, str) for value in data.values()):
        raise MalformedCredentialError("non-string field")

    try:
        credential = TicketCredential(
            ticket_id=TicketId(UUID(data["ticketId"])),
            event_id=EventId(UUID(data["eventId"])),
            holder_id=int(data["userId"]),
            issued_at=datetime.fromisoformat(data["timestamp"]),
        )
    except ValueError as exc:
        raise MalformedCredentialError("invalid field value") from exc

    if credential.issued_at.tzinfo is None:
        raise MalformedCredentialError("naive timestamp")
    if encode(credential) != payload:
        raise MalformedCredentialError("non-canonical payload")
    return credential
