"""Domain error codes for the ticketing module.

Every business rule has its own exception class so callers can render a
precise message. ``kind`` groups codes into the four handling categories.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    """How a caller is expected to treat an error."""

    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    NOT_FOUND = "not_found"
    TRANSIENT = "transient"


class ErrorCode(Enum):
    """Domain error codes."""

    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    INVALID_TICKET_ID = "INVALID_TICKET_ID"
    MALFORMED_CREDENTIAL = "MALFORMED_CREDENTIAL"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    TICKET_NOT_FOUND = "TICKET_NOT_FOUND"
    EVENT_NOT_CLAIMABLE = "EVENT_NOT_CLAIMABLE"
    ALREADY_CLAIMED = "ALREADY_CLAIMED"
    SOLD_OUT = "SOLD_OUT"
    NOT_ACTIVE = "NOT_ACTIVE"
    EVENT_PASSED = "EVENT_PASSED"
    WRONG_SCOPE = "WRONG_SCOPE"
    NOT_TICKET_HOLDER = "NOT_TICKET_HOLDER"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


_KINDS = {
    ErrorCode.INVALID_EVENT_ID: ErrorKind.VALIDATION,
    ErrorCode.INVALID_TICKET_ID: ErrorKind.VALIDATION,
    ErrorCode.MALFORMED_CREDENTIAL: ErrorKind.VALIDATION,
    ErrorCode.EVENT_NOT_FOUND: ErrorKind.NOT_FOUND,
    ErrorCode.TICKET_NOT_FOUND: ErrorKind.NOT_FOUND,
    ErrorCode.STORE_UNAVAILABLE: ErrorKind.TRANSIENT,
}


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    @property
    def kind(self) -> ErrorKind:
        return _KINDS.get(self.code, ErrorKind.BUSINESS_RULE)

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidEventIdError(DomainError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class InvalidTicketIdError(DomainError):
    """Raised when a ticket ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_TICKET_ID,
            message="Invalid ticket ID format",
        )


class MalformedCredentialError(DomainError):
    """Raised when a QR payload cannot be parsed."""

    def __init__(self, reason: str = "") -> None:
        super().__init__(
            code=ErrorCode.MALFORMED_CREDENTIAL,
            message="Invalid QR code format",
        )
        self.reason = reason


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class TicketNotFoundError(DomainError):
    """Raised when no ticket matches an identifier or credential."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.TICKET_NOT_FOUND,
            message="Ticket not found",
        )


class EventNotClaimableError(DomainError):
    """Raised when an event is unpublished, unapproved or already started."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_CLAIMABLE,
            message="Event is not available for ticket claiming",
        )
        self.event_id = event_id


class AlreadyClaimedError(DomainError):
    """Raised when the holder already has a live ticket for the event."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_CLAIMED,
            message="You already have a ticket for this event",
        )
        self.event_id = event_id


class SoldOutError(DomainError):
    """Raised when every capacity slot of the event is occupied."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.SOLD_OUT,
            message="Event is sold out",
        )
        self.event_id = event_id


class TicketNotActiveError(DomainError):
    """Raised when a ticket is used, cancelled or expired."""

    def __init__(self, status: str | None = None) -> None:
        super().__init__(
            code=ErrorCode.NOT_ACTIVE,
            message="Ticket is not valid",
        )
        self.status = status


class EventPassedError(DomainError):
    """Raised when redeeming a ticket for an event that has ended."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.EVENT_PASSED,
            message="Event has already passed",
        )


class WrongScopeError(DomainError):
    """Raised when a principal acts outside its organization."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.WRONG_SCOPE,
            message="Ticket does not belong to your organization",
        )


class StoreUnavailableError(DomainError):
    """Raised when the backing store times out or cannot be reached."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            code=ErrorCode.STORE_UNAVAILABLE,
            message="Service temporarily unavailable",
        )
        self.operation = operation


class NotTicketHolderError(DomainError):
    """Raised when a holder asks for someone else's ticket."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NOT_TICKET_HOLDER,
            message="Access denied",
        )
