"""Unit tests for the QR payload codec.

Run with: pytest tests/test_credentials.py -v
"""

import json
from datetime import UTC, datetime
from uuid import uuid4

import pytest

from tests.factories import NOW
from ticketing.domain import EventId, TicketCredential
from ticketing.domain.credentials import decode, encode, truncate_to_millis
from ticketing.domain.errors import MalformedCredentialError, TicketNotFoundError


@pytest.fixture
def credential() -> TicketCredential:
    return TicketCredential.issue(EventId(uuid4()), 42, NOW.replace(microsecond=123456))


class TestEncode:
    """Tests for credential serialization."""

    def test_payload_holds_exactly_the_four_bound_fields(self, credential):
        """Given a credential, encodes ticketId, eventId, userId and timestamp in that order."""
        data = json.loads(encode(credential))
        assert list(data) == ["ticketId", "eventId", "userId", "timestamp"]
        assert data["userId"] == "42"
        assert data["timestamp"] == "2026-03-01T12:00:00.123Z"

    def test_encoding_is_deterministic(self, credential):
        """Given the same credential, returns the same payload."""
        assert encode(credential) == encode(credential)

    def test_issue_truncates_to_milliseconds(self, credential):
        """Given microseconds, issue keeps millisecond precision."""
        assert credential.issued_at.microsecond == 123000
        assert truncate_to_millis(credential.issued_at) == credential.issued_at

    def test_issue_generates_fresh_ticket_ids(self):
        """Given two issues for the same event, returns distinct ticket ids."""
        event_id = EventId(uuid4())
        first = TicketCredential.issue(event_id, 1, NOW)
        second = TicketCredential.issue(event_id, 1, NOW)
        assert first.ticket_id != second.ticket_id


class TestDecode:
    """Tests for credential parsing."""

    def test_round_trip(self, credential):
        """Given an encoded credential, decode returns it unchanged."""
        assert decode(encode(credential)) == credential

    def test_round_trip_normalizes_timezone(self):
        """Given a UTC timestamp, decode returns the same instant."""
        moment = datetime(2026, 3, 1, 12, 0, 0, 500000, tzinfo=UTC)
        original = TicketCredential.issue(EventId(uuid4()), 7, moment)
        assert decode(encode(original)).issued_at == moment

    @pytest.mark.parametrize(
        "payload",
        [
            "",
            "not json",
            "[]",
            '"string"',
            "{}",
            '{"ticketId":"x"}',
        ],
    )
    def test_rejects_non_credentials(self, payload):
        """Given a payload that is not a credential, raises MalformedCredentialError."""
        with pytest.raises(MalformedCredentialError):
            decode(payload)

    def test_rejects_extra_fields(self, credential):
        """Given an extra status field, raises MalformedCredentialError."""
        data = json.loads(encode(credential))
        data["status"] = "active"
        with pytest.raises(MalformedCredentialError):
            decode(json.dumps(data, separators=(",", ":")))

    def test_rejects_reordered_fields(self, credential):
        """Given reordered keys, raises MalformedCredentialError."""
        data = json.loads(encode(credential))
        reordered = {key: data[key] for key in reversed(list(data))}
        with pytest.raises(MalformedCredentialError):
            decode(json.dumps(reordered, separators=(",", ":")))

    def test_rejects_non_canonical_whitespace(self, credential):
        """Given spaces after separators, raises MalformedCredentialError."""
        with pytest.raises(MalformedCredentialError):
            decode(json.dumps(json.loads(encode(credential))))

    def test_rejects_naive_timestamp(self, credential):
        """Given a timestamp without Z, raises MalformedCredentialError."""
        payload = encode(credential).replace(".123Z", ".123")
        with pytest.raises(MalformedCredentialError):
            decode(payload)

    def test_rejects_numeric_user_id(self, credential):
        """Given a numeric userId, raises MalformedCredentialError."""
        data = json.loads(encode(credential))
        data["userId"] = 42
        with pytest.raises(MalformedCredentialError):
            decode(json.dumps(data, separators=(",", ":")))


class TestTampering:
    """A mutated payload never resolves to a ticket."""

    def test_single_character_mutations_never_resolve(self, service, event, organizer):
        """Given any one-character change, the payload never resolves."""
        issued = service.claim(str(event.id), holder_id=1)
        service.claim(str(event.id), holder_id=2)
        payload = issued.credential

        for index, char in enumerate(payload):
            replacement = "0" if char != "0" else "1"
            mutated = payload[:index] + replacement + payload[index + 1 :]
            with pytest.raises((MalformedCredentialError, TicketNotFoundError)):
                service.inspect(mutated, organizer)
