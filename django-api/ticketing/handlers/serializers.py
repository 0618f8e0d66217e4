"""Serializers for request input and for transforming domain models to API responses."""

from rest_framework import serializers


class ClaimRequestSerializer(serializers.Serializer):
    eventId = serializers.CharField()


class CredentialRequestSerializer(serializers.Serializer):
    # The payload is matched byte for byte, so it must reach the service untouched.
    qrData = serializers.CharField(trim_whitespace=False)


class TicketSerializer(serializers.Serializer):
    """Serializer for Ticket domain model."""

    ticketId = serializers.CharField(source="ticket_id")
    eventId = serializers.CharField(source="event_id")
    userId = serializers.IntegerField(source="holder_id")
    status = serializers.CharField(source="status.value")
    price = serializers.CharField()
    issuedAt = serializers.DateTimeField(source="issued_at")
    usedAt = serializers.DateTimeField(source="used_at")
    usedBy = serializers.IntegerField(source="used_by")


class CapacityStatusSerializer(serializers.Serializer):
    """Serializer for CapacityStatus domain model."""

    issued = serializers.IntegerField()
    remaining = serializers.IntegerField()
    capacity = serializers.IntegerField()


class HourlyScansSerializer(serializers.Serializer):
    hour = serializers.DateTimeField()
    count = serializers.IntegerField(source="scans")


class ScanStatsSerializer(serializers.Serializer):
    """Serializer for ScanStats domain model."""

    eventId = serializers.CharField(source="event_id")
    totalTickets = serializers.IntegerField(source="total")
    activeTickets = serializers.IntegerField(source="active")
    usedTickets = serializers.IntegerField(source="used")
    cancelledTickets = serializers.IntegerField(source="cancelled")
    expiredTickets = serializers.IntegerField(source="expired")
    attendanceRate = serializers.FloatField(source="attendance_rate")
    scanStats = HourlyScansSerializer(source="hourly", many=True)
    recentScans = TicketSerializer(source="recent", many=True)
