"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import logging

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from ticketing.domain import Ticket
from ticketing.domain.errors import DomainError, ErrorCode, ErrorKind
from ticketing.handlers.permissions import IsAdmin, IsOrganizer, IsStudent, principal_for
from ticketing.handlers.qr_images import qr_data_url
from ticketing.handlers.serializers import (
    CapacityStatusSerializer,
    ClaimRequestSerializer,
    CredentialRequestSerializer,
    ScanStatsSerializer,
    TicketSerializer,
)
from ticketing.services import TicketService
from ticketing.stores import DjangoTicketStore

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.BUSINESS_RULE: status.HTTP_409_CONFLICT,
    ErrorKind.TRANSIENT: status.HTTP_503_SERVICE_UNAVAILABLE,
}

FORBIDDEN_CODES = {ErrorCode.WRONG_SCOPE, ErrorCode.NOT_TICKET_HOLDER}


def error_response(error: DomainError) -> Response:
    if error.kind is ErrorKind.TRANSIENT:
        logger.warning("Transient failure: %s", error)
    else:
        logger.info("Request rejected: %s", error)

    if error.code in FORBIDDEN_CODES:
        http_status = status.HTTP_403_FORBIDDEN
    else:
        http_status = STATUS_BY_KIND[error.kind]
    return Response({"code": error.code.value, "message": error.message}, status=http_status)


def with_qr_image(ticket: Ticket, box_size: int = 8) -> dict:
    item = dict(TicketSerializer(ticket).data)
    item["qrData"] = ticket.credential
    item["qrCodeImage"] = qr_data_url(ticket.credential, box_size=box_size)
    return item


class TicketingView(APIView):
    """Base view that wires the service and turns domain errors into responses."""

    def get_service(self) -> TicketService:
        return TicketService(DjangoTicketStore())

    def handle_exception(self, exc):
        if isinstance(exc, DomainError):
            return error_response(exc)
        return super().handle_exception(exc)


class ClaimTicketView(TicketingView):
    """Handler for POST /api/tickets/claim"""

    permission_classes = [IsStudent]

    def post(self, request: Request) -> Response:
        serializer = ClaimRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        issued = self.get_service().claim(
            serializer.validated_data["eventId"], request.user.pk
        )
        ticket = dict(TicketSerializer(issued.ticket).data)
        ticket["qrData"] = issued.credential
        ticket["qrCode"] = qr_data_url(issued.credential)
        return Response({"ticket": ticket}, status=status.HTTP_201_CREATED)


class MyTicketsView(TicketingView):
    """Handler for GET /api/tickets/my"""

    permission_classes = [IsStudent]

    def get(self, request: Request) -> Response:
        tickets = self.get_service().tickets_for_holder(request.user.pk)
        return Response([with_qr_image(ticket, box_size=4) for ticket in tickets])


class TicketDetailView(TicketingView):
    """Handler for GET /api/tickets/{ticket_id}"""

    permission_classes = [IsStudent]

    def get(self, request: Request, ticket_id: str) -> Response:
        ticket = self.get_service().ticket_for_holder(ticket_id, request.user.pk)
        return Response(with_qr_image(ticket))


class ValidateTicketView(TicketingView):
    """Handler for POST /api/tickets/validate"""

    permission_classes = [IsOrganizer]

    def post(self, request: Request) -> Response:
        serializer = CredentialRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        ticket = self.get_service().inspect(
            serializer.validated_data["qrData"], principal_for(request.user)
        )
        return Response({"valid": True, "ticket": TicketSerializer(ticket).data})


class ScanTicketView(TicketingView):
    """Handler for POST /api/tickets/scan"""

    permission_classes = [IsOrganizer]

    def post(self, request: Request) -> Response:
        serializer = CredentialRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        ticket = self.get_service().redeem(
            serializer.validated_data["qrData"], principal_for(request.user)
        )
        return Response(
            {
                "success": True,
                "message": "Ticket scanned and marked as used successfully",
                "ticket": TicketSerializer(ticket).data,
            }
        )


class UseTicketView(TicketingView):
    """Handler for POST /api/tickets/{ticket_id}/use"""

    permission_classes = [IsOrganizer]

    def post(self, request: Request, ticket_id: str) -> Response:
        ticket = self.get_service().redeem_ticket(ticket_id, principal_for(request.user))
        return Response(
            {
                "message": "Ticket marked as used successfully",
                "ticket": TicketSerializer(ticket).data,
            }
        )


class CancelTicketView(TicketingView):
    """Handler for POST /api/tickets/{ticket_id}/cancel"""

    permission_classes = [IsAdmin]

    def post(self, request: Request, ticket_id: str) -> Response:
        ticket = self.get_service().cancel(ticket_id, principal_for(request.user))
        return Response({"ticket": TicketSerializer(ticket).data})


class CapacityStatusView(TicketingView):
    """Handler for GET /api/events/{event_id}/capacity"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request, event_id: str) -> Response:
        capacity = self.get_service().capacity_status(event_id)
        return Response(CapacityStatusSerializer(capacity).data)


class ScanStatsView(TicketingView):
    """Handler for GET /api/events/{event_id}/scan-stats"""

    permission_classes = [IsOrganizer]

    def get(self, request: Request, event_id: str) -> Response:
        stats = self.get_service().scan_stats(event_id, principal_for(request.user))
        return Response(ScanStatsSerializer(stats).data)
