"""API views for short-stay reservations."""

from __future__ import annotations

import structlog  # type: ignore
from django.db import DatabaseError  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from drf_spectacular.utils import OpenApiParameter, extend_schema  # type: ignore
from rest_framework import generics, permissions, status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from .application.command_handlers import (
    AvailabilityQuery,
    AvailabilityQueryHandler,
    CreateReservationCommand,
    CreateReservationHandler,
)
from .exceptions import ReservationConflictError, ReservationError
from .filters import AccountReservationFilter
from .permissions import HasCronSecret
from .serializers import (
    AccountReservationSerializer,
    AvailabilitySerializer,
    AvailabilitySummaryItemSerializer,
    ReservationCreateSerializer,
    ReservationSerializer,
)
from .services import ACCOUNT_HISTORY_LIMIT, customer_reservations, maintain_reservations, summarize_availability

logger = structlog.get_logger(__name__)


def error_response(exc: ReservationError) -> Response:
    body = {"detail": exc.message, "code": exc.code}
    field = getattr(exc, "field", None)
    if field:
        body["field"] = field
    return Response(body, status=exc.status_code)


def conflict_response(exc: ReservationConflictError) -> Response:
    conflicting = exc.conflicting
    body = {
        "detail": exc.message,
        "code": exc.code,
        **AvailabilitySerializer(exc.snapshot).data,
        "conflicting_check_in": conflicting.check_in_date.isoformat() if conflicting else None,
        "conflicting_check_out": conflicting.check_out_date.isoformat() if conflicting else None,
    }
    return Response(body, status=status.HTTP_409_CONFLICT)


class ReservationAvailabilityView(APIView):
    """Availability snapshot of one property."""

    permission_classes = [permissions.AllowAny]
    query_handler_class = AvailabilityQueryHandler

    @extend_schema(
        parameters=[OpenApiParameter("property_ref", str, required=True)],
        responses=AvailabilitySerializer,
    )
    def get(self, request):  # type: ignore
        query = AvailabilityQuery(property_ref=request.query_params.get("property_ref"))
        try:
            snapshot = self.query_handler_class().handle(query)
        except ReservationError as exc:
            return error_response(exc)
        return Response(AvailabilitySerializer(snapshot).data)


class AvailabilitySummaryView(APIView):
    """Compact availability of several properties (``?refs=A,B,C``)."""

    permission_classes = [permissions.AllowAny]

    @extend_schema(
        parameters=[OpenApiParameter("refs", str, required=True)],
        responses=AvailabilitySummaryItemSerializer(many=True),
    )
    def get(self, request):  # type: ignore
        items = summarize_availability(request.query_params.get("refs", ""))
        return Response({"items": AvailabilitySummaryItemSerializer(items, many=True).data})


class ReservationCreateView(APIView):
    """Places a hold (or a new reservation under auto-confirm) for a customer."""

    permission_classes = [permissions.AllowAny]
    handler_class = CreateReservationHandler

    def get_handler(self) -> CreateReservationHandler:
        return self.handler_class()

    @extend_schema(request=ReservationCreateSerializer, responses={201: ReservationSerializer})
    def post(self, request):  # type: ignore
        serializer = ReservationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        command = CreateReservationCommand(user=request.user, **serializer.validated_data)

        try:
            result = self.get_handler().handle(command)
        except ReservationConflictError as exc:
            logger.info("reservation_conflict", property_ref=command.property_ref)
            return conflict_response(exc)
        except ReservationError as exc:
            return error_response(exc)

        logger.info(
            "reservation_created",
            reservation_id=str(result.reservation.pk),
            property_ref=result.reservation.property_ref,
            status=result.reservation.status,
            degraded=result.degraded,
        )
        body = {
            **ReservationSerializer(result.reservation).data,
            **AvailabilitySerializer(result.availability).data,
        }
        return Response(body, status=status.HTTP_201_CREATED)


class AccountReservationListView(generics.ListAPIView):
    """Reservations of the signed-in customer, newest first."""

    serializer_class = AccountReservationSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [DjangoFilterBackend]
    filterset_class = AccountReservationFilter
    pagination_class = None

    def get_queryset(self):  # type: ignore
        return customer_reservations(self.request.user)

    def filter_queryset(self, queryset):  # type: ignore
        return super().filter_queryset(queryset)[:ACCOUNT_HISTORY_LIMIT]


class ReservationMaintenanceView(APIView):
    """Scheduler hook that expires stale holds."""

    authentication_classes: list = []
    permission_classes = [HasCronSecret]

    def get(self, request):  # type: ignore
        try:
            summary = maintain_reservations()
        except DatabaseError as exc:
            logger.error("reservation_maintenance_failed", error=str(exc), exc_info=True)
            return Response(
                {"detail": "Reservation maintenance failed.", "code": "maintenance_failed"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        logger.info("reservation_maintenance", **summary)
        return Response({"ok": True, "summary": summary})

    def post(self, request):  # type: ignore
        return self.get(request)
