"""Serializers for the reservation API."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import ShortStayReservation


def _optional_text(**kwargs):
    return serializers.CharField(default=None, allow_null=True, allow_blank=True, **kwargs)


class ReservationCreateSerializer(serializers.Serializer):
    """Shapes the request body; field rules are enforced by the command handler."""

    property_ref = _optional_text(max_length=64)
    check_in_date = _optional_text(max_length=32)
    check_out_date = _optional_text(max_length=32)
    customer_name = _optional_text(max_length=255)
    customer_phone = _optional_text(max_length=32)
    customer_email = _optional_text(max_length=254)
    message = _optional_text(max_length=4000)
    lang = _optional_text(max_length=8)
    reservation_option = _optional_text(max_length=64)
    reservation_option_label = _optional_text(max_length=255)


class BlockedRangeSerializer(serializers.Serializer):
    check_in_date = serializers.DateField()
    check_out_date = serializers.DateField()
    status = serializers.CharField()
    hold_expires_at = serializers.DateTimeField(allow_null=True)


class AvailabilitySerializer(serializers.Serializer):
    is_reserved = serializers.BooleanField()
    reserved_until = serializers.DateField(allow_null=True)
    next_available_check_in = serializers.DateField(allow_null=True)
    blocked_ranges = BlockedRangeSerializer(many=True)


class AvailabilitySummaryItemSerializer(serializers.Serializer):
    property_ref = serializers.CharField()
    is_reserved_now = serializers.BooleanField()
    reserved_until = serializers.DateField(allow_null=True)
    next_available_check_in = serializers.DateField(allow_null=True)


class ReservationSerializer(serializers.ModelSerializer):
    class Meta:
        model = ShortStayReservation
        fields = (
            "id",
            "status",
            "check_in_date",
            "check_out_date",
            "nights",
            "hold_expires_at",
        )
        read_only_fields = fields


class AccountReservationSerializer(serializers.ModelSerializer):
    class Meta:
        model = ShortStayReservation
        fields = (
            "id",
            "property_ref",
            "property_title",
            "property_location",
            "property_price",
            "property_location_type",
            "status",
            "reservation_option",
            "reservation_option_label",
            "check_in_date",
            "check_out_date",
            "nights",
            "hold_expires_at",
            "customer_name",
            "customer_phone",
            "customer_email",
            "message",
            "lang",
            "cancellation_reason",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields
