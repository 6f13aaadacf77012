"""Filters for the account reservation history."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import ShortStayReservation


class AccountReservationFilter(django_filters.FilterSet):
    status = django_filters.MultipleChoiceFilter(choices=ShortStayReservation.Status.choices)
    upcoming_from = django_filters.DateFilter(field_name="check_out_date", lookup_expr="gte")

    class Meta:
        model = ShortStayReservation
        fields = ["status", "property_ref"]
