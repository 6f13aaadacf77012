from django.contrib import admin, messages  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.reservations.domain import lifecycle

from .exceptions import InvalidTransitionError
from .models import ShortStayReservation
from .services import transition_reservation


@admin.register(ShortStayReservation)
class ShortStayReservationAdmin(admin.ModelAdmin):
    list_display = (
        "property_ref",
        "property_title",
        "check_in_date",
        "check_out_date",
        "nights",
        "status",
        "customer_name",
        "customer_phone",
        "created_at",
    )
    list_filter = ("status", "lang", "property_location_type", "created_at")
    search_fields = ("property_ref", "property_title", "customer_name", "customer_email", "customer_phone")
    date_hierarchy = "check_in_date"
    readonly_fields = ("id", "nights", "hold_expires_at", "cancelled_at", "cancellation_reason", "created_at", "updated_at")
    actions = ("mark_contacted", "mark_confirmed", "cancel_reservations")

    def _apply(self, request, queryset, target, reason=None):
        moved = 0
        for reservation in queryset:
            try:
                transition_reservation(reservation, target, reason=reason)
            except InvalidTransitionError as exc:
                self.message_user(request, f"{reservation}: {exc}", level=messages.WARNING)
            else:
                moved += 1
        if moved:
            self.message_user(request, _("%d réservation(s) mise(s) à jour.") % moved)

    @admin.action(description=_("Marquer comme contactée"))
    def mark_contacted(self, request, queryset):
        self._apply(request, queryset, lifecycle.CONTACTED)

    @admin.action(description=_("Confirmer"))
    def mark_confirmed(self, request, queryset):
        self._apply(request, queryset, lifecycle.CONFIRMED)

    @admin.action(description=_("Annuler"))
    def cancel_reservations(self, request, queryset):
        self._apply(request, queryset, lifecycle.CANCELLED, reason="cancelled_by_admin")
