from django.urls import path  # type: ignore

from .views import (
    AccountReservationListView,
    AvailabilitySummaryView,
    ReservationAvailabilityView,
    ReservationCreateView,
    ReservationMaintenanceView,
)

app_name = "reservations"

urlpatterns = [
    path("", ReservationCreateView.as_view(), name="create"),
    path("availability/", ReservationAvailabilityView.as_view(), name="availability"),
    path("availability/summary/", AvailabilitySummaryView.as_view(), name="availability-summary"),
    path("account/", AccountReservationListView.as_view(), name="account"),
    path("maintenance/", ReservationMaintenanceView.as_view(), name="maintenance"),
]
