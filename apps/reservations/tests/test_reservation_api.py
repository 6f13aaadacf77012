"""Integration tests for the reservation API endpoints."""

from __future__ import annotations

from datetime import timedelta
from unittest import mock

from django.db import DatabaseError
from django.test import override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.notifications.models import Notification
from apps.properties.models import Property
from apps.reservations.models import ShortStayReservation
from apps.users.models import CustomUser


class ReservationAPITests(APITestCase):
    """Covers availability, creation, conflicts and error mapping."""

    def setUp(self) -> None:
        self.today = timezone.localdate()
        self.property = Property.objects.create(
            ref="RST-0303",
            title="Villa Tipaza",
            location="Tipaza",
            price="25 000 DA / nuit",
            location_type=Property.RentalKind.PER_NIGHT,
        )
        self.create_url = reverse("reservations:create")
        self.availability_url = reverse("reservations:availability")

    def _day(self, offset: int) -> str:
        return str(self.today + timedelta(days=offset))

    def _payload(self, check_in: int, check_out: int, **extra) -> dict[str, str]:
        payload = {
            "property_ref": self.property.ref,
            "check_in_date": self._day(check_in),
            "check_out_date": self._day(check_out),
            "customer_name": "Sofiane",
            "customer_phone": "0661 00 00 00",
        }
        payload.update(extra)
        return payload

    def _block(self, check_in: int, check_out: int, status_value: str = "confirmed") -> ShortStayReservation:
        return ShortStayReservation.objects.create(
            property_ref=self.property.ref,
            check_in_date=self.today + timedelta(days=check_in),
            check_out_date=self.today + timedelta(days=check_out),
            status=status_value,
        )

    def test_anonymous_customer_can_place_hold(self) -> None:
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(self.create_url, self._payload(2, 5), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["status"], "hold")
        self.assertEqual(response.data["nights"], 3)
        self.assertIsNotNone(response.data["hold_expires_at"])
        self.assertFalse(response.data["is_reserved"])
        self.assertEqual(len(response.data["blocked_ranges"]), 1)

        reservation = ShortStayReservation.objects.get(pk=response.data["id"])
        self.assertEqual(reservation.customer_phone, "0661000000")
        self.assertIsNone(reservation.customer_user)
        self.assertTrue(
            Notification.objects.filter(
                event_type="reservation_created",
                entity_id=str(reservation.pk),
            ).exists()
        )

    def test_conflict_returns_snapshot_and_conflicting_range(self) -> None:
        self._block(0, 3)

        response = self.client.post(self.create_url, self._payload(1, 4), format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "reservation_conflict")
        self.assertEqual(response.data["conflicting_check_in"], self._day(0))
        self.assertEqual(response.data["conflicting_check_out"], self._day(3))
        self.assertTrue(response.data["is_reserved"])
        self.assertEqual(response.data["reserved_until"], self._day(2))
        self.assertEqual(response.data["next_available_check_in"], self._day(3))

    def test_invalid_dates_return_400_without_snapshot(self) -> None:
        response = self.client.post(self.create_url, self._payload(5, 3), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "validation_error")
        self.assertNotIn("blocked_ranges", response.data)
        self.assertFalse(ShortStayReservation.objects.exists())

    def test_unknown_property_returns_404(self) -> None:
        response = self.client.post(
            self.create_url, self._payload(1, 2, property_ref="RST-0000"), format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["code"], "property_not_found")

    def test_agency_account_gets_403(self) -> None:
        agency = CustomUser.objects.create_user(
            email="agence@example.com",
            password="AgencyPass123",
            account_type=CustomUser.AccountType.AGENCY,
        )
        self.client.force_authenticate(agency)

        response = self.client.post(self.create_url, self._payload(1, 2), format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(ShortStayReservation.objects.exists())

    def test_availability_reports_reserved_window(self) -> None:
        self._block(0, 3)
        self._block(3, 6, status_value="new")
        self._block(10, 12)

        response = self.client.get(self.availability_url, {"property_ref": self.property.ref})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["is_reserved"])
        self.assertEqual(response.data["reserved_until"], self._day(5))
        self.assertEqual(response.data["next_available_check_in"], self._day(6))
        self.assertEqual(len(response.data["blocked_ranges"]), 3)

    def test_availability_requires_property_ref(self) -> None:
        response = self.client.get(self.availability_url)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_summary_lists_each_ref_once(self) -> None:
        self._block(0, 2)

        response = self.client.get(
            reverse("reservations:availability-summary"),
            {"refs": f"{self.property.ref},RST-0404,{self.property.ref}"},
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        items = response.data["items"]
        self.assertEqual([item["property_ref"] for item in items], [self.property.ref, "RST-0404"])
        self.assertTrue(items[0]["is_reserved_now"])
        self.assertEqual(items[0]["reserved_until"], self._day(1))
        self.assertFalse(items[1]["is_reserved_now"])

    def test_account_history_for_customer(self) -> None:
        customer = CustomUser.objects.create_user(email="lina@example.com", password="CustomerPass123")
        self.client.force_authenticate(customer)

        first = self.client.post(self.create_url, self._payload(1, 2), format="json")
        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        anonymous = self._block(4, 6, status_value="new")
        anonymous.customer_email = "lina@example.com"
        anonymous.save()
        self._block(8, 9)

        response = self.client.get(reverse("reservations:account"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

        filtered = self.client.get(reverse("reservations:account"), {"status": "hold"})
        self.assertEqual([row["id"] for row in filtered.data], [first.data["id"]])

    def test_account_history_requires_authentication(self) -> None:
        response = self.client.get(reverse("reservations:account"))

        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))


class ReservationMaintenanceAPITests(APITestCase):
    def setUp(self) -> None:
        self.url = reverse("reservations:maintenance")
        now = timezone.now()
        self.stale = ShortStayReservation.objects.create(
            property_ref="RST-0505",
            check_in_date=timezone.localdate() + timedelta(days=1),
            check_out_date=timezone.localdate() + timedelta(days=2),
            status="hold",
            hold_expires_at=now - timedelta(minutes=1),
        )

    @override_settings(RESERVATIONS={"CRON_SECRET": "s3cret"})
    def test_secret_is_required(self) -> None:
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.stale.refresh_from_db()
        self.assertEqual(self.stale.status, "hold")

    @override_settings(RESERVATIONS={"CRON_SECRET": "s3cret"})
    def test_bearer_header_and_query_secret_are_accepted(self) -> None:
        self.assertEqual(
            self.client.post(self.url, HTTP_AUTHORIZATION="Bearer s3cret").status_code,
            status.HTTP_200_OK,
        )
        self.assertEqual(self.client.get(self.url, HTTP_X_CRON_SECRET="s3cret").status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.get(self.url, {"secret": "s3cret"}).status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.get(self.url, {"secret": "wrong"}).status_code, status.HTTP_403_FORBIDDEN)

    @override_settings(RESERVATIONS={})
    def test_open_without_secret_and_expires_holds(self) -> None:
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["ok"])
        self.assertEqual(response.data["summary"]["expired_holds"], 1)
        self.stale.refresh_from_db()
        self.assertEqual(self.stale.status, "cancelled")

    @override_settings(RESERVATIONS={})
    def test_database_failure_returns_error_payload(self) -> None:
        with mock.patch(
            "apps.reservations.views.maintain_reservations",
            side_effect=DatabaseError("database unavailable"),
        ):
            response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data["code"], "maintenance_failed")
        self.assertIn("detail", response.data)
