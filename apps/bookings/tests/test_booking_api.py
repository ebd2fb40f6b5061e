"""Integration tests for booking API endpoints."""

from __future__ import annotations

import random
from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.db import DatabaseError
from django.db.models import Sum
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings import services
from apps.bookings.models import Booking, BookingReview
from apps.bookings.services import reserved_participants
from apps.experiences.models import Experience
from apps.users.models import GuideProfile, User
from shared.domain.exceptions import UnexpectedError


class BookingAPITestCase(APITestCase):
    """Shared fixtures: an approved guide, one experience and a customer."""

    def setUp(self) -> None:
        self.guide = User.objects.create_user(
            email="guide@example.com",
            password="GuidePass1",
            name="Guide",
            is_guide=True,
        )
        GuideProfile.objects.create(
            user=self.guide,
            first_name="Arman",
            last_name="Sadykov",
            bio="City guide.",
            expertise="History",
            activity_field="Tours",
            city="Almaty",
            activity_area="Center",
            contact_email="arman@example.com",
            contact_phone="+77010000001",
            is_approved=True,
        )
        self.customer = User.objects.create_user(
            email="customer@example.com",
            password="CustomerPass1",
            name="Customer",
        )
        self.experience = self._experience(capacity=5, price=Decimal("20.00"))
        self.client.force_authenticate(self.customer)
        self.list_url = reverse("booking-list")

    def _experience(self, **overrides) -> Experience:
        data = {
            "guide": self.guide,
            "title": "Museum tour",
            "category": Experience.Category.CULTURAL,
            "description": "Guided museum tour.",
            "steps": ["Entrance", "Halls"],
            "date_time": timezone.now() + timedelta(days=3),
            "duration": 2,
            "capacity": 5,
            "price": Decimal("20.00"),
            "address": "Museum street 1",
        }
        data.update(overrides)
        return Experience.objects.create(**data)

    def _customer(self, email: str) -> User:
        return User.objects.create_user(email=email, password="secret1", name=email.split("@")[0])

    def _book(self, participants=1, experience=None, **extra):
        experience = experience or self.experience
        payload = {"experienceId": experience.id, "numberOfParticipants": participants, **extra}
        return self.client.post(self.list_url, payload, format="json")

    def _booking(self, status_value: str = Booking.Status.PENDING, user=None, participants: int = 1) -> Booking:
        return Booking.objects.create(
            user=user or self.customer,
            experience=self.experience,
            guide=self.guide,
            experience_date=self.experience.date_time,
            participants_count=participants,
            total_price=self.experience.price * participants,
            status=status_value,
        )


class BookingCreationTests(BookingAPITestCase):
    def test_customer_books_experience(self) -> None:
        response = self._book(participants=3, notes="Vegetarian lunch")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["message"], "Experience booked successfully")
        body = response.data["booking"]
        self.assertEqual(body["status"], "pending")
        self.assertEqual(body["paymentStatus"], "pending")
        self.assertEqual(body["numberOfParticipants"], 3)
        self.assertEqual(Decimal(body["totalPrice"]), Decimal("60.00"))

        booking = Booking.objects.get()
        self.assertEqual(booking.user, self.customer)
        self.assertEqual(booking.guide, self.guide)
        self.assertEqual(booking.experience_date, self.experience.date_time)
        self.assertEqual(booking.notes, "Vegetarian lunch")
        self.assertEqual(list(self.experience.bookings.all()), [booking])

    def test_missing_or_invalid_participants(self) -> None:
        for payload in (
            {"experienceId": self.experience.id},
            {"numberOfParticipants": 1},
            {"experienceId": self.experience.id, "numberOfParticipants": 0},
            {"experienceId": self.experience.id, "numberOfParticipants": "two"},
        ):
            response = self.client.post(self.list_url, payload, format="json")
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
            self.assertEqual(
                response.data["message"],
                "Please provide experience ID and number of participants",
            )

        too_many = self._book(participants=11)
        self.assertEqual(too_many.status_code, status.HTTP_400_BAD_REQUEST, too_many.data)
        self.assertFalse(Booking.objects.exists())

    def test_experience_id_must_be_a_whole_number(self) -> None:
        for experience_id in (True, 1.9, "abc", "1.5"):
            response = self.client.post(
                self.list_url,
                {"experienceId": experience_id, "numberOfParticipants": 1},
                format="json",
            )
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
            self.assertEqual(
                response.data,
                {"message": "Please provide experience ID and number of participants"},
            )
        self.assertFalse(Booking.objects.exists())

    def test_participants_given_as_digit_string(self) -> None:
        accepted = self._book(participants="2")
        self.assertEqual(accepted.status_code, status.HTTP_201_CREATED, accepted.data)
        self.assertEqual(accepted.data["booking"]["numberOfParticipants"], 2)

        superscript = self._book(participants="\u00b2")
        self.assertEqual(superscript.status_code, status.HTTP_400_BAD_REQUEST, superscript.data)
        self.assertEqual(
            superscript.data["message"],
            "Please provide experience ID and number of participants",
        )

    def test_unknown_experience(self) -> None:
        response = self.client.post(
            self.list_url,
            {"experienceId": 9999, "numberOfParticipants": 1},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND, response.data)
        self.assertEqual(response.data, {"message": "Experience not found"})

    def test_inactive_experience(self) -> None:
        self.experience.soft_delete()

        response = self._book()

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(response.data["message"], "This experience is no longer available")

    def test_past_experience(self) -> None:
        past = self._experience(date_time=timezone.now() - timedelta(hours=1))

        response = self._book(experience=past)

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(response.data["message"], "Cannot book past experiences")

    def test_capacity_two_rejects_second_booking(self) -> None:
        small = self._experience(capacity=2)

        first = self._book(participants=2, experience=small)
        self.assertEqual(first.status_code, status.HTTP_201_CREATED, first.data)
        self.assertEqual(first.data["booking"]["status"], "pending")

        self.client.force_authenticate(self._customer("second@example.com"))
        second = self._book(participants=1, experience=small)
        self.assertEqual(second.status_code, status.HTTP_409_CONFLICT, second.data)
        self.assertEqual(second.data["message"], "Not enough capacity for this booking")

    def test_cancelled_and_completed_bookings_release_capacity(self) -> None:
        self._booking(Booking.Status.CANCELLED, participants=4)
        self._booking(Booking.Status.COMPLETED, participants=4)
        self._booking(Booking.Status.CONFIRMED, participants=2)

        self.assertEqual(reserved_participants(self.experience.id), 2)
        self.assertEqual(self._book(participants=3).status_code, status.HTTP_201_CREATED)
        self.assertEqual(self._book(participants=1).status_code, status.HTTP_409_CONFLICT)

    def test_capacity_is_never_oversold(self) -> None:
        """Seeded random admissions, issued one after another.

        Parallel requests are covered in test_booking_concurrency.py on
        backends with row locks.
        """

        rng = random.Random(20240501)
        experiences = [self._experience(capacity=rng.randint(1, 12)) for _ in range(3)]
        customers = [self._customer(f"fuzz{i}@example.com") for i in range(4)]

        for _ in range(60):
            experience = rng.choice(experiences)
            self.client.force_authenticate(rng.choice(customers))
            response = self._book(participants=rng.randint(1, 4), experience=experience)
            self.assertIn(
                response.status_code,
                (status.HTTP_201_CREATED, status.HTTP_409_CONFLICT),
                response.data,
            )
            if response.status_code == status.HTTP_201_CREATED and rng.random() < 0.3:
                Booking.objects.filter(pk=response.data["booking"]["id"]).update(
                    status=Booking.Status.CANCELLED
                )

            for exp in experiences:
                held = (
                    Booking.objects.filter(experience=exp, status__in=["pending", "confirmed"])
                    .aggregate(total=Sum("participants_count"))["total"]
                    or 0
                )
                self.assertLessEqual(held, exp.capacity)

    def test_total_price_is_frozen(self) -> None:
        response = self._book(participants=2)
        booking = Booking.objects.get(pk=response.data["booking"]["id"])

        Experience.objects.filter(pk=self.experience.pk).update(price=Decimal("99.00"))
        booking.total_price = Decimal("1.00")
        booking.notes = "changed"
        booking.save()

        booking.refresh_from_db()
        self.assertEqual(booking.total_price, Decimal("40.00"))
        self.assertEqual(booking.notes, "changed")

    def test_persistence_failure_hides_details(self) -> None:
        with mock.patch.object(
            services,
            "create_booking",
            side_effect=DatabaseError("could not write to /var/lib/db"),
        ):
            response = self._book()

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {"message": UnexpectedError.default_detail})
        self.assertNotIn("/var/lib/db", response.content.decode())

    def test_requires_authentication(self) -> None:
        self.client.force_authenticate(None)

        response = self._book()

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED, response.data)
        self.assertEqual(response.data, {"message": "Authentication failed! No token provided."})


class BookingListingTests(BookingAPITestCase):
    def test_my_bookings_with_status_filter(self) -> None:
        pending = self._booking()
        cancelled = self._booking(Booking.Status.CANCELLED)
        self._booking(user=self._customer("someone@example.com"))
        url = reverse("booking-my-bookings")

        everything = self.client.get(url)
        self.assertEqual(everything.status_code, status.HTTP_200_OK, everything.data)
        self.assertEqual([b["id"] for b in everything.data["bookings"]], [cancelled.id, pending.id])
        self.assertEqual(everything.data["totalCount"], 2)
        self.assertEqual(everything.data["bookings"][0]["experience"]["title"], "Museum tour")
        self.assertEqual(everything.data["bookings"][0]["guide"]["firstName"], "Arman")

        only_cancelled = self.client.get(url, {"status": "cancelled"})
        self.assertEqual([b["id"] for b in only_cancelled.data["bookings"]], [cancelled.id])

        invalid = self.client.get(url, {"status": "archived"})
        self.assertEqual(invalid.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(invalid.data, {"message": "Invalid status"})

    def test_guide_bookings_show_booker(self) -> None:
        booking = self._booking(participants=2)
        self.client.force_authenticate(self.guide)

        response = self.client.get(reverse("booking-guide-bookings"), {"limit": 1})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["bookings"][0]["id"], booking.id)
        self.assertEqual(response.data["bookings"][0]["user"]["email"], "customer@example.com")
        self.assertEqual(response.data["totalPages"], 1)

    def test_customer_sees_no_guide_bookings(self) -> None:
        self._booking()

        response = self.client.get(reverse("booking-guide-bookings"))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["bookings"], [])


class BookingStatusTests(BookingAPITestCase):
    def _put_status(self, booking: Booking, value):
        url = reverse("booking-status", kwargs={"pk": booking.id})
        return self.client.put(url, {"status": value}, format="json")

    def test_guide_confirms_then_completes(self) -> None:
        booking = self._booking()
        self.client.force_authenticate(self.guide)

        confirmed = self._put_status(booking, "confirmed")
        self.assertEqual(confirmed.status_code, status.HTTP_200_OK, confirmed.data)
        self.assertEqual(confirmed.data["booking"]["status"], "confirmed")

        completed = self._put_status(booking, "completed")
        self.assertEqual(completed.status_code, status.HTTP_200_OK, completed.data)
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.COMPLETED)

    def test_invalid_status_value_checked_first(self) -> None:
        self.client.force_authenticate(self.guide)

        response = self.client.put(
            reverse("booking-status", kwargs={"pk": 9999}),
            {"status": "archived"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data, {"message": "Invalid status"})

    def test_unknown_booking(self) -> None:
        self.client.force_authenticate(self.guide)

        response = self.client.put(
            reverse("booking-status", kwargs={"pk": 9999}),
            {"status": "confirmed"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND, response.data)
        self.assertEqual(response.data, {"message": "Booking not found"})

    def test_only_the_guide_may_change_status(self) -> None:
        booking = self._booking()

        response = self._put_status(booking, "confirmed")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)
        self.assertEqual(response.data["message"], "You can only update your own bookings")
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.PENDING)

    def test_terminal_status_cannot_change(self) -> None:
        booking = self._booking(Booking.Status.CANCELLED)
        self.client.force_authenticate(self.guide)

        reopen = self._put_status(booking, "confirmed")
        self.assertEqual(reopen.status_code, status.HTTP_409_CONFLICT, reopen.data)

        same = self._put_status(self._booking(), "pending")
        self.assertEqual(same.status_code, status.HTTP_409_CONFLICT, same.data)


class BookingCancellationTests(BookingAPITestCase):
    def _cancel(self, booking: Booking):
        return self.client.put(reverse("booking-cancel", kwargs={"pk": booking.id}))

    def test_booker_cancels_pending_booking(self) -> None:
        booking = self._booking()

        response = self._cancel(booking)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(
            response.data["booking"],
            {"id": booking.id, "status": "cancelled", "paymentStatus": "refunded"},
        )
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.CANCELLED)
        self.assertEqual(booking.payment_status, Booking.PaymentStatus.REFUNDED)

    def test_cancelling_twice_is_a_conflict(self) -> None:
        booking = self._booking()
        self._cancel(booking)

        response = self._cancel(booking)

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(response.data["message"], "Booking is already cancelled")

    def test_cannot_cancel_after_guide_completes(self) -> None:
        booking = self._booking()
        self.client.force_authenticate(self.guide)
        self.client.put(reverse("booking-status", kwargs={"pk": booking.id}), {"status": "completed"}, format="json")

        self.client.force_authenticate(self.customer)
        response = self._cancel(booking)

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(response.data["message"], "Cannot cancel completed bookings")

    def test_cannot_cancel_past_experience(self) -> None:
        booking = self._booking()
        Booking.objects.filter(pk=booking.pk).update(experience_date=timezone.now() - timedelta(hours=2))

        response = self._cancel(booking)

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(response.data["message"], "Cannot cancel bookings for past experiences")

    def test_only_booker_may_cancel(self) -> None:
        booking = self._booking()
        self.client.force_authenticate(self.guide)

        response = self._cancel(booking)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)
        self.assertEqual(response.data["message"], "You can only cancel your own bookings")


class BookingReviewTests(BookingAPITestCase):
    def _review(self, booking: Booking, rating, comment: str = "Great"):
        url = reverse("booking-review", kwargs={"pk": booking.id})
        return self.client.post(url, {"rating": rating, "comment": comment}, format="json")

    def test_reviews_update_experience_rating(self) -> None:
        for index, rating in enumerate([5, 3, 4]):
            customer = self._customer(f"reviewer{index}@example.com")
            booking = self._booking(Booking.Status.COMPLETED, user=customer)
            self.client.force_authenticate(customer)
            response = self._review(booking, rating)
            self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
            self.assertEqual(response.data["review"]["rating"], rating)

        self.experience.refresh_from_db()
        self.assertEqual(self.experience.rating, 4.0)
        self.assertEqual(self.experience.reviews_count, 3)

    def test_review_only_once(self) -> None:
        booking = self._booking(Booking.Status.COMPLETED)

        first = self._review(booking, 5)
        second = self._review(booking, 1)

        self.assertEqual(first.status_code, status.HTTP_200_OK, first.data)
        self.assertEqual(second.status_code, status.HTTP_409_CONFLICT, second.data)
        self.assertEqual(second.data["message"], "You have already reviewed this experience")
        self.assertEqual(BookingReview.objects.get(booking=booking).rating, 5)
        self.experience.refresh_from_db()
        self.assertEqual(self.experience.rating, 5.0)
        self.assertEqual(self.experience.reviews_count, 1)

    def test_rating_must_be_between_one_and_five(self) -> None:
        booking = self._booking(Booking.Status.COMPLETED)

        for rating in (0, 6, None, "great", True, 4.5, "\u00b3"):
            response = self._review(booking, rating)
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
            self.assertEqual(response.data, {"message": "Please provide a valid rating (1-5)"})
        self.assertFalse(BookingReview.objects.exists())

    def test_review_requires_completed_booking(self) -> None:
        booking = self._booking(Booking.Status.CONFIRMED)

        response = self._review(booking, 4)

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(response.data["message"], "You can only review completed experiences")

    def test_only_booker_may_review(self) -> None:
        booking = self._booking(Booking.Status.COMPLETED)
        self.client.force_authenticate(self._customer("stranger@example.com"))

        response = self._review(booking, 4)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)
        self.assertEqual(response.data["message"], "You can only review your own bookings")

    def test_review_for_unknown_booking(self) -> None:
        response = self.client.post(
            reverse("booking-review", kwargs={"pk": 9999}),
            {"rating": 4},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND, response.data)

    def test_review_shows_in_my_bookings(self) -> None:
        booking = self._booking(Booking.Status.COMPLETED)
        self._review(booking, 4, comment="Loved it")

        response = self.client.get(reverse("booking-my-bookings"))

        self.assertEqual(response.data["bookings"][0]["review"]["comment"], "Loved it")
