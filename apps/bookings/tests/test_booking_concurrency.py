"""Parallel booking admission.

Runs only on backends that support ``SELECT ... FOR UPDATE`` (PostgreSQL);
the in-memory SQLite test database serializes writers instead.
"""

from __future__ import annotations

import threading
from datetime import timedelta
from decimal import Decimal
from unittest import skipUnless

import pytest
from django.db import connection, connections
from django.db.models import Sum
from django.test import TransactionTestCase
from django.utils import timezone

from apps.bookings.domain.lifecycle import CapacityExceededError
from apps.bookings.models import Booking
from apps.bookings.services import create_booking
from apps.experiences.models import Experience
from apps.users.models import User

ATTEMPTS = 12
CAPACITY = 5


@skipUnless(connection.features.has_select_for_update, "backend has no row locks")
class ConcurrentBookingTests(TransactionTestCase):
    def setUp(self) -> None:
        guide = User.objects.create_user(
            email="guide@example.com",
            password="secret1",
            name="Guide",
            is_guide=True,
        )
        self.experience = Experience.objects.create(
            guide=guide,
            title="Canyon hike",
            category=Experience.Category.NATURE,
            description="Day hike.",
            steps=["Meet", "Hike"],
            date_time=timezone.now() + timedelta(days=2),
            duration=6,
            capacity=CAPACITY,
            price=Decimal("15.00"),
            address="Trailhead",
        )
        self.customers = [
            User.objects.create_user(email=f"hiker{i}@example.com", password="secret1", name=f"Hiker {i}")
            for i in range(ATTEMPTS)
        ]

    def test_parallel_bookings_never_oversell(self) -> None:
        barrier = threading.Barrier(ATTEMPTS)
        outcomes: list[str] = []

        def attempt(customer: User) -> None:
            try:
                barrier.wait()
                create_booking(customer, experience_id=self.experience.id, participants=1)
                outcomes.append("booked")
            except CapacityExceededError:
                outcomes.append("full")
            finally:
                connections.close_all()

        threads = [threading.Thread(target=attempt, args=(customer,)) for customer in self.customers]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(outcomes), ATTEMPTS)
        self.assertEqual(outcomes.count("booked"), CAPACITY)
        held = Booking.objects.filter(experience=self.experience).aggregate(total=Sum("participants_count"))
        self.assertEqual(held["total"], CAPACITY)


def test_default_sqlite_database_begins_immediate_transactions() -> None:
    from config.settings import base

    default = base.DATABASES["default"]
    if default["ENGINE"] != "django.db.backends.sqlite3":
        pytest.skip("DB_ENGINE points at another backend")
    assert default["OPTIONS"] == {"transaction_mode": "IMMEDIATE"}
