"""
Booking Lifecycle

Pure rules for the booking state machine, cancellation, reviews and capacity.
Nothing here touches the database; services load the rows, call these checks
and persist the outcome.

Guide-side transitions:

    pending   -> confirmed | cancelled | completed
    confirmed -> cancelled | completed
    cancelled, completed: terminal

Only ``pending`` and ``confirmed`` bookings hold capacity.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from shared.domain.exceptions import StateConflictError, ValidationError

PENDING = "pending"
CONFIRMED = "confirmed"
CANCELLED = "cancelled"
COMPLETED = "completed"

STATUSES = (PENDING, CONFIRMED, CANCELLED, COMPLETED)

GUIDE_TRANSITIONS: dict[str, frozenset[str]] = {
    PENDING: frozenset({CONFIRMED, CANCELLED, COMPLETED}),
    CONFIRMED: frozenset({CANCELLED, COMPLETED}),
    CANCELLED: frozenset(),
    COMPLETED: frozenset(),
}

CAPACITY_HOLDING = (PENDING, CONFIRMED)

MIN_PARTICIPANTS = 1
MAX_PARTICIPANTS = 10
MIN_RATING = 1
MAX_RATING = 5


class ExperienceUnavailableError(StateConflictError):
    default_detail = "This experience is no longer available"
    default_code = "experience_unavailable"


class BookingTimeError(StateConflictError):
    default_detail = "Cannot book past experiences"
    default_code = "booking_time"


class CapacityExceededError(StateConflictError):
    default_detail = "Not enough capacity for this booking"
    default_code = "capacity_exceeded"


def ensure_status_value(value) -> str:
    if value not in STATUSES:
        raise ValidationError("Invalid status")
    return value


def ensure_guide_transition(current: str, target: str) -> None:
    if target not in GUIDE_TRANSITIONS.get(current, frozenset()):
        raise StateConflictError(f"Cannot change booking status from {current} to {target}")


def ensure_bookable(*, is_active: bool, starts_at: datetime, now: datetime) -> None:
    if not is_active:
        raise ExperienceUnavailableError()
    if starts_at <= now:
        raise BookingTimeError()


def ensure_capacity(*, capacity: int, reserved: int, requested: int) -> None:
    if reserved + requested > capacity:
        raise CapacityExceededError()


def ensure_cancellable(*, status: str, experience_date: datetime, now: datetime) -> None:
    """Booker-side cancellation; re-cancelling is an error, not a no-op."""

    if status == COMPLETED:
        raise StateConflictError("Cannot cancel completed bookings")
    if status == CANCELLED:
        raise StateConflictError("Booking is already cancelled")
    if experience_date <= now:
        raise StateConflictError("Cannot cancel bookings for past experiences")


def ensure_reviewable(*, status: str, has_review: bool) -> None:
    if status != COMPLETED:
        raise StateConflictError("You can only review completed experiences")
    if has_review:
        raise StateConflictError("You have already reviewed this experience")


def average_rating(ratings: Iterable[int]) -> tuple[float, int]:
    """Mean of ``ratings`` and the population size; ``(0.0, 0)`` when empty."""

    values = list(ratings)
    if not values:
        return 0.0, 0
    return sum(values) / len(values), len(values)
