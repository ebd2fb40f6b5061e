"""Domain services for booking workflows.

Each public function is one ledger operation: it loads the rows it needs,
applies the rules from ``domain.lifecycle`` and persists the result inside a
single transaction.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

import structlog
from django.db import IntegrityError, transaction  # type: ignore
from django.db.models import Sum  # type: ignore
from django.utils import timezone  # type: ignore

from apps.experiences.models import Experience
from shared.domain.exceptions import AuthorizationError, NotFoundError, StateConflictError, ValidationError
from shared.infrastructure.locking import lock_queryset_if_possible

from .domain import lifecycle
from .models import Booking, BookingReview

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.users.models import CustomUser

logger = structlog.get_logger(__name__)

NOTES_MAX_LENGTH = 500
COMMENT_MAX_LENGTH = 1000


def _coerce_int(value, message: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(message)
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdecimal():
        try:
            return int(value)
        except ValueError:
            raise ValidationError(message)
    raise ValidationError(message)


def _get_booking_for_update(booking_id) -> Booking:
    booking = lock_queryset_if_possible(Booking.objects.filter(pk=booking_id)).first()
    if booking is None:
        raise NotFoundError("Booking not found")
    return booking


def reserved_participants(experience_id: int) -> int:
    """Participants currently holding capacity on an experience."""

    total = Booking.objects.filter(
        experience_id=experience_id,
        status__in=lifecycle.CAPACITY_HOLDING,
    ).aggregate(total=Sum("participants_count"))["total"]
    return total or 0


def create_booking(
    user: "CustomUser",
    *,
    experience_id,
    participants,
    notes: str = "",
) -> Booking:
    """Admit a booking if the experience still has room for it.

    The experience row is locked for the read-sum-insert sequence so two
    concurrent requests cannot both see the same free capacity.
    """

    missing_message = "Please provide experience ID and number of participants"
    if experience_id in (None, "") or participants in (None, ""):
        raise ValidationError(missing_message)
    experience_id = _coerce_int(experience_id, missing_message)
    participants = _coerce_int(participants, missing_message)
    if participants < lifecycle.MIN_PARTICIPANTS:
        raise ValidationError(missing_message)
    if participants > lifecycle.MAX_PARTICIPANTS:
        raise ValidationError(
            f"A booking can include at most {lifecycle.MAX_PARTICIPANTS} participants"
        )
    if notes and len(notes) > NOTES_MAX_LENGTH:
        raise ValidationError(f"Notes must be at most {NOTES_MAX_LENGTH} characters")

    with transaction.atomic():
        experience = lock_queryset_if_possible(Experience.objects.filter(pk=experience_id)).first()
        if experience is None:
            raise NotFoundError("Experience not found")

        lifecycle.ensure_bookable(
            is_active=experience.is_active,
            starts_at=experience.date_time,
            now=timezone.now(),
        )
        lifecycle.ensure_capacity(
            capacity=experience.capacity,
            reserved=reserved_participants(experience.pk),
            requested=participants,
        )

        booking = Booking.objects.create(
            user=user,
            experience=experience,
            guide_id=experience.guide_id,
            experience_date=experience.date_time,
            participants_count=participants,
            total_price=experience.price * Decimal(participants),
            status=Booking.Status.PENDING,
            payment_status=Booking.PaymentStatus.PENDING,
            notes=notes or "",
        )

    logger.info(
        "booking_created",
        booking_id=booking.pk,
        experience_id=experience.pk,
        user_id=user.pk,
        participants=participants,
    )
    return booking


def change_status(guide: "CustomUser", *, booking_id, target_status) -> Booking:
    """Guide-side status transition."""

    target = lifecycle.ensure_status_value(target_status)

    with transaction.atomic():
        booking = _get_booking_for_update(booking_id)
        if booking.guide_id != guide.pk:
            raise AuthorizationError("You can only update your own bookings")
        previous = booking.status
        lifecycle.ensure_guide_transition(previous, target)
        booking.status = target
        booking.save(update_fields=["status", "updated_at"])

    logger.info(
        "booking_status_changed",
        booking_id=booking.pk,
        guide_id=guide.pk,
        from_status=previous,
        to_status=target,
    )
    return booking


def cancel_booking(user: "CustomUser", *, booking_id) -> Booking:
    """Booker-side cancellation; the payment is marked refunded."""

    with transaction.atomic():
        booking = _get_booking_for_update(booking_id)
        if booking.user_id != user.pk:
            raise AuthorizationError("You can only cancel your own bookings")
        lifecycle.ensure_cancellable(
            status=booking.status,
            experience_date=booking.experience_date,
            now=timezone.now(),
        )
        booking.status = Booking.Status.CANCELLED
        booking.payment_status = Booking.PaymentStatus.REFUNDED
        booking.save(update_fields=["status", "payment_status", "updated_at"])

    logger.info("booking_cancelled", booking_id=booking.pk, user_id=user.pk)
    return booking


def recompute_experience_rating(experience_id: int) -> tuple[float, int]:
    """Recalculate rating and review count from every reviewed, completed booking."""

    ratings = BookingReview.objects.filter(
        booking__experience_id=experience_id,
        booking__status=Booking.Status.COMPLETED,
    ).values_list("rating", flat=True)
    rating, count = lifecycle.average_rating(ratings)
    if count:
        Experience.objects.filter(pk=experience_id).update(rating=rating, reviews_count=count)
    return rating, count


def add_review(user: "CustomUser", *, booking_id, rating, comment: str = "") -> BookingReview:
    """Attach the booker's single review and refresh the experience rating."""

    invalid_rating = "Please provide a valid rating (1-5)"
    if rating in (None, ""):
        raise ValidationError(invalid_rating)
    rating = _coerce_int(rating, invalid_rating)
    if not lifecycle.MIN_RATING <= rating <= lifecycle.MAX_RATING:
        raise ValidationError(invalid_rating)
    if comment and len(comment) > COMMENT_MAX_LENGTH:
        raise ValidationError(f"Comment must be at most {COMMENT_MAX_LENGTH} characters")

    try:
        with transaction.atomic():
            booking = _get_booking_for_update(booking_id)
            if booking.user_id != user.pk:
                raise AuthorizationError("You can only review your own bookings")
            lifecycle.ensure_reviewable(status=booking.status, has_review=booking.has_review)

            review = BookingReview.objects.create(booking=booking, rating=rating, comment=comment or "")
            average, count = recompute_experience_rating(booking.experience_id)
    except IntegrityError:
        # A concurrent request attached the review first.
        raise StateConflictError("You have already reviewed this experience")

    logger.info(
        "booking_review_added",
        booking_id=booking.pk,
        experience_id=booking.experience_id,
        rating=rating,
        experience_rating=average,
        reviews_count=count,
    )
    return review
