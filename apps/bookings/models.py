"""Booking ledger models."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from .domain import lifecycle


class Booking(models.Model):
    """A reservation of participant slots on an experience."""

    class Status(models.TextChoices):
        PENDING = lifecycle.PENDING, _("Pending")
        CONFIRMED = lifecycle.CONFIRMED, _("Confirmed")
        CANCELLED = lifecycle.CANCELLED, _("Cancelled")
        COMPLETED = lifecycle.COMPLETED, _("Completed")

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        PAID = "paid", _("Paid")
        REFUNDED = "refunded", _("Refunded")

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    experience = models.ForeignKey(
        "experiences.Experience",
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    guide = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="guide_bookings",
    )
    booked_at = models.DateTimeField(auto_now_add=True)
    experience_date = models.DateTimeField(
        help_text=_("Experience start time at the moment of booking."),
    )
    participants_count = models.PositiveSmallIntegerField(
        validators=[
            MinValueValidator(lifecycle.MIN_PARTICIPANTS),
            MaxValueValidator(lifecycle.MAX_PARTICIPANTS),
        ],
    )
    total_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        editable=False,
        help_text=_("Price per participant times participants, fixed at booking time."),
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    notes = models.TextField(max_length=500, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-booked_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(participants_count__gte=lifecycle.MIN_PARTICIPANTS)
                & models.Q(participants_count__lte=lifecycle.MAX_PARTICIPANTS),
                name="booking_participants_range",
            ),
            models.CheckConstraint(
                condition=models.Q(total_price__gte=0),
                name="booking_total_price_non_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["experience", "status"], name="booking_exp_status_idx"),
            models.Index(fields=["user", "booked_at"], name="booking_user_booked_idx"),
            models.Index(fields=["guide", "booked_at"], name="booking_guide_booked_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking #{self.pk} for {self.experience_id} ({self.status})"

    def save(self, *args, **kwargs):  # type: ignore
        if self.pk is not None:
            # total_price is frozen once the booking exists.
            original = type(self).objects.filter(pk=self.pk).values_list("total_price", flat=True).first()
            if original is not None:
                self.total_price = original
        return super().save(*args, **kwargs)

    @property
    def has_review(self) -> bool:
        try:
            return self.review is not None
        except BookingReview.DoesNotExist:
            return False


class BookingReview(models.Model):
    """Rating and comment left by the booker after a completed booking."""

    booking = models.OneToOneField(
        Booking,
        on_delete=models.CASCADE,
        related_name="review",
    )
    rating = models.PositiveSmallIntegerField(
        validators=[
            MinValueValidator(lifecycle.MIN_RATING),
            MaxValueValidator(lifecycle.MAX_RATING),
        ],
    )
    comment = models.TextField(max_length=1000, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Booking review")
        verbose_name_plural = _("Booking reviews")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(rating__gte=lifecycle.MIN_RATING) & models.Q(rating__lte=lifecycle.MAX_RATING),
                name="booking_review_rating_range",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.rating}/5 for booking #{self.booking_id}"
