"""Experience domain models."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

MIN_CAPACITY = 1
MAX_CAPACITY = 50
# Ceiling of the PositiveSmallIntegerField column.
MAX_DURATION = 32767


class ExperienceQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)

    def in_city(self, city: str):
        """Experiences whose guide is an approved guide based in ``city``."""
        return self.filter(
            guide__is_guide=True,
            guide__guide_profile__is_approved=True,
            guide__guide_profile__city=city,
        )


class Experience(models.Model):
    """A scheduled, capacity-limited activity hosted by a guide."""

    class Category(models.TextChoices):
        CULTURAL = "cultural", _("Cultural")
        ARTISTIC = "artistic", _("Artistic")
        SPORTS = "sports", _("Sports")
        NATURE = "nature", _("Nature")
        FOOD = "food", _("Food")
        TECHNOLOGY = "technology", _("Technology")
        BUSINESS = "business", _("Business")
        EDUCATIONAL = "educational", _("Educational")
        RELIGIOUS = "religious", _("Religious")
        RECREATIONAL = "recreational", _("Recreational")

    # Fields the owning guide may change through the API.
    MUTABLE_FIELDS = (
        "title",
        "category",
        "description",
        "steps",
        "date_time",
        "duration",
        "capacity",
        "price",
        "address",
        "images",
        "is_active",
    )

    guide = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="experiences",
    )
    title = models.CharField(max_length=255)
    category = models.CharField(max_length=20, choices=Category.choices)
    description = models.TextField(max_length=2000)
    steps = models.JSONField(default=list, help_text=_("Ordered list of step descriptions."))
    date_time = models.DateTimeField()
    duration = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1)],
        help_text=_("Duration in hours."),
    )
    capacity = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(MIN_CAPACITY), MaxValueValidator(MAX_CAPACITY)],
    )
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    address = models.CharField(max_length=255)
    images = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True)
    rating = models.FloatField(
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(5)],
    )
    reviews_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ExperienceQuerySet.as_manager()

    class Meta:
        verbose_name = _("Experience")
        verbose_name_plural = _("Experiences")
        ordering = ["date_time"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(capacity__gte=MIN_CAPACITY) & models.Q(capacity__lte=MAX_CAPACITY),
                name="experience_capacity_range",
            ),
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="experience_price_non_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["guide", "date_time"], name="exp_guide_datetime_idx"),
            models.Index(fields=["category", "is_active"], name="exp_category_active_idx"),
            models.Index(fields=["date_time", "is_active"], name="exp_datetime_active_idx"),
        ]

    def __str__(self) -> str:
        return self.title

    def soft_delete(self) -> None:
        self.is_active = False
        self.save(update_fields=["is_active", "updated_at"])
