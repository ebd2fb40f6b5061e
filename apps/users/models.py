"""User domain models for the experience marketplace.

An account is either a plain customer or a guide. Guides carry a
``GuideProfile`` that an administrator approves before the account may
publish experiences; ``CustomUser.kind`` exposes which of the two variants a
record is, so callers never have to probe nullable profile fields.
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth.models import AbstractUser, BaseUserManager  # type: ignore
from django.core.validators import RegexValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


PHONE_VALIDATOR = RegexValidator(
    regex=r"^\+?\d{7,15}$",
    message=_("Invalid phone number. Use the international format without spaces."),
)


class CustomUserManager(BaseUserManager):
    """User manager that uses the email address as the login."""

    use_in_migrations = True

    @classmethod
    def normalize_email(cls, email: str | None) -> str:
        # Emails are unique regardless of case, local part included.
        return (email or "").strip().lower()

    def get_by_natural_key(self, username: str):  # type: ignore
        return self.get(email__iexact=username)

    def _create_user(self, email: str, password: str | None, **extra_fields: Any):
        if not email:
            raise ValueError("Email is required to create a user.")
        email = self.normalize_email(email)

        phone = extra_fields.get("phone")
        if phone:
            extra_fields["phone"] = self.normalize_phone(phone)

        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self._create_user(email, password, **extra_fields)

    @staticmethod
    def normalize_phone(phone: str) -> str:
        return phone.replace(" ", "").replace("-", "")


class CustomUser(AbstractUser):
    """Marketplace account: a customer, optionally also a guide."""

    class Kind(models.TextChoices):
        PLAIN = "plain", _("Customer")
        GUIDE = "guide", _("Guide")

    username = None
    first_name = None
    last_name = None
    name = models.CharField(_("Display name"), max_length=150)
    email = models.EmailField(_("Email"), unique=True)
    phone = models.CharField(
        _("Phone"),
        max_length=20,
        blank=True,
        validators=[PHONE_VALIDATOR],
    )
    is_guide = models.BooleanField(
        _("Applied as guide"),
        default=False,
        help_text=_("Set when the user submits a guide application."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomUserManager()

    USERNAME_FIELD = "email"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS = ["name"]

    class Meta:
        verbose_name = _("User")
        verbose_name_plural = _("Users")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.email

    def get_full_name(self) -> str:
        return self.name

    def get_short_name(self) -> str:
        return self.name

    @property
    def profile(self) -> "GuideProfile | None":
        try:
            return self.guide_profile
        except GuideProfile.DoesNotExist:
            return None

    @property
    def kind(self) -> str:
        if self.is_guide and self.profile is not None:
            return self.Kind.GUIDE
        return self.Kind.PLAIN

    def is_approved_guide(self) -> bool:
        profile = self.profile
        return bool(self.is_guide and profile is not None and profile.is_approved)


class GuideProfile(models.Model):
    """Public guide card attached to a user after they apply as a guide."""

    # Fields the guide may edit after applying. Approval is managed by staff.
    MUTABLE_FIELDS = (
        "first_name",
        "last_name",
        "bio",
        "expertise",
        "activity_field",
        "city",
        "activity_area",
        "contact_email",
        "contact_phone",
        "instagram",
        "telegram",
        "linkedin",
        "skill_documents",
        "profile_image",
    )

    user = models.OneToOneField(
        CustomUser,
        on_delete=models.CASCADE,
        related_name="guide_profile",
    )
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    bio = models.TextField()
    expertise = models.CharField(max_length=255)
    activity_field = models.CharField(max_length=255)
    city = models.CharField(max_length=100, db_index=True)
    activity_area = models.CharField(max_length=255)
    contact_email = models.EmailField()
    contact_phone = models.CharField(max_length=20, validators=[PHONE_VALIDATOR])
    instagram = models.CharField(max_length=255, blank=True)
    telegram = models.CharField(max_length=255, blank=True)
    linkedin = models.CharField(max_length=255, blank=True)
    skill_documents = models.JSONField(default=list, blank=True)
    profile_image = models.URLField(blank=True)
    is_approved = models.BooleanField(default=False)
    approved_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Guide profile")
        verbose_name_plural = _("Guide profiles")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["city", "is_approved"], name="users_guide_city_approved_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name} ({self.city})"

    @property
    def social_media(self) -> dict[str, str]:
        return {
            "instagram": self.instagram,
            "telegram": self.telegram,
            "linkedin": self.linkedin,
        }

    def approve(self) -> None:
        self.is_approved = True
        self.approved_at = timezone.now()
        self.save(update_fields=["is_approved", "approved_at", "updated_at"])


# Backwards compatibility alias used in tests
User = CustomUser
