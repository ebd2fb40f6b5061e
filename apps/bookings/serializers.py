"""Serializers for the booking ledger."""

from __future__ import annotations

from typing import Any

from rest_framework import serializers  # type: ignore

from .models import Booking, BookingReview


class BookingReviewSerializer(serializers.ModelSerializer):
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = BookingReview
        fields = ["rating", "comment", "createdAt"]
        read_only_fields = fields


class BookingSerializer(serializers.ModelSerializer):
    """Booking as seen by the booker, with the experience and guide summarized."""

    userId = serializers.IntegerField(source="user_id", read_only=True)
    experienceId = serializers.IntegerField(source="experience_id", read_only=True)
    guideId = serializers.IntegerField(source="guide_id", read_only=True)
    bookedAt = serializers.DateTimeField(source="booked_at", read_only=True)
    experienceDate = serializers.DateTimeField(source="experience_date", read_only=True)
    numberOfParticipants = serializers.IntegerField(source="participants_count", read_only=True)
    totalPrice = serializers.DecimalField(source="total_price", max_digits=12, decimal_places=2, read_only=True)
    paymentStatus = serializers.CharField(source="payment_status", read_only=True)
    experience = serializers.SerializerMethodField()
    guide = serializers.SerializerMethodField()
    review = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = [
            "id",
            "userId",
            "experienceId",
            "guideId",
            "bookedAt",
            "experienceDate",
            "numberOfParticipants",
            "totalPrice",
            "status",
            "paymentStatus",
            "notes",
            "experience",
            "guide",
            "review",
        ]
        read_only_fields = fields

    def get_experience(self, obj: Booking) -> dict[str, Any]:
        experience = obj.experience
        return {
            "id": experience.pk,
            "title": experience.title,
            "category": experience.category,
            "dateTime": serializers.DateTimeField().to_representation(experience.date_time),
            "duration": experience.duration,
            "address": experience.address,
            "price": str(experience.price),
            "images": experience.images,
        }

    def get_guide(self, obj: Booking) -> dict[str, Any] | None:
        profile = obj.guide.profile
        if profile is None:
            return None
        return {"id": obj.guide_id, "firstName": profile.first_name, "lastName": profile.last_name}

    def get_review(self, obj: Booking) -> dict[str, Any] | None:
        if not obj.has_review:
            return None
        return BookingReviewSerializer(obj.review).data


class GuideBookingSerializer(BookingSerializer):
    """Booking as seen by the hosting guide; adds who booked."""

    user = serializers.SerializerMethodField()

    class Meta(BookingSerializer.Meta):
        fields = [*BookingSerializer.Meta.fields, "user"]
        read_only_fields = fields

    def get_user(self, obj: Booking) -> dict[str, Any]:
        return {"id": obj.user_id, "name": obj.user.name, "email": obj.user.email}
