"""Serializers for the experience catalog."""

from __future__ import annotations

from typing import Any

from rest_framework import serializers  # type: ignore

from .models import MAX_CAPACITY, MAX_DURATION, MIN_CAPACITY, Experience


class ExperienceSerializer(serializers.ModelSerializer):
    """Read projection with a short card of the hosting guide."""

    guideId = serializers.IntegerField(source="guide_id", read_only=True)
    guide = serializers.SerializerMethodField()
    dateTime = serializers.DateTimeField(source="date_time", read_only=True)
    isActive = serializers.BooleanField(source="is_active", read_only=True)
    reviewsCount = serializers.IntegerField(source="reviews_count", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Experience
        fields = [
            "id",
            "title",
            "category",
            "description",
            "steps",
            "dateTime",
            "duration",
            "capacity",
            "price",
            "address",
            "images",
            "isActive",
            "rating",
            "reviewsCount",
            "guideId",
            "guide",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields

    def get_guide(self, obj: Experience) -> dict[str, Any] | None:
        profile = obj.guide.profile
        if profile is None:
            return None
        return {
            "id": obj.guide_id,
            "firstName": profile.first_name,
            "lastName": profile.last_name,
            "city": profile.city,
            "bio": profile.bio,
            "expertise": profile.expertise,
        }


class ExperienceWriteSerializer(serializers.ModelSerializer):
    """Create and update payloads.

    Only the fields declared here can be written; any other key in the body
    (``guideId``, ``rating``, ``reviewsCount``...) is rejected.
    """

    steps = serializers.ListField(
        child=serializers.CharField(max_length=500),
        allow_empty=False,
    )
    dateTime = serializers.DateTimeField(source="date_time")
    capacity = serializers.IntegerField(min_value=MIN_CAPACITY, max_value=MAX_CAPACITY)
    duration = serializers.IntegerField(min_value=1, max_value=MAX_DURATION)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    images = serializers.ListField(child=serializers.URLField(), required=False)
    isActive = serializers.BooleanField(source="is_active", required=False)

    class Meta:
        model = Experience
        fields = [
            "title",
            "category",
            "description",
            "steps",
            "dateTime",
            "duration",
            "capacity",
            "price",
            "address",
            "images",
            "isActive",
        ]

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        unknown = sorted(set(self.initial_data) - set(self.fields))
        if unknown:
            raise serializers.ValidationError(f"Fields are not editable: {', '.join(unknown)}")
        return attrs
