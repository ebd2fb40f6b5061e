"""Serializers for the guide application workflow."""

from __future__ import annotations

from typing import Any

from rest_framework import serializers  # type: ignore

from .models import PHONE_VALIDATOR, GuideProfile


class SocialMediaSerializer(serializers.Serializer):
    instagram = serializers.CharField(max_length=255, required=False, allow_blank=True)
    telegram = serializers.CharField(max_length=255, required=False, allow_blank=True)
    linkedin = serializers.CharField(max_length=255, required=False, allow_blank=True)


class GuideProfileWriteSerializer(serializers.Serializer):
    """Guide application and profile edits.

    Keys are the camelCase names used by clients; ``source`` maps each one
    onto the allow-listed model field. The approval flag is not writable.
    """

    firstName = serializers.CharField(source="first_name", max_length=100)
    lastName = serializers.CharField(source="last_name", max_length=100)
    bio = serializers.CharField()
    expertise = serializers.CharField(max_length=255)
    activityField = serializers.CharField(source="activity_field", max_length=255)
    city = serializers.CharField(max_length=100)
    activityArea = serializers.CharField(source="activity_area", max_length=255)
    email = serializers.EmailField(source="contact_email")
    phone = serializers.CharField(source="contact_phone", max_length=20, validators=[PHONE_VALIDATOR])
    socialMedia = SocialMediaSerializer(source="*", required=False)
    skillDocuments = serializers.ListField(
        source="skill_documents",
        child=serializers.URLField(),
        required=False,
    )
    profileImage = serializers.URLField(source="profile_image", required=False, allow_blank=True)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        unknown = set(attrs) - set(GuideProfile.MUTABLE_FIELDS)
        if unknown:
            raise serializers.ValidationError(f"Fields are not editable: {', '.join(sorted(unknown))}")
        for field in ("first_name", "last_name", "bio", "expertise", "activity_field", "city", "activity_area"):
            if field in attrs:
                attrs[field] = attrs[field].strip()
                if not attrs[field]:
                    raise serializers.ValidationError({field: "This field may not be blank."})
        return attrs


class GuideProfileSerializer(serializers.ModelSerializer):
    """Full profile as seen by its owner."""

    firstName = serializers.CharField(source="first_name")
    lastName = serializers.CharField(source="last_name")
    activityField = serializers.CharField(source="activity_field")
    activityArea = serializers.CharField(source="activity_area")
    email = serializers.EmailField(source="contact_email")
    phone = serializers.CharField(source="contact_phone")
    socialMedia = serializers.DictField(source="social_media", read_only=True)
    skillDocuments = serializers.ListField(source="skill_documents")
    profileImage = serializers.CharField(source="profile_image")
    isApproved = serializers.BooleanField(source="is_approved", read_only=True)

    class Meta:
        model = GuideProfile
        fields = [
            "firstName",
            "lastName",
            "bio",
            "expertise",
            "activityField",
            "city",
            "activityArea",
            "email",
            "phone",
            "socialMedia",
            "skillDocuments",
            "profileImage",
            "isApproved",
        ]
        read_only_fields = fields


class PublicGuideProfileSerializer(serializers.ModelSerializer):
    """Projection shown to anyone; contact details are left out."""

    firstName = serializers.CharField(source="first_name")
    lastName = serializers.CharField(source="last_name")
    activityField = serializers.CharField(source="activity_field")
    activityArea = serializers.CharField(source="activity_area")
    profileImage = serializers.CharField(source="profile_image")
    socialMedia = serializers.DictField(source="social_media", read_only=True)

    class Meta:
        model = GuideProfile
        fields = [
            "firstName",
            "lastName",
            "bio",
            "expertise",
            "activityField",
            "city",
            "activityArea",
            "profileImage",
            "socialMedia",
        ]
        read_only_fields = fields
