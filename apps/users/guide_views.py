"""Views for the guide application workflow."""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from shared.domain.exceptions import AuthorizationError, NotFoundError, StateConflictError

from .guide_serializers import (
    GuideProfileSerializer,
    GuideProfileWriteSerializer,
    PublicGuideProfileSerializer,
)
from .models import GuideProfile

logger = logging.getLogger(__name__)

User = get_user_model()

OPTIONAL_PROFILE_DEFAULTS = {
    "instagram": "",
    "telegram": "",
    "linkedin": "",
    "skill_documents": [],
    "profile_image": "",
}


def _require_guide(user) -> GuideProfile:
    profile = user.profile
    if not user.is_guide or profile is None:
        raise AuthorizationError("You are not registered as an experience guide.")
    return profile


class GuideApplyView(APIView):
    """Submit (or resubmit) a guide application; approval happens in the admin."""

    permission_classes = [IsAuthenticated]

    def post(self, request):  # type: ignore
        serializer = GuideProfileWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = request.user
        if user.is_guide and GuideProfile.objects.filter(user=user, is_approved=True).exists():
            raise StateConflictError("You are already an approved experience guide.")

        with transaction.atomic():
            profile, _ = GuideProfile.objects.update_or_create(
                user=user,
                defaults={
                    **OPTIONAL_PROFILE_DEFAULTS,
                    **serializer.validated_data,
                    "is_approved": False,
                    "approved_at": None,
                },
            )
            user.is_guide = True
            user.save(update_fields=["is_guide", "updated_at"])

        logger.info(f"Guide application submitted by user {user.id}")
        return Response(
            {
                "message": "Your application has been submitted for review.",
                "guideProfile": GuideProfileSerializer(profile).data,
            },
            status=status.HTTP_200_OK,
        )


class GuideProfileView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):  # type: ignore
        profile = _require_guide(request.user)
        return Response(
            {
                "guideProfile": GuideProfileSerializer(profile).data,
                "isApproved": profile.is_approved,
            }
        )

    def put(self, request):  # type: ignore
        profile = _require_guide(request.user)
        serializer = GuideProfileWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        changed = []
        for field, value in serializer.validated_data.items():
            setattr(profile, field, value)
            changed.append(field)
        if changed:
            profile.save(update_fields=[*changed, "updated_at"])

        return Response(
            {
                "message": "Guide profile updated successfully.",
                "guideProfile": GuideProfileSerializer(profile).data,
            }
        )


class PublicGuideProfileView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []

    def get(self, request, guide_id: int):  # type: ignore
        profile = (
            GuideProfile.objects.select_related("user")
            .filter(user_id=guide_id, user__is_guide=True, is_approved=True)
            .first()
        )
        if profile is None:
            raise NotFoundError("Guide not found.")
        return Response(PublicGuideProfileSerializer(profile).data)
