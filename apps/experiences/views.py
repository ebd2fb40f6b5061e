"""Experience catalog API views."""

from __future__ import annotations

import logging

from django.db import transaction  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings.services import reserved_participants
from shared.domain.exceptions import (
    AuthorizationError,
    NotFoundError,
    StateConflictError,
    ValidationError,
)
from shared.infrastructure.locking import lock_queryset_if_possible
from shared.infrastructure.pagination import ExperiencePagination

from .filters import ExperienceFilterSet
from .models import Experience
from .serializers import ExperienceSerializer, ExperienceWriteSerializer

logger = logging.getLogger(__name__)

MY_EXPERIENCE_STATUSES = {"all", "active", "inactive"}


class ExperienceViewSet(viewsets.GenericViewSet):
    """Public catalog plus guide-side management of experiences."""

    queryset = Experience.objects.select_related("guide__guide_profile")
    serializer_class = ExperienceSerializer
    permission_classes = [permissions.IsAuthenticated]
    pagination_class = ExperiencePagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = ExperienceFilterSet
    lookup_value_regex = r"\d+"

    def get_permissions(self):  # type: ignore
        if self.action in {"list", "retrieve"}:
            return [permissions.AllowAny()]
        return super().get_permissions()

    def get_serializer_class(self):  # type: ignore
        if self.action in {"create", "update"}:
            return ExperienceWriteSerializer
        return ExperienceSerializer

    def _get_owned(self, pk, verb: str) -> Experience:
        experience = lock_queryset_if_possible(Experience.objects.filter(pk=pk)).first()
        if experience is None:
            raise NotFoundError("Experience not found")
        if experience.guide_id != self.request.user.pk:
            raise AuthorizationError(f"You can only {verb} your own experiences")
        return experience

    def list(self, request, *args, **kwargs):  # type: ignore
        queryset = self.filter_queryset(self.get_queryset().active()).order_by("date_time", "id")
        page = self.paginate_queryset(queryset)
        return self.get_paginated_response(self.get_serializer(page, many=True).data)

    def retrieve(self, request, pk=None, *args, **kwargs):  # type: ignore
        experience = self.get_queryset().filter(pk=pk).first()
        if experience is None:
            raise NotFoundError("Experience not found")
        if not experience.is_active:
            raise NotFoundError("This experience is no longer available")
        return Response(self.get_serializer(experience).data)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        if not request.user.is_approved_guide():
            raise AuthorizationError("You must be an approved experience guide to create experiences")

        experience = serializer.save(guide=request.user, is_active=True)
        logger.info(f"Experience {experience.pk} created by guide {request.user.pk}")
        return Response(
            {
                "message": "Experience created successfully",
                "experience": ExperienceSerializer(experience).data,
            },
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, pk=None, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        changes = serializer.validated_data

        with transaction.atomic():
            experience = self._get_owned(pk, "update")
            new_capacity = changes.get("capacity")
            if new_capacity is not None and new_capacity < experience.capacity:
                reserved = reserved_participants(experience.pk)
                if new_capacity < reserved:
                    raise StateConflictError(
                        f"Capacity cannot be lower than the {reserved} participants already booked"
                    )
            for field, value in changes.items():
                setattr(experience, field, value)
            if changes:
                experience.save(update_fields=[*changes, "updated_at"])

        logger.info(f"Experience {experience.pk} updated: {', '.join(sorted(changes)) or 'no changes'}")
        experience = self.get_queryset().get(pk=experience.pk)
        return Response(
            {
                "message": "Experience updated successfully",
                "experience": ExperienceSerializer(experience).data,
            }
        )

    def destroy(self, request, pk=None, *args, **kwargs):  # type: ignore
        with transaction.atomic():
            experience = self._get_owned(pk, "delete")
            experience.soft_delete()
        logger.info(f"Experience {experience.pk} deactivated by guide {request.user.pk}")
        return Response({"message": "Experience deleted successfully"})

    @action(
        detail=False,
        methods=["get"],
        url_path="guide/my-experiences",
        url_name="my-experiences",
    )
    def my_experiences(self, request):  # type: ignore
        status_filter = request.query_params.get("status", "all")
        if status_filter not in MY_EXPERIENCE_STATUSES:
            raise ValidationError("Invalid status filter, use one of: all, active, inactive")

        queryset = self.get_queryset().filter(guide=request.user)
        if status_filter != "all":
            queryset = queryset.filter(is_active=status_filter == "active")
        page = self.paginate_queryset(queryset.order_by("-created_at", "-id"))
        return self.get_paginated_response(ExperienceSerializer(page, many=True).data)
