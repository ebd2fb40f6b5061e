"""API views for the booking ledger."""

from __future__ import annotations

from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.domain.exceptions import ValidationError
from shared.infrastructure.pagination import BookingPagination

from . import services
from .domain import lifecycle
from .models import Booking
from .serializers import BookingReviewSerializer, BookingSerializer, GuideBookingSerializer


class BookingViewSet(viewsets.GenericViewSet):
    """Booking creation, listings and the lifecycle actions."""

    queryset = Booking.objects.select_related(
        "experience",
        "guide__guide_profile",
        "user",
        "review",
    )
    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated]
    pagination_class = BookingPagination
    filter_backends: list = []
    lookup_value_regex = r"\d+"

    def _filter_by_status(self, queryset):  # type: ignore
        value = self.request.query_params.get("status", "all")
        if value == "all":
            return queryset
        return queryset.filter(status=lifecycle.ensure_status_value(value))

    def _paginated(self, queryset, serializer_class):  # type: ignore
        page = self.paginate_queryset(queryset.order_by("-booked_at", "-id"))
        serializer = serializer_class(page, many=True, context=self.get_serializer_context())
        return self.get_paginated_response(serializer.data)

    def create(self, request, *args, **kwargs):  # type: ignore
        booking = services.create_booking(
            request.user,
            experience_id=request.data.get("experienceId"),
            participants=request.data.get("numberOfParticipants"),
            notes=str(request.data.get("notes") or ""),
        )
        booking = self.get_queryset().get(pk=booking.pk)
        return Response(
            {
                "message": "Experience booked successfully",
                "booking": BookingSerializer(booking, context=self.get_serializer_context()).data,
            },
            status=status.HTTP_201_CREATED,
        )

    @action(detail=False, methods=["get"], url_path="my-bookings", url_name="my-bookings")
    def my_bookings(self, request):  # type: ignore
        queryset = self._filter_by_status(self.get_queryset().filter(user=request.user))
        return self._paginated(queryset, BookingSerializer)

    @action(detail=False, methods=["get"], url_path="guide-bookings", url_name="guide-bookings")
    def guide_bookings(self, request):  # type: ignore
        queryset = self._filter_by_status(self.get_queryset().filter(guide=request.user))
        return self._paginated(queryset, GuideBookingSerializer)

    @action(detail=True, methods=["put"], url_path="status", url_name="status")
    def update_status(self, request, pk=None):  # type: ignore
        booking = services.change_status(
            request.user,
            booking_id=pk,
            target_status=request.data.get("status"),
        )
        return Response(
            {
                "message": "Booking status updated successfully",
                "booking": {
                    "id": booking.pk,
                    "status": booking.status,
                    "updatedAt": booking.updated_at,
                },
            }
        )

    @action(detail=True, methods=["put"], url_path="cancel", url_name="cancel")
    def cancel(self, request, pk=None):  # type: ignore
        booking = services.cancel_booking(request.user, booking_id=pk)
        return Response(
            {
                "message": "Booking cancelled successfully",
                "booking": {
                    "id": booking.pk,
                    "status": booking.status,
                    "paymentStatus": booking.payment_status,
                },
            }
        )

    @action(detail=True, methods=["post"], url_path="review", url_name="review")
    def review(self, request, pk=None):  # type: ignore
        comment = request.data.get("comment") or ""
        if not isinstance(comment, str):
            raise ValidationError("Comment must be a string")
        review = services.add_review(
            request.user,
            booking_id=pk,
            rating=request.data.get("rating"),
            comment=comment,
        )
        return Response(
            {
                "message": "Review added successfully",
                "review": BookingReviewSerializer(review).data,
            }
        )
