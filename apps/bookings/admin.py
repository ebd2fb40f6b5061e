"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking, BookingReview


class BookingReviewInline(admin.StackedInline):
    model = BookingReview
    extra = 0
    can_delete = False
    readonly_fields = ("rating", "comment", "created_at")


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "experience",
        "user",
        "guide",
        "participants_count",
        "status",
        "payment_status",
        "experience_date",
        "total_price",
        "booked_at",
    )
    list_filter = ("status", "payment_status", "experience_date")
    search_fields = ("experience__title", "user__email", "guide__email")
    readonly_fields = (
        "user",
        "experience",
        "guide",
        "experience_date",
        "participants_count",
        "total_price",
        "booked_at",
        "updated_at",
    )
    inlines = (BookingReviewInline,)


@admin.register(BookingReview)
class BookingReviewAdmin(admin.ModelAdmin):
    list_display = ("booking", "rating", "created_at")
    list_filter = ("rating",)
    search_fields = ("booking__experience__title", "booking__user__email")
    readonly_fields = ("booking", "rating", "created_at")
