"""Admin registration for the experience catalog."""

from __future__ import annotations

from django.contrib import admin

from .models import Experience


@admin.register(Experience)
class ExperienceAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "category",
        "guide",
        "date_time",
        "capacity",
        "price",
        "is_active",
        "rating",
        "reviews_count",
    )
    list_filter = ("category", "is_active", "date_time")
    search_fields = ("title", "address", "guide__email")
    readonly_fields = ("rating", "reviews_count", "created_at", "updated_at")
