"""URL routing for the guide workflow (namespace: guides)."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .guide_views import GuideApplyView, GuideProfileView, PublicGuideProfileView

app_name = "guides"

urlpatterns = [
    path("apply", GuideApplyView.as_view(), name="apply"),
    path("profile", GuideProfileView.as_view(), name="profile"),
    path("profile/<int:guide_id>", PublicGuideProfileView.as_view(), name="public-profile"),
]
