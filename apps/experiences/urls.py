"""URL routing for the experience catalog."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import ExperienceViewSet

router = SimpleRouter(trailing_slash=False)
router.register(r"experiences", ExperienceViewSet, basename="experience")

urlpatterns = [
    path("", include(router.urls)),
]
