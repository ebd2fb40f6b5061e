"""URL configuration for the experience marketplace.

Routes carry no trailing slash; the refresh cookie is scoped to
``/auth/refresh`` so the auth routes are mounted at the root.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView  # type: ignore

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/schema', SpectacularAPIView.as_view(), name='schema'),
    # Application URLs
    path('auth/', include('apps.users.auth_urls')),
    path('guides/', include('apps.users.guide_urls')),
    path('', include('apps.experiences.urls')),
    path('', include('apps.bookings.urls')),
]
