"""URL configuration for the reservations project.

The `urlpatterns` list routes URLs to views. It includes the Django admin,
the JWT token endpoints, the reservation API and its OpenAPI schema.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView  # type: ignore

# API versioning. v1 is our initial version; future versions can be added here.

urlpatterns = [
    path('admin/', admin.site.urls),
    # Application URLs
    path('api/v1/auth/', include(('apps.users.auth_urls', 'auth'), namespace='auth')),
    path('api/v1/reservations/', include(('apps.reservations.urls', 'reservations'), namespace='reservations')),
    # API schema
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
]
