"""API URL configuration."""
from __future__ import annotations

from django.urls import path

from backend.api.views import HealthView, ZoneView

urlpatterns = [
    path("zone", ZoneView.as_view(), name="zone"),
    path("health", HealthView.as_view(), name="health"),
]
