"""Admin registrations for properties domain."""

from __future__ import annotations

from django.contrib import admin

from .models import Property


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = ("ref", "title", "location", "price", "location_type", "is_published", "created_at")
    list_filter = ("location_type", "is_published")
    search_fields = ("ref", "title", "location")
    readonly_fields = ("created_at", "updated_at")
