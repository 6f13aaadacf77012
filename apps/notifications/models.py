"""Notification model.

A notification is addressed either to one user or, when ``user`` is
empty, to the whole back office. ``entity_table``/``entity_id`` point
at the record that triggered it and are used for de-duplication.
"""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore


class Notification(models.Model):
    """A message sent to a user or to the back office about some event."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='notifications',
        null=True,
        blank=True,
    )
    event_type = models.CharField(max_length=64, default='event')
    icon_key = models.CharField(max_length=32, default='bell')
    title = models.CharField(max_length=255)
    message = models.TextField(blank=True)
    href = models.CharField(max_length=255, blank=True)
    entity_table = models.CharField(max_length=64, blank=True)
    entity_id = models.CharField(max_length=64, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(
                fields=['event_type', 'entity_table', 'entity_id', 'created_at'],
                name='notification_event_lookup_idx',
            ),
        ]

    def __str__(self) -> str:
        recipient = self.user_id or 'back-office'
        return f"Notification to {recipient}: {self.title}"
