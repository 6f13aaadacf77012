import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("reservations_project")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Expire stale holds across every property
    "maintain-short-stay-reservations": {
        "task": "reservations.maintain_short_stay_reservations",
        "schedule": 300.0,
        "options": {"expires": 240},
    },
}
