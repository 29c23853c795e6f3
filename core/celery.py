"""
Celery configuration for the Health Scale Digital backend.

Celery runs the contact notification fan-out outside the request/response
cycle. Tasks here are fire-and-forget: one attempt per channel, no retries,
and no result backend. Outcomes are recorded in the notification log table.
"""
import os
from celery import Celery

# Set the default Django settings module
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'core.settings')

# Create Celery app
app = Celery('core')

# Load config from Django settings with CELERY_ prefix
app.config_from_object('django.conf:settings', namespace='CELERY')

# Auto-discover tasks in all installed apps
app.autodiscover_tasks()

# Celery configuration
app.conf.update(
    # Fire-and-forget: results are never read
    task_ignore_result=True,

    # Task time limits
    task_time_limit=120,  # 2 minutes hard limit
    task_soft_time_limit=90,

    # At most one delivery attempt: ack on receipt, never redeliver
    task_acks_late=False,
    task_reject_on_worker_lost=False,

    # Prefetch multiplier (1 = fair distribution)
    worker_prefetch_multiplier=1,

    # Serialization
    task_serializer='json',
    accept_content=['json'],

    # Timezone
    timezone='UTC',
    enable_utc=True,
)
