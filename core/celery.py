"""
Celery configuration for the Fisheries Trading Back-Office.

Background work:
- Daily scan of vehicle compliance documents (RC, insurance, fitness,
  pollution, permit, road tax) nearing expiry
"""
import os
from celery import Celery
from celery.schedules import crontab

# Set the default Django settings module
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'core.settings')

app = Celery('core')

# Load config from Django settings with CELERY_ prefix
app.config_from_object('django.conf:settings', namespace='CELERY')

# Auto-discover tasks in all installed apps
app.autodiscover_tasks()


# =============================================================================
# CELERY BEAT SCHEDULE - Periodic Tasks
# =============================================================================
app.conf.beat_schedule = {
    # Vehicle document expiry check (run at 7 AM)
    'check-vehicle-document-expiry': {
        'task': 'fleet.tasks.check_vehicle_document_expiry',
        'schedule': crontab(hour=7, minute=0),
    },
}

app.conf.update(
    result_expires=3600,  # 1 hour

    task_time_limit=300,  # 5 minutes hard limit
    task_soft_time_limit=240,

    task_acks_late=True,
    task_reject_on_worker_lost=True,

    worker_prefetch_multiplier=1,

    task_serializer='json',
    result_serializer='json',
    accept_content=['json'],

    timezone=os.getenv('TIME_ZONE', 'Asia/Kolkata'),
    enable_utc=True,
)
