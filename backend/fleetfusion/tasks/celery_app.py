from celery import Celery
from celery.schedules import crontab

from fleetfusion.core.config import settings

celery_app = Celery(
    "fleetfusion",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=["fleetfusion.tasks.compliance_tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    beat_schedule={
        # Daily at 06:00 UTC: alerts for documents about to expire
        "daily-expiring-documents": {
            "task": "fleetfusion.tasks.compliance_tasks.check_expiring_documents",
            "schedule": crontab(hour=6, minute=0),
        },
        # Hourly: materialize HOS violations for all active drivers
        "hourly-hos-sweep": {
            "task": "fleetfusion.tasks.compliance_tasks.run_hos_sweeps",
            "schedule": crontab(minute=0),
        },
    },
)
