"""
Celery Application Configuration
Queue-based background processing for citation verification
"""

from celery import Celery
from kombu import Queue, Exchange

from brandlens.config import get_settings

settings = get_settings()

# Create Celery app
celery_app = Celery(
    "brandlens",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=[
        "brandlens.workers.tasks.citation_tasks",
    ]
)

# Celery configuration
celery_app.conf.update(
    # Task settings
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # Result backend settings
    result_expires=86400,  # 24 hours

    # Task execution settings
    task_acks_late=True,  # Acknowledge after task completion
    task_reject_on_worker_lost=True,
    task_time_limit=300,  # 5 minutes max
    task_soft_time_limit=240,  # 4 minutes soft limit

    # Worker settings
    worker_prefetch_multiplier=1,  # Fair distribution

    # Queue configuration
    task_queues=(
        Queue("default", Exchange("default"), routing_key="default"),
        Queue("citations", Exchange("citations"), routing_key="citations"),
    ),

    task_default_queue="default",
    task_default_exchange="default",
    task_default_routing_key="default",

    # Route tasks to appropriate queues
    task_routes={
        "brandlens.workers.tasks.citation_tasks.*": {"queue": "citations"},
    },
)
