"""Celery worker configuration.

Consumes the booking notification queue and sends customer emails.

    celery -A app.worker worker -Q booking-notifications
"""

from celery import Celery

from app.config import settings

# Create Celery app
celery_app = Celery(
    "yogyn_tasks",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["app.tasks"],
)

# Celery configuration
celery_app.conf.update(
    # Task settings
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # Route notifications to their own queue
    task_routes={
        "app.tasks.process_booking_event": {"queue": settings.notification_queue},
    },
    task_default_queue=settings.notification_queue,

    # At-least-once delivery: ack only after the email went out
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_time_limit=120,
    task_soft_time_limit=90,

    # Fail fast when the broker is down so publishing never hangs a request
    broker_connection_timeout=settings.broker_connect_timeout,
    broker_transport_options={"socket_connect_timeout": settings.broker_connect_timeout},

    # Worker settings
    worker_prefetch_multiplier=1,
    worker_concurrency=4,

    # Result backend settings
    result_expires=3600,  # Results expire after 1 hour

    # Retry settings
    task_default_retry_delay=60,  # 1 minute
    task_max_retries=3,
)


if __name__ == "__main__":
    celery_app.start()
