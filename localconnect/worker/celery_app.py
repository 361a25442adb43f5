from celery import Celery

from localconnect.core.config import settings

celery_app = Celery(
    "localconnect",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["localconnect.worker.tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    task_always_eager=settings.celery_task_always_eager,
    task_ignore_result=True,
)
