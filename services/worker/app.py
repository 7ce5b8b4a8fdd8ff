"""Celery application for background drawing storage maintenance."""

from celery import Celery

from core.settings import get_settings


def create_app() -> Celery:
    settings = get_settings()
    celery_app = Celery(
        "sketchvault-worker",
        broker=settings.queue.broker_url,
        backend=settings.queue.result_backend,
        include=["services.worker.tasks.cleanup"],
    )
    celery_app.conf.task_default_queue = "sketchvault"
    celery_app.conf.task_routes = {
        "services.worker.tasks.*": {"queue": "sketchvault"},
    }
    return celery_app


app = create_app()


@app.task(name="services.worker.tasks.health")
def health() -> str:
    return "ok"


__all__ = ["app", "create_app", "health"]
