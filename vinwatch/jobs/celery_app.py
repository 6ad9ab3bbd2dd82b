"""Celery configuration for the hourly order check."""

from __future__ import annotations

from celery import Celery
from celery.schedules import crontab
from dotenv import load_dotenv

from vinwatch.config import Settings
from vinwatch.utils.dates import ORDER_TZ

load_dotenv()
settings = Settings()

celery_app = Celery("vinwatch", broker=settings.redis_url, backend=settings.redis_url, include=["vinwatch.jobs.celery_app"])
celery_app.conf.timezone = ORDER_TZ
celery_app.conf.beat_schedule = {
    "hourly-order-check": {
        "task": "vinwatch.jobs.check_vin.run_check",
        "schedule": crontab(minute=settings.check_minute),
    },
}


@celery_app.task(name="vinwatch.jobs.check_vin.run_check")
def run_check_task() -> bool:  # pragma: no cover - executed by worker
    import asyncio

    from vinwatch.jobs.check_vin import run_check

    result = asyncio.run(run_check(Settings()))
    return result.sent
