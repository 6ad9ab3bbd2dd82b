"""Datetime helpers."""

from __future__ import annotations

import pendulum

ORDER_TZ = "Asia/Shanghai"
REQUEST_TIME_FORMAT = "YYYY/MM/DD HH:mm:ss"


def now_in_tz() -> pendulum.DateTime:
    return pendulum.now(pendulum.timezone(ORDER_TZ))


def localize(value: pendulum.DateTime | None) -> pendulum.DateTime:
    """Return ``value`` (or the current time) converted to the order timezone."""
    if value is None:
        return now_in_tz()
    return pendulum.instance(value).in_timezone(ORDER_TZ)


def current_hour(now: pendulum.DateTime | None = None) -> int:
    return localize(now).hour


def format_request_time(now: pendulum.DateTime | None = None) -> str:
    return localize(now).format(REQUEST_TIME_FORMAT)
