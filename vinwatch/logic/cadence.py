"""Notification decision policy.

The scheduler that triggers a check keeps no state between runs, so "send a
reminder every Nth run" is derived from an externally supplied run counter.
When no usable counter exists the policy degrades to a fallback index:

* ``HOUR``: the hour of day in Asia/Shanghai. This is periodic in wall-clock
  time rather than in invocations and drifts whenever the trigger interval does
  not divide evenly into the period.
* ``ZERO``: index 0, i.e. every counter-less run sends a reminder.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

import pendulum

from vinwatch.utils.dates import current_hour

VIN_SUBJECT = "VIN生成通知：{vin}"
REMINDER_SUBJECT = "订单进度提醒：暂未生成VIN"


class CadenceFallback(str, enum.Enum):
    HOUR = "hour"
    ZERO = "zero"


@dataclass(frozen=True, slots=True)
class CadencePolicy:
    period: int
    fallback: CadenceFallback = CadenceFallback.HOUR


EVERY_THIRD_RUN_OR_HOUR = CadencePolicy(period=3, fallback=CadenceFallback.HOUR)
EVERY_OTHER_RUN_OR_ZERO = CadencePolicy(period=2, fallback=CadenceFallback.ZERO)


@dataclass(frozen=True, slots=True)
class Decision:
    send: bool
    subject: str
    cadence_index: int | None = None


def parse_run_counter(value: Any) -> int | None:
    """Return ``value`` as a positive integer, or None when it is not one."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not value.is_integer():
            return None
        number = int(value)
    elif isinstance(value, str):
        try:
            number = int(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if number > 0 else None


def cadence_index(
    cadence_input: Any,
    fallback: CadenceFallback = CadenceFallback.HOUR,
    *,
    now: pendulum.DateTime | None = None,
) -> int:
    counter = parse_run_counter(cadence_input)
    if counter is not None:
        return counter
    if fallback == CadenceFallback.ZERO:
        return 0
    return current_hour(now)


def decide(
    has_vin: bool,
    cadence_input: Any,
    period: Any,
    *,
    vin: str | None = None,
    fallback: CadenceFallback = CadenceFallback.HOUR,
    now: pendulum.DateTime | None = None,
) -> Decision:
    if has_vin:
        return Decision(send=True, subject=VIN_SUBJECT.format(vin=vin or "--"))
    index = cadence_index(cadence_input, fallback, now=now)
    return Decision(send=index % _period(period) == 0, subject=REMINDER_SUBJECT, cadence_index=index)


def decide_with_policy(
    has_vin: bool,
    cadence_input: Any,
    policy: CadencePolicy,
    *,
    vin: str | None = None,
    now: pendulum.DateTime | None = None,
) -> Decision:
    return decide(has_vin, cadence_input, policy.period, vin=vin, fallback=policy.fallback, now=now)


def _period(value: Any) -> int:
    period = parse_run_counter(value)
    return period if period is not None else 1
