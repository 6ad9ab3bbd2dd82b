import pytest

from vinwatch.logic import cadence
from vinwatch.logic.cadence import CadenceFallback, decide


@pytest.mark.parametrize("cadence_input", [None, 1, 4, "7", "junk", -3])
@pytest.mark.parametrize("period", [1, 2, 3, 0])
def test_vin_always_sends(cadence_input, period, clock):
    decision = decide(True, cadence_input, period, vin="LSJA1234567890", now=clock(10))
    assert decision.send
    assert decision.subject == "VIN生成通知：LSJA1234567890"


def test_explicit_counter(clock):
    assert decide(False, 3, 3, now=clock(10)).send
    assert not decide(False, 4, 3, now=clock(9)).send
    assert decide(False, "6", 3, now=clock(10)).send


def test_reminder_subject(clock):
    decision = decide(False, 3, 3, now=clock(10))
    assert decision.subject == "订单进度提醒：暂未生成VIN"
    assert decision.cadence_index == 3


def test_hour_fallback(clock):
    assert decide(False, None, 3, now=clock(9)).send
    assert not decide(False, None, 3, now=clock(10)).send
    assert decide(False, None, 3, now=clock(0)).send


def test_hour_fallback_uses_shanghai_time():
    import pendulum

    # 01:00 UTC is 09:00 in Shanghai
    now = pendulum.datetime(2025, 3, 14, 1, 0, tz="UTC")
    assert cadence.cadence_index(None, CadenceFallback.HOUR, now=now) == 9


@pytest.mark.parametrize("bad", ["abc", "", 0, -2, "0", 2.5, True, [3]])
def test_malformed_counter_falls_back(bad, clock):
    assert decide(False, bad, 3, now=clock(9)).cadence_index == 9
    assert not decide(False, bad, 3, now=clock(10)).send


def test_zero_fallback_always_sends_without_counter(clock):
    policy = cadence.EVERY_OTHER_RUN_OR_ZERO
    assert cadence.decide_with_policy(False, None, policy, now=clock(11)).send
    assert not cadence.decide_with_policy(False, 5, policy, now=clock(11)).send
    assert cadence.decide_with_policy(False, 8, policy, now=clock(11)).send


def test_invalid_period_sends_every_run(clock):
    assert decide(False, 7, 0, now=clock(10)).send
    assert decide(False, 7, "x", now=clock(10)).send


def test_parse_run_counter():
    assert cadence.parse_run_counter(" 12 ") == 12
    assert cadence.parse_run_counter(4.0) == 4
    assert cadence.parse_run_counter(None) is None
    assert cadence.parse_run_counter("1e3") is None
