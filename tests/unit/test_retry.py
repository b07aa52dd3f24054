import time

import pytest

from pageprobe.utils.config import get_settings
from pageprobe.utils.timing import retry


class Boom(RuntimeError):
    pass


def counting(results):
    """Probe returning `results` in order, repeating the last one."""
    calls = {"n": 0}

    def probe():
        i = min(calls["n"], len(results) - 1)
        calls["n"] += 1
        return results[i]

    return probe, calls


def test_true_on_first_poll_returns_immediately():
    probe, calls = counting([True])
    assert retry(probe, interval_ms=1000, timeout_ms=5000) is True
    assert calls["n"] == 1


def test_becomes_true_before_deadline():
    probe, calls = counting([False, False, True])
    assert retry(probe, interval_ms=1, timeout_ms=2000) is True
    assert calls["n"] == 3


def test_timeout_returns_false_without_raising():
    probe, calls = counting([False])
    started = time.monotonic()
    assert retry(probe, interval_ms=5, timeout_ms=60) is False
    assert time.monotonic() - started >= 0.05
    assert calls["n"] > 1


def test_zero_timeout_polls_exactly_once():
    probe, calls = counting([False])
    assert retry(probe, interval_ms=10, timeout_ms=0) is False
    assert calls["n"] == 1


def test_probe_exception_propagates_on_the_poll_it_happens():
    calls = {"n": 0}

    def probe():
        calls["n"] += 1
        if calls["n"] == 2:
            raise Boom("connection dropped")
        return False

    with pytest.raises(Boom):
        retry(probe, interval_ms=1, timeout_ms=2000)
    assert calls["n"] == 2


def test_defaults_come_from_settings(monkeypatch):
    monkeypatch.setenv("RETRY_TIMEOUT_MS", "0")
    monkeypatch.setenv("RETRY_INTERVAL_MS", "7")
    get_settings.cache_clear()
    try:
        assert get_settings().RETRY_TIMEOUT_MS == 0
        assert get_settings().RETRY_INTERVAL_MS == 7
        probe, calls = counting([False])
        assert retry(probe) is False
        assert calls["n"] == 1
    finally:
        get_settings.cache_clear()

