import logging
from unittest import mock

import pytest
from django.test import override_settings

from frontendlogging.utils import metrics


class RecordingBackend(metrics.MetricsBackend):
    def __init__(self, prefix=None):
        super().__init__(prefix=prefix)
        self.calls = []

    def incr(self, key, instance=None, tags=None, amount=1):
        self.calls.append(("incr", self._get_key(key), amount, tags))

    def timing(self, key, value, instance=None, tags=None):
        self.calls.append(("timing", self._get_key(key), tags))


@pytest.fixture
def backend():
    with override_settings(
        FRONTEND_METRICS_BACKEND="tests.frontendlogging.utils.test_metrics.RecordingBackend",
        FRONTEND_METRICS_PREFIX="fl.",
    ):
        yield metrics.get_backend()


def test_default_backend():
    assert isinstance(metrics.get_backend(), metrics.DummyMetricsBackend)
    assert metrics.get_backend().prefix == "frontendlogging."


def test_incr(backend):
    metrics.incr("sourcemaps.cache.miss", tags={"a": "b"})
    assert backend.calls == [("incr", "fl.sourcemaps.cache.miss", 1, {"a": "b"})]


def test_timer(backend):
    with metrics.timer("sourcemaps.parse"):
        pass
    with pytest.raises(ValueError):
        with metrics.timer("sourcemaps.parse"):
            raise ValueError
    assert backend.calls == [
        ("timing", "fl.sourcemaps.parse", {"result": "success"}),
        ("timing", "fl.sourcemaps.parse", {"result": "failure"}),
    ]


def test_wraps(backend):
    @metrics.wraps("task")
    def task(x):
        return x * 2

    assert task(2) == 4
    assert backend.calls == [("timing", "fl.task", {"result": "success"})]


def test_backend_errors_are_not_raised(caplog):
    broken = mock.Mock(spec=metrics.MetricsBackend)
    broken.incr.side_effect = RuntimeError("statsd is down")
    with mock.patch.object(metrics, "_backend", broken):
        with caplog.at_level(logging.ERROR, logger="frontendlogging.utils.metrics"):
            metrics.incr("sourcemaps.cache.miss")
    assert "Unable to record backend metric" in caplog.text


def test_logging_backend(caplog):
    backend = metrics.LoggingBackend(prefix="fl.")
    with caplog.at_level(logging.DEBUG, logger="frontendlogging.utils.metrics"):
        backend.incr("a")
        backend.timing("b", 0.5)
    assert "'fl.a': +1" in caplog.text
    assert "'fl.b': 500 ms" in caplog.text
