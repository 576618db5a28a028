from __future__ import annotations

import functools
import logging
import time
from contextlib import contextmanager
from typing import Any, Callable, Generator, MutableMapping, Optional, TypeVar, Union

from django.utils.module_loading import import_string

from frontendlogging.conf import get_option

__all__ = [
    "MetricsBackend",
    "DummyMetricsBackend",
    "LoggingBackend",
    "incr",
    "timing",
    "timer",
    "wraps",
]

Tags = MutableMapping[str, str]
F = TypeVar("F", bound=Callable[..., Any])

logger = logging.getLogger(__name__)


class MetricsBackend:
    def __init__(self, prefix: Optional[str] = None) -> None:
        self.prefix = prefix

    def _get_key(self, key: str) -> str:
        if self.prefix:
            return f"{self.prefix}{key}"
        return key

    def incr(
        self,
        key: str,
        instance: Optional[str] = None,
        tags: Optional[Tags] = None,
        amount: Union[int, float] = 1,
    ) -> None:
        raise NotImplementedError

    def timing(
        self,
        key: str,
        value: float,
        instance: Optional[str] = None,
        tags: Optional[Tags] = None,
    ) -> None:
        raise NotImplementedError


class DummyMetricsBackend(MetricsBackend):
    def incr(self, key, instance=None, tags=None, amount=1):
        pass

    def timing(self, key, value, instance=None, tags=None):
        pass


class LoggingBackend(MetricsBackend):
    def incr(self, key, instance=None, tags=None, amount=1):
        logger.debug(
            "%r: %+g", self._get_key(key), amount, extra={"instance": instance, "tags": tags or {}}
        )

    def timing(self, key, value, instance=None, tags=None):
        logger.debug(
            "%r: %g ms",
            self._get_key(key),
            value * 1000,
            extra={"instance": instance, "tags": tags or {}},
        )


_backend: Optional[MetricsBackend] = None


def get_backend() -> MetricsBackend:
    global _backend
    if _backend is None:
        cls = import_string(get_option("FRONTEND_METRICS_BACKEND"))
        _backend = cls(prefix=get_option("FRONTEND_METRICS_PREFIX"))
    return _backend


def incr(
    key: str,
    amount: Union[int, float] = 1,
    instance: Optional[str] = None,
    tags: Optional[Tags] = None,
) -> None:
    try:
        get_backend().incr(key, instance, tags, amount)
    except Exception:
        logger.exception("Unable to record backend metric")


def timing(
    key: str,
    value: float,
    instance: Optional[str] = None,
    tags: Optional[Tags] = None,
) -> None:
    try:
        get_backend().timing(key, value, instance, tags)
    except Exception:
        logger.exception("Unable to record backend metric")


@contextmanager
def timer(
    key: str, instance: Optional[str] = None, tags: Optional[Tags] = None
) -> Generator[Tags, None, None]:
    if tags is None:
        tags = {}

    start = time.monotonic()
    try:
        yield tags
    except Exception:
        tags["result"] = "failure"
        raise
    else:
        tags["result"] = "success"
    finally:
        timing(key, time.monotonic() - start, instance, tags)


def wraps(
    key: str, instance: Optional[str] = None, tags: Optional[Tags] = None
) -> Callable[[F], F]:
    def wrapper(f: F) -> F:
        @functools.wraps(f)
        def inner(*args: Any, **kwargs: Any) -> Any:
            with timer(key, instance=instance, tags=dict(tags or {})):
                return f(*args, **kwargs)

        return inner  # type: ignore[return-value]

    return wrapper
