from __future__ import annotations

import os
from typing import Any, Callable, Dict

from django.conf import settings

DEFAULTS: Dict[str, Any] = {
    # Root directory of the built frontend (the directory holding ``build/``).
    # ``None`` means ``<current working directory>/public``.
    "FRONTEND_STATIC_ROOT_PATH": None,
    # Ordered (plugin_id, directory) pairs. Order decides which route wins
    # when more than one matches a URL.
    "FRONTEND_PLUGIN_STATIC_ROUTES": (),
    "FRONTEND_METRICS_BACKEND": "frontendlogging.utils.metrics.DummyMetricsBackend",
    "FRONTEND_METRICS_PREFIX": "frontendlogging.",
}


def get_default_static_root_path() -> str:
    return os.path.join(os.getcwd(), "public")


# resolved at lookup time when the option is unset or None
DYNAMIC_DEFAULTS: Dict[str, Callable[[], Any]] = {
    "FRONTEND_STATIC_ROOT_PATH": get_default_static_root_path,
}


def get_option(key: str) -> Any:
    value = getattr(settings, key, DEFAULTS[key])
    if value is None and key in DYNAMIC_DEFAULTS:
        return DYNAMIC_DEFAULTS[key]()
    return value


def configure(**options: Any) -> None:
    """
    Configure Django settings for standalone use (scripts, workers that are
    not part of a Django project). Does nothing if settings were already
    configured by the host application.
    """
    if settings.configured:
        return

    values = dict(DEFAULTS)
    values.update(options)
    settings.configure(**values)
