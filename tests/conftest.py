import os

import django
import pytest
from django.conf import settings

from frontendlogging.utils import metrics

TEST_STATIC_ROOT = os.path.join(os.path.dirname(__file__), "fixtures", "public")


def pytest_configure(config):
    if not settings.configured:
        settings.configure(
            DEBUG=False,
            INSTALLED_APPS=[],
            FRONTEND_STATIC_ROOT_PATH=TEST_STATIC_ROOT,
            FRONTEND_PLUGIN_STATIC_ROUTES=(),
            FRONTEND_METRICS_BACKEND="frontendlogging.utils.metrics.DummyMetricsBackend",
            FRONTEND_METRICS_PREFIX="frontendlogging.",
        )
        django.setup()


@pytest.fixture(autouse=True)
def reset_metrics_backend():
    metrics._backend = None
    yield
    metrics._backend = None
