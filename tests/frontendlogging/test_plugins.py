from django.test import override_settings

from frontendlogging.plugins import PluginRouteRegistry, PluginStaticRoute

ROUTES = [
    PluginStaticRoute(plugin_id="acme-panel", directory="/plugins/acme-panel/dist"),
    PluginStaticRoute(plugin_id="acme-app", directory="/plugins/acme-app/dist"),
]


def test_registry_keeps_order():
    registry = PluginRouteRegistry(ROUTES)
    assert list(registry) == ROUTES
    assert [route.plugin_id for route in registry] == ["acme-panel", "acme-app"]


def test_registry_get():
    registry = PluginRouteRegistry(ROUTES)
    assert registry.get("acme-app") == ROUTES[1]
    assert registry.get("missing") is None


def test_registry_reads_routes_added_later():
    routes = list(ROUTES)
    registry = PluginRouteRegistry(routes)
    late = PluginStaticRoute(plugin_id="late", directory="/late")
    routes.append(late)
    assert list(registry) == ROUTES + [late]
    assert registry.get("late") == late


def test_registry_from_callable():
    routes = []
    registry = PluginRouteRegistry(lambda: routes)
    assert list(registry) == []
    routes.extend(ROUTES)
    assert list(registry) == ROUTES


@override_settings(
    FRONTEND_PLUGIN_STATIC_ROUTES=[
        ("acme-panel", "/plugins/acme-panel/dist"),
        ("acme-app", "/plugins/acme-app/dist"),
    ]
)
def test_registry_from_settings():
    assert list(PluginRouteRegistry.from_settings()) == ROUTES


def test_registry_from_settings_default():
    assert list(PluginRouteRegistry.from_settings()) == []


def test_registry_from_settings_reads_settings_on_iteration():
    registry = PluginRouteRegistry.from_settings()
    with override_settings(FRONTEND_PLUGIN_STATIC_ROUTES=[("acme-app", "/plugins/acme-app/dist")]):
        assert list(registry) == ROUTES[1:]
    assert list(registry) == []
