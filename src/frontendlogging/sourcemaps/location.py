from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass
from typing import Iterable, Optional
from urllib.parse import unquote, urlsplit

from frontendlogging.plugins import PluginStaticRoute

from .exceptions import InvalidSourceURL

BUILD_PREFIX = "/public/build/"
PLUGINS_PREFIX = "/public/plugins/"
# subdirectory of the static root that built core assets are served from
BUILD_DIRECTORY = "build"
SOURCEMAP_SUFFIX = ".map"

INVALID_ESCAPE_RE = re.compile(r"%(?![0-9a-fA-F]{2})")


@dataclass(frozen=True)
class SourceMapLocation:
    directory: str
    path: str
    plugin_id: Optional[str] = None


def get_url_path(source_url: str) -> str:
    """
    Returns the percent-decoded path component of ``source_url``.

    Raises ``InvalidSourceURL`` if the URL cannot be parsed.
    """
    try:
        parts = urlsplit(source_url)
        # accessing the port validates it
        parts.port
    except ValueError as e:
        raise InvalidSourceURL({"url": source_url, "reason": str(e)})

    if INVALID_ESCAPE_RE.search(parts.path):
        raise InvalidSourceURL({"url": source_url, "reason": "invalid escape in path"})

    return unquote(parts.path)


def get_plugin_prefix(plugin_id: str) -> str:
    return posixpath.normpath(posixpath.join(PLUGINS_PREFIX, plugin_id))


def guess_sourcemap_location(
    source_url: str,
    static_root_path: str,
    plugin_routes: Iterable[PluginStaticRoute] = (),
) -> Optional[SourceMapLocation]:
    """
    Works out where the source map of a built asset lives on disk.

    Core assets (``/public/build/...``) map into the ``build`` directory of
    ``static_root_path``. Plugin assets (``/public/plugins/<id>/...``) map
    into the directory of the first route in ``plugin_routes`` the URL falls
    under. Anything else has no known source map and returns ``None``.
    """
    path = get_url_path(source_url)

    if path.startswith(BUILD_PREFIX):
        relative = posixpath.join(BUILD_DIRECTORY, path[len(BUILD_PREFIX) :])
        return SourceMapLocation(
            directory=static_root_path,
            path=posixpath.normpath(relative) + SOURCEMAP_SUFFIX,
        )

    if path.startswith(PLUGINS_PREFIX):
        for route in plugin_routes:
            plugin_prefix = get_plugin_prefix(route.plugin_id)
            # match whole path segments so "acme" does not claim "acme-panel"
            if path == plugin_prefix or path.startswith(plugin_prefix + "/"):
                return SourceMapLocation(
                    directory=route.directory,
                    path=path[len(plugin_prefix) :] + SOURCEMAP_SUFFIX,
                    plugin_id=route.plugin_id,
                )

    return None
