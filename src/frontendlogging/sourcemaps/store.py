from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Optional

import sentry_sdk
import sourcemap
from django.utils.encoding import force_str

from frontendlogging.conf import get_option
from frontendlogging.plugins import PluginRouteRegistry, RouteSource
from frontendlogging.utils import metrics

from .exceptions import UnparseableSourcemap
from .location import SOURCEMAP_SUFFIX, SourceMapLocation, guess_sourcemap_location
from .readers import ReadSourceMapFn, clean_path, read_sourcemap_from_fs

if TYPE_CHECKING:
    from sourcemap.objects import SourceMapIndex

__all__ = ["CacheStatus", "CacheEntry", "SourceMap", "SourceMapStore"]

logger = logging.getLogger(__name__)


class CacheStatus(enum.Enum):
    NOT_YET_RESOLVED = "not_yet_resolved"
    # no map could be located for the URL, or the map file does not exist
    NOT_AVAILABLE = "not_available"
    FOUND = "found"


@dataclass(frozen=True)
class SourceMap:
    index: SourceMapIndex
    url: str
    plugin_id: Optional[str] = None


@dataclass(frozen=True)
class CacheEntry:
    status: CacheStatus
    sourcemap: Optional[SourceMap] = None


NOT_AVAILABLE = CacheEntry(CacheStatus.NOT_AVAILABLE)


def parse_sourcemap(url: str, body: bytes) -> SourceMapIndex:
    try:
        return sourcemap.loads(force_str(body))
    except Exception as exc:
        logger.debug(str(exc), exc_info=True)
        raise UnparseableSourcemap({"url": url, "reason": str(exc)}) from exc


class SourceMapStore:
    """
    Loads and caches the source maps of built frontend assets.

    Entries are keyed by the exact source URL reported in a frame and are
    never evicted: a map that was found stays cached, and so does the fact
    that no map exists for a URL. Read failures other than a missing file and
    unparseable maps are raised and leave no entry behind, so the next lookup
    tries again.

    A single lock guards the whole lookup-or-populate sequence, which means
    every map is read and parsed at most once per store.
    """

    def __init__(
        self,
        static_root_path: Optional[str] = None,
        plugin_routes: Optional[RouteSource] = None,
        read_sourcemap: Optional[ReadSourceMapFn] = None,
    ) -> None:
        if static_root_path is None:
            static_root_path = get_option("FRONTEND_STATIC_ROOT_PATH")
        if plugin_routes is None:
            plugin_routes = PluginRouteRegistry.from_settings()
        elif not isinstance(plugin_routes, PluginRouteRegistry):
            plugin_routes = PluginRouteRegistry(plugin_routes)

        self.static_root_path = static_root_path
        # kept by reference, routes are read again on every location lookup
        self.plugin_routes = plugin_routes
        self.read_sourcemap = read_sourcemap or read_sourcemap_from_fs

        self._cache: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def __contains__(self, source_url: str) -> bool:
        with self._lock:
            return source_url in self._cache

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def get_status(self, source_url: str) -> CacheStatus:
        with self._lock:
            entry = self._cache.get(source_url)
        if entry is None:
            return CacheStatus.NOT_YET_RESOLVED
        return entry.status

    def guess_sourcemap_location(self, source_url: str) -> Optional[SourceMapLocation]:
        return guess_sourcemap_location(source_url, self.static_root_path, self.plugin_routes)

    def get_sourcemap(self, source_url: str) -> Optional[SourceMap]:
        with self._lock:
            entry = self._cache.get(source_url)
            if entry is not None:
                metrics.incr("sourcemaps.cache.hit", tags={"status": entry.status.value})
                return entry.sourcemap

            metrics.incr("sourcemaps.cache.miss")
            entry = self._load(source_url)
            self._cache[source_url] = entry
            return entry.sourcemap

    @metrics.wraps("sourcemaps.load")
    def _load(self, source_url: str) -> CacheEntry:
        location = self.guess_sourcemap_location(source_url)
        if location is None:
            logger.debug("No sourcemap location known for %r", source_url)
            return NOT_AVAILABLE

        path = clean_path(location.path)
        with sentry_sdk.start_span(op="SourceMapStore.read_sourcemap"):
            try:
                body = self.read_sourcemap(location.directory, path)
            except FileNotFoundError:
                logger.debug(
                    "No sourcemap at %r in %r for %r", path, location.directory, source_url
                )
                return NOT_AVAILABLE
            except Exception:
                logger.info(
                    "sourcemaps.read_failed",
                    extra={"url": source_url, "directory": location.directory, "path": path},
                )
                raise

        sourcemap_url = source_url + SOURCEMAP_SUFFIX
        with sentry_sdk.start_span(op="SourceMapStore.parse_sourcemap"):
            with metrics.timer("sourcemaps.parse"):
                index = parse_sourcemap(sourcemap_url, body)

        logger.debug("Loaded sourcemap %r for %r", sourcemap_url, source_url)
        return CacheEntry(
            CacheStatus.FOUND,
            SourceMap(index=index, url=sourcemap_url, plugin_id=location.plugin_id),
        )
