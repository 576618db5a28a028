from .exceptions import BadSource, InvalidSourceURL, UnparseableSourcemap
from .location import SourceMapLocation, guess_sourcemap_location
from .processor import FrontendStacktraceProcessor, format_stacktrace, resolve_source_location
from .readers import ReadSourceMapFn, read_sourcemap_from_fs
from .store import CacheStatus, SourceMap, SourceMapStore

__all__ = [
    "BadSource",
    "CacheStatus",
    "FrontendStacktraceProcessor",
    "InvalidSourceURL",
    "ReadSourceMapFn",
    "SourceMap",
    "SourceMapLocation",
    "SourceMapStore",
    "UnparseableSourcemap",
    "format_stacktrace",
    "guess_sourcemap_location",
    "read_sourcemap_from_fs",
    "resolve_source_location",
]
