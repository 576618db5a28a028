from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence, Set, Tuple
from urllib.parse import urljoin

from django.core.exceptions import SuspiciousFileOperation

from frontendlogging.interfaces.stacktrace import (
    CORE_MODULE,
    UNKNOWN_FUNCTION,
    ReportedFrame,
    ResolvedFrame,
)
from frontendlogging.models import EventError
from frontendlogging.utils import metrics

from .exceptions import BadSource
from .location import SOURCEMAP_SUFFIX

if TYPE_CHECKING:
    from .store import SourceMapStore

__all__ = [
    "FrontendStacktraceProcessor",
    "format_frame",
    "format_stacktrace",
    "resolve_source_location",
]

logger = logging.getLogger(__name__)


def resolve_source_location(store: SourceMapStore, frame: ReportedFrame) -> Optional[ResolvedFrame]:
    """
    Maps ``frame`` back to its position in the original source.

    Returns ``None`` when there is no source map for the frame's file or the
    map has nothing at the frame's position; the caller should keep the
    reported frame as is. Errors raised while loading the map propagate.
    """
    smap = store.get_sourcemap(frame.filename)
    if smap is None:
        return None

    if frame.lineno is None or frame.colno is None or frame.lineno < 1 or frame.colno < 0:
        return None

    try:
        # Lines are 1-indexed in frames but 0-indexed in the sourcemap index.
        # Columns are 0-indexed in both.
        token = smap.index.lookup(line=frame.lineno - 1, column=frame.colno)
    except IndexError:
        return None

    if token.src is None:
        return None

    return ResolvedFrame(
        filename=urljoin(smap.url, token.src),
        lineno=token.src_line + 1,
        colno=token.src_col,
        function=token.name or UNKNOWN_FUNCTION,
        module=smap.plugin_id or CORE_MODULE,
    )


def format_frame(frame: Mapping[str, Any]) -> str:
    module = frame.get("module")
    module = f"{module}|" if module else ""
    return "\n  at {} ({}{}:{}:{})".format(
        frame.get("function") or "",
        module,
        frame.get("filename") or "",
        frame.get("lineno") or 0,
        frame.get("colno") or 0,
    )


def format_stacktrace(exc_type: str, value: str, frames: Sequence[Mapping[str, Any]]) -> str:
    """
    Renders an exception and its frames the way they are written to the
    frontend log, e.g.::

        TypeError: undefined is not a function
          at loadDashboard (core|webpack:///./public/app/core/utils.ts:10:3)
    """
    return f"{exc_type}: {value}" + "".join(format_frame(frame) for frame in frames)


class FrontendStacktraceProcessor:
    """
    Applies source maps to the frames of a reported frontend exception.

    Frames that can't be resolved are kept exactly as reported. Failures
    while loading a source map are logged and recorded as event errors
    instead of aborting the rest of the stacktrace.
    """

    def __init__(self, store: SourceMapStore) -> None:
        self.store = store
        self.sourcemaps_touched: Set[str] = set()

    def process_frame(
        self, frame: Mapping[str, Any]
    ) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
        errors: List[Dict[str, Any]] = []
        reported = ReportedFrame.from_dict(frame)

        # can't demangle if there's no filename
        if not reported.filename:
            return dict(frame), errors

        if reported.lineno is None or reported.colno is None:
            errors.append(
                {
                    "type": EventError.JS_MISSING_ROW_OR_COLUMN,
                    "url": reported.filename,
                    "row": reported.lineno,
                    "column": reported.colno,
                }
            )
            return dict(frame), errors

        if reported.lineno <= 0 or reported.colno < 0:
            errors.append(
                {
                    "type": EventError.JS_INVALID_ROW_OR_COLUMN,
                    "url": reported.filename,
                    "row": reported.lineno,
                    "column": reported.colno,
                }
            )
            return dict(frame), errors

        try:
            resolved = resolve_source_location(self.store, reported)
        except BadSource as exc:
            logger.info(
                "sourcemaps.resolve_failed", extra={"url": reported.filename}, exc_info=True
            )
            errors.append(dict(exc.data))
            return dict(frame), errors
        except SuspiciousFileOperation as exc:
            logger.warning("sourcemaps.suspicious_location", extra={"url": reported.filename})
            errors.append(
                {
                    "type": EventError.JS_INVALID_SOURCEMAP_LOCATION,
                    "url": reported.filename,
                    "reason": str(exc),
                }
            )
            return dict(frame), errors
        except OSError as exc:
            # still better to report the minified location than nothing at all
            logger.error(
                "sourcemaps.read_failed", extra={"url": reported.filename}, exc_info=True
            )
            errors.append(
                {
                    "type": EventError.JS_GENERIC_FETCH_ERROR,
                    "url": reported.filename,
                    "reason": str(exc),
                }
            )
            return dict(frame), errors

        if resolved is None:
            return dict(frame), errors

        sourcemap_url = reported.filename + SOURCEMAP_SUFFIX
        self.sourcemaps_touched.add(sourcemap_url)
        logger.debug(
            "Mapping compressed source %r to mapping in %r", reported.filename, resolved.filename
        )

        new_frame = dict(frame)
        new_frame.update(resolved.to_dict())
        new_frame["data"] = dict(frame.get("data") or {}, sourcemap=sourcemap_url)
        return new_frame, errors

    def process_stacktrace(
        self, frames: Sequence[Mapping[str, Any]]
    ) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
        new_frames = []
        all_errors = []
        for frame in frames:
            new_frame, errors = self.process_frame(frame)
            new_frames.append(new_frame)
            all_errors.extend(errors)
        return new_frames, all_errors

    def format_exception(
        self, exc_type: str, value: str, frames: Sequence[Mapping[str, Any]]
    ) -> str:
        new_frames, _ = self.process_stacktrace(frames)
        return format_stacktrace(exc_type, value, new_frames)

    def close(self) -> None:
        if self.sourcemaps_touched:
            metrics.incr("sourcemaps.processed", amount=len(self.sourcemaps_touched))
