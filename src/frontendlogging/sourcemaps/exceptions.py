from __future__ import annotations

from typing import Any, Dict

from frontendlogging.models import EventError


class BadSource(Exception):
    """
    Base class for failures while locating, reading or parsing a source map.

    ``data`` is an event error dict, its ``type`` is one of the
    :class:`~frontendlogging.models.EventError` codes.
    """

    error_type = EventError.UNKNOWN_ERROR

    def __init__(self, data: Dict[str, Any] | None = None) -> None:
        if data is None:
            data = {}
        data.setdefault("type", self.error_type)
        super().__init__(data["type"])
        self.data = data


class InvalidSourceURL(BadSource):
    error_type = EventError.JS_INVALID_URL


class UnparseableSourcemap(BadSource):
    error_type = EventError.JS_INVALID_SOURCEMAP
