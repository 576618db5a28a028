from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

CORE_MODULE = "core"
UNKNOWN_FUNCTION = "?"


@dataclass(frozen=True)
class ReportedFrame:
    """
    A frame as reported by the browser SDK. ``filename`` is the URL of the
    built asset; ``lineno`` is 1-based and ``colno`` is 0-based, as the
    source map positions they are resolved with.
    """

    filename: str
    lineno: Optional[int] = None
    colno: Optional[int] = None
    function: Optional[str] = None
    module: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ReportedFrame:
        return cls(
            filename=data.get("filename") or data.get("abs_path") or "",
            lineno=data.get("lineno"),
            colno=data.get("colno"),
            function=data.get("function"),
            module=data.get("module"),
        )


@dataclass(frozen=True)
class ResolvedFrame:
    filename: str
    lineno: int
    colno: int
    function: str
    module: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "lineno": self.lineno,
            "colno": self.colno,
            "function": self.function,
            "module": self.module,
        }
