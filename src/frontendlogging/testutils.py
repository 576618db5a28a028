from __future__ import annotations

import errno
import json
import os
import threading
import time
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

__all__ = ["MemorySourceMapReader", "build_sourcemap", "encode_vlq"]

BASE64_DIGITS = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"

# (dst_line, dst_col, src_index, src_line, src_col, name_index), all 0-based
SourceMapping = Tuple[int, int, int, int, int, Optional[int]]


def encode_vlq(value: int) -> str:
    vlq = (value << 1) if value >= 0 else ((-value) << 1) | 1
    encoded = ""
    while True:
        digit = vlq & 0x1F
        vlq >>= 5
        if vlq:
            digit |= 0x20
        encoded += BASE64_DIGITS[digit]
        if not vlq:
            return encoded


def build_sourcemap(
    mappings: Iterable[SourceMapping],
    sources: Sequence[str],
    names: Sequence[str] = (),
    file: Optional[str] = None,
) -> bytes:
    """
    Builds the bytes of a version 3 source map from plain mapping tuples.
    """
    by_line: Dict[int, List[SourceMapping]] = {}
    for mapping in sorted(mappings, key=lambda m: (m[0], m[1])):
        by_line.setdefault(mapping[0], []).append(mapping)

    prev_src = prev_src_line = prev_src_col = prev_name = 0
    lines = []
    for line in range(max(by_line, default=-1) + 1):
        prev_dst_col = 0
        segments = []
        for _, dst_col, src, src_line, src_col, name in by_line.get(line, ()):
            segment = (
                encode_vlq(dst_col - prev_dst_col)
                + encode_vlq(src - prev_src)
                + encode_vlq(src_line - prev_src_line)
                + encode_vlq(src_col - prev_src_col)
            )
            prev_dst_col, prev_src, prev_src_line, prev_src_col = dst_col, src, src_line, src_col
            if name is not None:
                segment += encode_vlq(name - prev_name)
                prev_name = name
            segments.append(segment)
        lines.append(",".join(segments))

    data = {
        "version": 3,
        "sources": list(sources),
        "names": list(names),
        "mappings": ";".join(lines),
    }
    if file is not None:
        data["file"] = file
    return json.dumps(data).encode("utf-8")


class MemorySourceMapReader:
    """
    In-memory stand-in for :func:`~frontendlogging.sourcemaps.read_sourcemap_from_fs`.

    Files and errors are keyed by ``(directory, path)`` exactly as the store
    passes them. Every call is recorded in ``calls``.
    """

    def __init__(
        self,
        files: Optional[Dict[Tuple[str, str], bytes]] = None,
        errors: Optional[Dict[Tuple[str, str], Exception]] = None,
        delay: float = 0,
    ) -> None:
        self.files = dict(files or {})
        self.errors = dict(errors or {})
        self.delay = delay
        self.calls: List[Tuple[str, str]] = []
        self._lock = threading.Lock()

    def __call__(self, directory: str, path: str) -> bytes:
        with self._lock:
            self.calls.append((directory, path))
        if self.delay:
            time.sleep(self.delay)

        key = (directory, path)
        if key in self.errors:
            raise self.errors[key]
        try:
            return self.files[key]
        except KeyError:
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), path)
