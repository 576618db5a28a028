from __future__ import annotations

import posixpath
from typing import Callable

from django.core.files.storage import FileSystemStorage

# (directory, path) -> bytes. Must raise ``FileNotFoundError`` when there is
# no file at ``path``; any other error means the read failed.
ReadSourceMapFn = Callable[[str, str], bytes]


def clean_path(path: str) -> str:
    """
    Roots ``path`` at ``/`` and collapses ``.`` and ``..`` segments, so the
    result can never point above the directory it is joined to.
    """
    return posixpath.normpath("/" + path.lstrip("/"))


def read_sourcemap_from_fs(directory: str, path: str) -> bytes:
    storage = FileSystemStorage(location=directory)
    # storage paths are relative to its location
    name = clean_path(path).lstrip("/")
    with storage.open(name, "rb") as fp:
        return fp.read()
