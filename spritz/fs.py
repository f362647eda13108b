"""File systems for serving static files, with optional directory listing."""

from __future__ import annotations

import dataclasses
import itertools
import os
from typing import Any, Iterator, Optional

from spritz.path import clean_path


class _LocalFile:
    """A file or directory opened from a local directory tree."""

    def __init__(self, path: str) -> None:
        self.name = path
        self._stream = None if os.path.isdir(path) else open(path, "rb")
        self._entries: Optional[Iterator[str]] = None

    def read(self, size: int = -1) -> bytes:
        if self._stream is None:
            raise IsADirectoryError(f"{self.name} is a directory")
        return self._stream.read(size)

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        if self._stream is None:
            raise IsADirectoryError(f"{self.name} is a directory")
        return self._stream.seek(offset, whence)

    def stat(self) -> os.stat_result:
        return os.stat(self.name)

    def readdir(self, count: int) -> list[str]:
        """Entry names of the directory: all when ``count`` <= 0, else the next ``count``."""
        if self._stream is not None:
            raise NotADirectoryError(f"{self.name} is not a directory")
        if self._entries is None:
            self._entries = iter(sorted(os.listdir(self.name)))
        if count <= 0:
            return list(self._entries)
        return list(itertools.islice(self._entries, count))

    def close(self) -> None:
        if self._stream is not None:
            self._stream.close()

    def __enter__(self) -> "_LocalFile":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


@dataclasses.dataclass(frozen=True)
class DirFileSystem:
    """Files below a local root directory; paths never escape the root."""

    root: str

    def open(self, name: str) -> _LocalFile:
        """Open ``name`` relative to the root."""
        if (os.sep != "/" and os.sep in name) or "\x00" in name:
            raise ValueError("invalid or unsafe file path")
        relative = clean_path("/" + name).strip("/") or "."
        full = os.path.join(self.root or ".", *relative.split("/"))
        return _LocalFile(full)


@dataclasses.dataclass
class NeutralizedReaddirFile:
    """A file whose directory listing is always empty."""

    file: Any

    def readdir(self, count: int) -> None:
        """Directory listing is disabled."""
        return None

    def __getattr__(self, name: str) -> Any:
        if name == "file":
            raise AttributeError(name)
        return getattr(self.file, name)

    def __enter__(self) -> "NeutralizedReaddirFile":
        return self

    def __exit__(self, *exc: Any) -> None:
        close = getattr(self.file, "close", None)
        if callable(close):
            close()


@dataclasses.dataclass
class OnlyFilesFS:
    """A file system that hides directory listings of the one it wraps."""

    file_system: Any

    def open(self, name: str) -> NeutralizedReaddirFile:
        """Open ``name`` in the wrapped file system with listing disabled."""
        return NeutralizedReaddirFile(self.file_system.open(name))


@dataclasses.dataclass
class TemplateFileSystem:
    """Adapts a file system for reading template files."""

    file_system: Any

    def open(self, name: str) -> Any:
        """Open ``name`` in the wrapped file system."""
        return self.file_system.open(name)


def directory(root: str, list_directory: bool) -> Any:
    """A file system rooted at ``root``; directories are listed only if asked."""
    file_system = DirFileSystem(root)
    if list_directory:
        return file_system
    return OnlyFilesFS(file_system)