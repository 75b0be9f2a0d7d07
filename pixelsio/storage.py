"""Storage schemes, file status, local paths and the storage registry."""

from __future__ import annotations

import functools
import os
import threading
from dataclasses import dataclass
from enum import Enum
from typing import IO, Optional, Union

from pixelsio.config import InvalidArgumentError
from pixelsio.randomaccess import AsyncRandomAccessFile

_SEPARATOR = "://"


class Scheme(Enum):
    """The storage systems a path may refer to."""

    HDFS = "hdfs"
    FILE = "file"
    S3 = "s3"
    MINIO = "minio"
    REDIS = "redis"
    GCS = "gcs"
    MOCK = "mock"

    @classmethod
    def from_name(cls, value: str) -> "Scheme":
        """Look up a scheme by name, ignoring case."""
        try:
            return cls(value.lower())
        except ValueError:
            raise InvalidArgumentError(f"unknown storage scheme: {value}") from None

    @classmethod
    def from_path(cls, schemed_path: str) -> "Scheme":
        """Return the scheme of a path of the form ``scheme://...``."""
        scheme, separator, _ = schemed_path.partition(_SEPARATOR)
        if not separator:
            raise InvalidArgumentError("schemed path doesn't contain separator.")
        return cls.from_name(scheme)

    @classmethod
    def is_valid(cls, value: str) -> bool:
        """Return True when ``value`` is exactly the name of a scheme."""
        return value in {scheme.value for scheme in cls}


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class Status:
    """The status of a file or directory; statuses compare by path."""

    path: str = ""
    length: int = 0
    is_dir: bool = False
    replication: int = 0

    def name(self) -> str:
        """The last component of the path."""
        return self.path.rpartition("/")[2]

    def is_file(self) -> bool:
        return not self.is_dir

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Status):
            return NotImplemented
        return self.path == other.path

    def __lt__(self, other: "Status") -> bool:
        if not isinstance(other, Status):
            return NotImplemented
        return self.path < other.path

    def __hash__(self) -> int:
        return hash(self.path)

    def __str__(self) -> str:
        text = f"Status{{path={self.path}; isDirectory={'true' if self.is_dir else 'false'}"
        if not self.is_dir:
            text += f"; length={self.length}"
        return text + "}"


class FilePath:
    """A local path, given either as ``file:///...`` or as an absolute path."""

    def __init__(self, path: str) -> None:
        if not path:
            raise InvalidArgumentError("path is null")
        self.valid = False
        self.real_path = ""
        self.is_dir = False
        if path.startswith("file:///"):
            self.valid = True
            self.real_path = path[path.find(_SEPARATOR) + len(_SEPARATOR):]
        elif path.startswith("/"):
            self.valid = True
            self.real_path = path
        if self.valid:
            self.is_dir = os.path.isdir(self.real_path)

    def __str__(self) -> str:
        return self.real_path if self.valid else ""

    def with_prefix(self, storage: "LocalFS") -> str:
        """The path with the storage's scheme prefix, or "" when invalid."""
        if not self.valid:
            return ""
        return storage.ensure_scheme_prefix(self.real_path)


class LocalFS:
    """The local file system."""

    SCHEME_PREFIX = "file://"

    @property
    def scheme(self) -> Scheme:
        return Scheme.FILE

    def ensure_scheme_prefix(self, path: str) -> str:
        if path.startswith(self.SCHEME_PREFIX):
            return path
        if _SEPARATOR in path:
            raise InvalidArgumentError(
                f"Path '{path}' already has a different scheme prefix than '{self.SCHEME_PREFIX}'.")
        return self.SCHEME_PREFIX + path

    def open_raf(self, path: str) -> AsyncRandomAccessFile:
        """Open ``path`` for random access reads."""
        return AsyncRandomAccessFile(path)

    def list_paths(self, path: str) -> list[str]:
        """List the files of a directory, or the file itself, with the scheme prefix."""
        file_path = FilePath(path)
        if not file_path.valid:
            raise InvalidArgumentError(f"Path {path} is not a valid local fs path.")
        real = file_path.real_path
        if os.path.isdir(real):
            entries = sorted(os.path.join(real, name) for name in os.listdir(real))
        elif os.path.exists(real):
            entries = [real]
        else:
            entries = []
        if not entries:
            raise FileNotFoundError(f"Failed to list files in path: {real}.")
        return [self.ensure_scheme_prefix(entry) for entry in entries]

    def open(self, path: str) -> IO[str]:
        """Open a local file for reading text."""
        file_path = FilePath(path)
        if not file_path.valid:
            raise InvalidArgumentError(f"Path '{path}' is not a valid local fs path.")
        real = file_path.real_path
        if os.path.isdir(real):
            raise IsADirectoryError(f"Path '{real}' is a directory, it must be a file.")
        if not os.path.exists(real):
            raise FileNotFoundError(f"File '{real}' doesn't exists.")
        return open(real)

    def close(self) -> None:
        """Release resources; the local file system holds none."""


Storage = LocalFS


class StorageFactory:
    """Creates and caches one storage per enabled scheme."""

    _instance: Optional["StorageFactory"] = None
    _instance_lock = threading.Lock()

    def __init__(self) -> None:
        self._enabled = {Scheme.FILE}
        self._storages: dict[Scheme, Storage] = {}
        self._lock = threading.RLock()

    @classmethod
    def instance(cls) -> "StorageFactory":
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    def enabled_schemes(self) -> list[Scheme]:
        return sorted(self._enabled, key=lambda scheme: list(Scheme).index(scheme))

    def is_enabled(self, scheme: Scheme) -> bool:
        return scheme in self._enabled

    def _get_by_scheme(self, scheme: Scheme) -> Storage:
        if scheme not in self._enabled:
            raise InvalidArgumentError(f"storage scheme {scheme.value} is not enabled.")
        with self._lock:
            storage = self._storages.get(scheme)
            if storage is None:
                if scheme is not Scheme.FILE:
                    raise InvalidArgumentError(f"storage scheme {scheme.value} is not supported.")
                storage = LocalFS()
                self._storages[scheme] = storage
            return storage

    def get_storage(self, scheme_or_path: Union[Scheme, str]) -> Storage:
        """Return the storage for a scheme, a scheme name or a scheme-prefixed path."""
        if isinstance(scheme_or_path, Scheme):
            return self._get_by_scheme(scheme_or_path)
        try:
            if _SEPARATOR in scheme_or_path:
                scheme = Scheme.from_path(scheme_or_path)
            else:
                scheme = Scheme.from_name(scheme_or_path)
            return self._get_by_scheme(scheme)
        except InvalidArgumentError:
            raise InvalidArgumentError(
                f"Invalid storage scheme or path: {scheme_or_path}") from None

    def close_all(self) -> None:
        with self._lock:
            for storage in self._storages.values():
                storage.close()

    def reload(self, scheme: Scheme) -> None:
        """Close and recreate the storage of ``scheme``."""
        with self._lock:
            old = self._storages.pop(scheme, None)
            if old is not None:
                old.close()
            self._get_by_scheme(scheme)

    def reload_all(self) -> None:
        for scheme in self.enabled_schemes():
            self.reload(scheme)