"""Configuration properties, shared constants and small string helpers."""

from __future__ import annotations

import os
import string
import threading
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

VERSION = 1
MAGIC = "PIXELS"

DEFAULT_HDFS_BLOCK_SIZE = 256 * 1024 * 1024
HDFS_BUFFER_SIZE = 8 * 1024 * 1024
LOCAL_BUFFER_SIZE = 8 * 1024 * 1024
S3_BUFFER_SIZE = 8 * 1024 * 1024
REDIS_BUFFER_SIZE = 8 * 1024 * 1024
GCS_BUFFER_SIZE = 8 * 1024 * 1024

MIN_REPEAT = 3
MAX_SCOPE = 512
MAX_SHORT_REPEAT_LENGTH = 10
DICT_KEY_SIZE_THRESHOLD = 0.1
INIT_DICT_SIZE = 4096

LAYOUT_VERSION_LITERAL = "layout_version"
CACHE_VERSION_LITERAL = "cache_version"
CACHE_COORDINATOR_LITERAL = "coordinator"
CACHE_NODE_STATUS_LITERAL = "node_"
CACHE_LOCATION_LITERAL = "location_"
MAX_BLOCK_ID_LEN = 20480

AI_LOCK_PATH_PREFIX = "/pixels_ai_lock/"
LOCAL_FS_ID_KEY = "pixels_storage_local_id"
LOCAL_FS_META_PREFIX = "pixels_storage_local_meta:"
S3_ID_KEY = "pixels_storage_s3_id"
S3_META_PREFIX = "pixels_storage_s3_meta:"
MINIO_ID_KEY = "pixels_storage_minio_id"
MINIO_META_PREFIX = "pixels_storage_minio_meta:"
REDIS_ID_KEY = "pixels_storage_redis_id"
REDIS_META_PREFIX = "pixels_storage_redis_meta:"
GCS_ID_KEY = "pixels_storage_gcs_id"
GCS_META_PREFIX = "pixels_storage_gcs_meta:"

PROPERTIES_FILE_NAME = "pixels-cxx.properties"

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


class InvalidArgumentError(ValueError):
    """Raised when an argument or a configured value is not acceptable."""


def parse_properties(text: str) -> dict[str, str]:
    """Parse ``key=value`` lines; lines starting with ``#`` or lacking ``=`` are ignored."""
    properties: dict[str, str] = {}
    for line in text.splitlines():
        if "=" in line and not line.startswith("#"):
            key, _, value = line.partition("=")
            properties[key] = value
    return properties


def icompare(a: str, b: str) -> bool:
    """Compare two strings for equality, ignoring ASCII case."""
    return len(a) == len(b) and a.translate(_ASCII_LOWER) == b.translate(_ASCII_LOWER)


def _with_trailing_slash(path: str) -> str:
    if path and not path.endswith("/"):
        return path + "/"
    return path


class ConfigFactory:
    """A set of configuration properties, usually loaded from ``$PIXELS_HOME``."""

    _instance: Optional["ConfigFactory"] = None
    _instance_lock = threading.Lock()

    def __init__(self, properties: Optional[Mapping[str, str]] = None,
                 pixels_home: str = "", pixels_src: str = "") -> None:
        self._properties = dict(properties or {})
        self.pixels_home = _with_trailing_slash(pixels_home)
        self.pixels_src = _with_trailing_slash(pixels_src)

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None) -> "ConfigFactory":
        """Build a configuration from ``PIXELS_SRC``, ``PIXELS_HOME`` and the properties file."""
        env = os.environ if environ is None else environ
        pixels_src = env.get("PIXELS_SRC")
        if pixels_src is None:
            raise InvalidArgumentError("The environment variable 'PIXELS_SRC' is not set.")
        pixels_home = env.get("PIXELS_HOME")
        if pixels_home is None:
            raise InvalidArgumentError("The environment variable 'PIXELS_HOME' is not set.")
        home = _with_trailing_slash(pixels_home)
        try:
            text = Path(home + PROPERTIES_FILE_NAME).read_text()
        except OSError:
            text = ""
        return cls(parse_properties(text), home, pixels_src)

    @classmethod
    def instance(cls) -> "ConfigFactory":
        """Return the process-wide configuration, loading it from the environment once."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls.from_environment()
            return cls._instance

    @classmethod
    def set_instance(cls, config: Optional["ConfigFactory"]) -> None:
        """Install ``config`` as the process-wide configuration (``None`` clears it)."""
        with cls._instance_lock:
            cls._instance = config

    @property
    def properties(self) -> Mapping[str, str]:
        return MappingProxyType(self._properties)

    def get_property(self, key: str) -> str:
        try:
            return self._properties[key]
        except KeyError:
            raise InvalidArgumentError(f"no key found: {key}") from None

    def bool_check_property(self, key: str) -> bool:
        value = self.get_property(key)
        if value == "true":
            return True
        if value == "false":
            return False
        raise InvalidArgumentError(f"the value of {key} is not a boolean: {value!r}")

    def format_properties(self) -> str:
        """Return every property as a ``key value`` line, sorted by key."""
        return "\n".join(f"{key} {value}" for key, value in sorted(self._properties.items()))