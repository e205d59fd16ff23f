"""Content-addressed cache of analysis results.

A document is identified by the SHA-256 digest of its raw bytes. Once a
digest has a readable stored result it is never recomputed or
overwritten: stores are set-if-absent, so racing writers converge on the
first value and readers never see a partially written entry.
"""

import hashlib
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import ValidationError

from models.responses import AnalysisResult
from services.errors import CacheError

logger = logging.getLogger(__name__)

KEY_PREFIX = "cv_analysis_"


def content_digest(data: bytes) -> str:
    """Hex SHA-256 of the raw document bytes."""
    return hashlib.sha256(data).hexdigest()


class CacheBackend(ABC):
    """Durable key-value storage for serialized results."""

    name: str = ""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key is absent."""

    @abstractmethod
    def add(self, key: str, value: str) -> bool:
        """Store value only if key is absent. Returns True if this call stored it."""

    @abstractmethod
    def replace(self, key: str, value: str) -> None:
        """Unconditionally store value under key. Only used to repair corrupt entries."""


class InMemoryCacheBackend(CacheBackend):
    name = "memory"

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def add(self, key: str, value: str) -> bool:
        with self._lock:
            if key in self._data:
                return False
            self._data[key] = value
            return True

    def replace(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


class FileCacheBackend(CacheBackend):
    """One JSON file per key under ``directory``.

    Values are written to a temp file first and published with os.link,
    which fails if the target exists. Publication is atomic and first
    writer wins.
    """

    name = "file"

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> str | None:
        try:
            return self._path(key).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CacheError(f"Could not read cache entry {key}: {e}") from e

    def add(self, key: str, value: str) -> bool:
        target = self._path(key)
        if target.exists():
            return False
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".tmp-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                    f.flush()
                    os.fsync(f.fileno())
                os.link(tmp_name, target)
            finally:
                os.unlink(tmp_name)
        except FileExistsError:
            return False
        except OSError as e:
            raise CacheError(f"Could not write cache entry {key}: {e}") from e
        return True

    def replace(self, key: str, value: str) -> None:
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".tmp-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, self._path(key))
            except BaseException:
                os.unlink(tmp_name)
                raise
        except OSError as e:
            raise CacheError(f"Could not replace cache entry {key}: {e}") from e


class ResultCache:
    """AnalysisResult cache keyed by content digest."""

    def __init__(self, backend: CacheBackend, prefix: str = KEY_PREFIX) -> None:
        self.backend = backend
        self.prefix = prefix

    def _key(self, content_hash: str) -> str:
        return f"{self.prefix}{content_hash}"

    def lookup(self, content_hash: str) -> AnalysisResult | None:
        raw = self.backend.get(self._key(content_hash))
        if raw is None:
            return None
        try:
            return AnalysisResult.model_validate_json(raw)
        except ValidationError as e:
            logger.error("Corrupt cache entry for %s, treating as miss: %s", content_hash[:16], e)
            return None

    def store(self, content_hash: str, result: AnalysisResult) -> AnalysisResult:
        """Store ``result`` under ``content_hash`` unless one is already there.

        Returns the value that ends up stored. A different result under an
        existing hash is not overwritten (first writer wins). An existing
        entry that no longer parses is replaced, so a corrupt file cannot
        pin a digest as uncacheable.
        """
        key = self._key(content_hash)
        value = result.model_dump_json()
        if self.backend.add(key, value):
            logger.info("Cached analysis %s", content_hash[:16])
            return result

        existing = self.lookup(content_hash)
        if existing is None:
            logger.warning("Replacing unreadable cache entry %s", content_hash[:16])
            self.backend.replace(key, value)
            return result
        if existing != result:
            logger.warning(
                "Conflicting result for cached digest %s; keeping the first one",
                content_hash[:16],
            )
        return existing


def create_cache(settings) -> ResultCache:
    """Build the ResultCache selected by ``settings.cache_backend``."""
    if settings.cache_backend == "memory":
        backend: CacheBackend = InMemoryCacheBackend()
    elif settings.cache_backend == "file":
        backend = FileCacheBackend(settings.cache_dir)
    else:
        raise ValueError(f"Unknown cache backend: {settings.cache_backend}")
    logger.info("Result cache backend: %s", backend.name)
    return ResultCache(backend)
