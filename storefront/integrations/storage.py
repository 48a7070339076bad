"""Key-value backends for the locally persisted cart.

All backends expose ``get``/``set``/``delete`` on string values and raise
``StorageError`` on failure. Callers decide whether to swallow it.
"""
from __future__ import annotations

import importlib.util
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

from storefront.core.exceptions import StorageError
from storefront.logging_config import logger

REDIS_AVAILABLE: bool = importlib.util.find_spec("redis") is not None

if REDIS_AVAILABLE:
    import redis as redis  # type: ignore
else:
    redis = None  # type: ignore


class KeyValueStorage(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryKeyValueStorage:
    """Process-local storage; contents are lost on exit."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStorage:
    """Single JSON object file mapping keys to string values.

    Writes go through a temp file in the same directory and ``os.replace``,
    so readers never observe a partially written file.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict[str, Any]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except UnicodeDecodeError:
            logger.warning("Ignoring corrupt storage file %s", self.path)
            return {}
        except OSError as exc:
            raise StorageError(f"Cannot read {self.path}: {exc}") from exc
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring corrupt storage file %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict[str, Any]) -> None:
        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(data, fh, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except BaseException:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
                raise
        except OSError as exc:
            raise StorageError(f"Cannot write {self.path}: {exc}") from exc

    def get(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)


class RedisKeyValueStorage:
    """Redis-backed storage with in-memory fallback when Redis is unreachable."""

    def __init__(self, redis_url: str | None = None, *, namespace: str = "storefront") -> None:
        self._redis_url = redis_url or os.getenv("REDIS_URL")
        self._namespace = namespace
        self._memory = MemoryKeyValueStorage()
        self._client = self._init_client()

    @property
    def is_redis(self) -> bool:
        return self._client is not None

    def _init_client(self):
        if not REDIS_AVAILABLE:
            logger.warning("redis package is unavailable; cart uses in-memory fallback")
            return None

        if not self._redis_url:
            logger.warning("REDIS_URL is not set; cart uses in-memory fallback")
            return None

        try:
            client = redis.from_url(
                self._redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
            client.ping()
            logger.info("Redis cart storage enabled")
            return client
        except Exception as exc:
            logger.warning("Redis cart init failed, fallback to in-memory: %s", exc)
            return None

    def _switch_to_memory_fallback(self, reason: Exception | str) -> None:
        logger.warning("Redis cart fallback to memory mode: %s", reason)
        self._client = None

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    def get(self, key: str) -> str | None:
        if not self._client:
            return self._memory.get(key)
        try:
            value = self._client.get(self._key(key))
        except Exception as exc:
            self._switch_to_memory_fallback(exc)
            return self._memory.get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        if self._client:
            try:
                self._client.set(self._key(key), value)
                return
            except Exception as exc:
                self._switch_to_memory_fallback(exc)
        self._memory.set(key, value)

    def delete(self, key: str) -> None:
        if self._client:
            try:
                self._client.delete(self._key(key))
                return
            except Exception as exc:
                self._switch_to_memory_fallback(exc)
        self._memory.delete(key)


def create_storage(kind: str, *, path: str | None = None, redis_url: str | None = None) -> KeyValueStorage:
    """Build a storage backend by name: ``memory``, ``file`` or ``redis``."""
    if kind == "memory":
        return MemoryKeyValueStorage()
    if kind == "file":
        if not path:
            raise StorageError("File storage requires a path")
        return JsonFileKeyValueStorage(path)
    if kind == "redis":
        return RedisKeyValueStorage(redis_url)
    raise StorageError(f"Unknown storage backend: {kind}")
