"""Versioned blob stores backing the forecast cache.

Every store offers ``get`` and a conditional ``put``: a write succeeds only
when the caller's expected revision matches the stored one (``None`` meaning
"must not exist yet"), otherwise it raises CacheWriteConflict.
"""

from __future__ import annotations

import asyncio
import base64
import hashlib
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from marineboard._http import AsyncTransport
from marineboard.exceptions import (
    CacheWriteConflict,
    MalformedResponse,
    SourceUnavailable,
    UpstreamHTTPError,
)


@dataclass(frozen=True)
class StoredBlob:
    data: bytes
    revision: str


def content_revision(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


class BlobStore(ABC):
    """Opaque key/value blob store with optimistic concurrency."""

    @abstractmethod
    async def get(self, key: str) -> StoredBlob | None: ...

    @abstractmethod
    async def put(self, key: str, data: bytes, expected_revision: str | None) -> str:
        """Write *data* if the stored revision is *expected_revision*; return the new one."""

    async def close(self) -> None:
        return None


class MemoryBlobStore(BlobStore):
    """In-process store; revisions are a per-key write counter."""

    def __init__(self) -> None:
        self._blobs: dict[str, StoredBlob] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> StoredBlob | None:
        return self._blobs.get(key)

    async def put(self, key: str, data: bytes, expected_revision: str | None) -> str:
        async with self._lock:
            current = self._blobs.get(key)
            current_revision = current.revision if current else None
            if current_revision != expected_revision:
                raise CacheWriteConflict(
                    f"{key}: expected revision {expected_revision}, found {current_revision}",
                )
            revision = str(int(current_revision or 0) + 1)
            self._blobs[key] = StoredBlob(data=data, revision=revision)
            return revision


class FileBlobStore(BlobStore):
    """Stores each key as a file; the revision is the content's sha256."""

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self._dir = Path(directory)
        self._lock = threading.Lock()

    def _path(self, key: str) -> Path:
        return self._dir / key

    def _read(self, key: str) -> StoredBlob | None:
        try:
            data = self._path(key).read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise SourceUnavailable(f"Cannot read {key} from {self._dir}: {exc}") from exc
        return StoredBlob(data=data, revision=content_revision(data))

    def _write(self, key: str, data: bytes, expected_revision: str | None) -> str:
        with self._lock:
            current = self._read(key)
            current_revision = current.revision if current else None
            if current_revision != expected_revision:
                raise CacheWriteConflict(
                    f"{key}: expected revision {expected_revision}, found {current_revision}",
                )
            path = self._path(key)
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
            except OSError as exc:
                raise SourceUnavailable(f"Cannot write {key} to {self._dir}: {exc}") from exc
            try:
                with os.fdopen(fd, "wb") as fh:
                    fh.write(data)
                os.replace(tmp, path)
            except OSError as exc:
                os.unlink(tmp)
                raise SourceUnavailable(f"Cannot write {key} to {self._dir}: {exc}") from exc
            except BaseException:
                os.unlink(tmp)
                raise
            return content_revision(data)

    async def get(self, key: str) -> StoredBlob | None:
        return await asyncio.to_thread(self._read, key)

    async def put(self, key: str, data: bytes, expected_revision: str | None) -> str:
        return await asyncio.to_thread(self._write, key, data, expected_revision)


class GitHubBlobStore(BlobStore):
    """Stores blobs as files in a GitHub repository via the contents API.

    The git blob sha is the revision, so GitHub itself rejects stale writes.
    """

    def __init__(
        self,
        repo: str,
        token: str | None = None,
        branch: str = "main",
        base_url: str = "https://api.github.com",
        message: str = "Automated wave forecast update",
        timeout: float = 10.0,
        transport: AsyncTransport | None = None,
    ) -> None:
        headers = {"Accept": "application/vnd.github+json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._transport = transport or AsyncTransport(
            base_url=base_url, timeout=timeout, headers=headers,
        )
        self._repo = repo
        self._branch = branch
        self._message = message

    def _endpoint(self, key: str) -> str:
        return f"/repos/{self._repo}/contents/{key}"

    async def get(self, key: str) -> StoredBlob | None:
        try:
            payload = await self._transport.get_json(self._endpoint(key), [("ref", self._branch)])
        except UpstreamHTTPError as exc:
            if exc.status_code == 404:
                return None
            raise
        try:
            data = base64.b64decode(payload["content"])
            return StoredBlob(data=data, revision=payload["sha"])
        except (KeyError, TypeError, ValueError) as exc:
            raise MalformedResponse(f"Unexpected contents payload for {key}: {exc}") from exc

    async def put(self, key: str, data: bytes, expected_revision: str | None) -> str:
        body = {
            "message": self._message,
            "content": base64.b64encode(data).decode("ascii"),
            "branch": self._branch,
        }
        if expected_revision is not None:
            body["sha"] = expected_revision
        try:
            payload = await self._transport.put_json(self._endpoint(key), body)
        except UpstreamHTTPError as exc:
            if exc.status_code in (409, 422):
                raise CacheWriteConflict(f"{key}: {exc.message}") from exc
            raise
        try:
            return payload["content"]["sha"]
        except (KeyError, TypeError) as exc:
            raise MalformedResponse(f"Unexpected write response for {key}: {exc}") from exc

    async def close(self) -> None:
        await self._transport.close()
