"""Abstract base for upstream source adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from marineboard._http import AsyncTransport


class SourceAdapter(ABC):
    """Converts one upstream's raw response into a normalized record.

    Implementations raise SourceUnavailable, MalformedResponse or EmptyResult
    and never return partially-failed records.
    """

    name: str = "source"

    def __init__(self, transport: AsyncTransport | None = None) -> None:
        self._transport = transport

    async def __aenter__(self) -> SourceAdapter:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    @abstractmethod
    async def fetch(self, *args: Any, **kwargs: Any) -> Any: ...

    async def close(self) -> None:
        """Close the underlying HTTP connection, if any."""
        if self._transport is not None:
            await self._transport.close()
