"""Common contract and HTTP plumbing for flight tracking sources."""

from __future__ import annotations

from abc import ABC, abstractmethod
import asyncio
import logging
from typing import Any, Awaitable, Callable, Iterable

import httpx

from nearbyflights.config import settings
from nearbyflights.models.flight import FlightRecord

logger = logging.getLogger("nearbyflights.ingestors")

EnrichmentJob = tuple[str, Callable[[], Awaitable[None]]]


class FlightSource(ABC):
    """A tracking source that turns upstream data into flight records.

    ``fetch`` must not raise on upstream failure; it returns an empty list
    instead.
    """

    name: str = "source"

    def __init__(
        self,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        concurrency: int | None = None,
        lookup_timeout: float | None = None,
    ) -> None:
        self.timeout = timeout or 10.0
        self.transport = transport
        self.concurrency = concurrency or settings.enrichment_concurrency
        self.lookup_timeout = lookup_timeout or settings.lookup_timeout

    @abstractmethod
    async def fetch(
        self, lat: float, lon: float, radius_km: float
    ) -> list[FlightRecord]:
        """Return flights with a known route within ``radius_km`` of the point."""

    def _client(self, **kwargs: Any) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout, transport=self.transport, **kwargs
        )

    async def _get(
        self,
        client: httpx.AsyncClient,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        what: str,
    ) -> httpx.Response | None:
        """GET ``url``; log and return None on any transport or HTTP failure."""

        try:
            response = await client.get(url, params=params)
        except httpx.TimeoutException as exc:
            logger.warning("%s %s timed out: %s", self.name, what, exc)
            return None
        except httpx.RequestError as exc:
            logger.warning("%s %s failed: %s", self.name, what, exc)
            return None

        if response.status_code == 429:
            logger.warning("%s rate limit encountered during %s", self.name, what)
            return None
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "%s %s returned HTTP %s", self.name, what, exc.response.status_code
            )
            return None
        return response

    async def _enrich_all(self, jobs: Iterable[EnrichmentJob]) -> None:
        """Run enrichment jobs concurrently, bounded and individually timed out.

        A failing job is logged and leaves its record as it was.
        """

        semaphore = asyncio.Semaphore(max(self.concurrency, 1))

        async def _run(label: str, job: Callable[[], Awaitable[None]]) -> None:
            async with semaphore:
                try:
                    await asyncio.wait_for(job(), timeout=self.lookup_timeout)
                except asyncio.TimeoutError:
                    logger.warning(
                        "%s enrichment for %s timed out after %.1fs",
                        self.name,
                        label,
                        self.lookup_timeout,
                    )
                except Exception as exc:
                    logger.warning("%s enrichment for %s failed: %s", self.name, label, exc)

        await asyncio.gather(*(_run(label, job) for label, job in jobs))


__all__ = ["EnrichmentJob", "FlightSource"]
