"""
Holiday service - the façade the calendar and statistics views call.

Responsibilities, in order:
1. Normalize (city, year) into a ResolutionKey (aliases collapse here).
2. Serve a live cache entry without any I/O (TTL, default 1 hour).
3. Coalesce concurrent misses for the same key onto one in-flight resolution.
4. Store successful resolutions; failed ones are never cached.

Each HolidayService instance owns its cache and in-flight map. Build one per
process (get_holiday_service) or a fresh one per test.

Structured events (logged with an "event" field and passed to subscribers):
cache_hit, cache_miss, coalesced, cache_stored, cache_cleared,
source_failed{source, reason} for the resolver, national and AI sources.
"""
import asyncio
import logging
import time
from datetime import date
from functools import lru_cache
from typing import Any, Callable, Optional

from workdays.config import get_settings
from workdays.schemas.holiday import CacheEntry, HolidayRecord, ResolutionKey
from workdays.services.holiday_resolver import HolidayResolver
from workdays.utils.cities import normalize_city
from workdays.utils.events import EventPublisher

logger = logging.getLogger(__name__)


class HolidayService(EventPublisher):
    """TTL-cached, request-coalescing front for HolidayResolver."""

    def __init__(
        self,
        resolver: HolidayResolver,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.resolver = resolver
        self.ttl_seconds = (
            ttl_seconds if ttl_seconds is not None
            else get_settings().holiday_cache_ttl_seconds
        )
        self._clock = clock
        self._cache: dict[ResolutionKey, CacheEntry] = {}
        self._in_flight: dict[ResolutionKey, asyncio.Task] = {}
        self._listeners = []
        # National and AI failures reach our subscribers too
        if isinstance(resolver, EventPublisher):
            resolver.subscribe(self._notify)
        # Bumped by clear_cache() so stale in-flight results are not written back
        self._generation = 0

    @staticmethod
    def make_key(city: str, year: int) -> ResolutionKey:
        return ResolutionKey(normalize_city(city), int(year))

    async def get_holidays(self, city: str, year: int) -> tuple[HolidayRecord, ...]:
        """
        Return the resolved holidays for (city, year).

        Never raises for source failures: a failed resolution yields an empty
        tuple. All callers coalesced onto one resolution receive the same
        tuple object.
        """
        key = self.make_key(city, year)

        entry = self._cache.get(key)
        if entry is not None and entry.is_fresh(self._clock(), self.ttl_seconds):
            self._emit("cache_hit", key)
            return entry.records

        task = self._in_flight.get(key)
        if task is not None:
            self._emit("coalesced", key)
        else:
            self._emit("cache_miss", key)
            task = asyncio.ensure_future(self._resolve(key, self._generation))
            self._in_flight[key] = task

        # Shield so one caller's cancellation does not cancel the shared resolution
        return await asyncio.shield(task)

    async def get_holiday_dates(self, city: str, year: int) -> list[date]:
        """Date-only projection of get_holidays(), for day classification."""
        return [record.date for record in await self.get_holidays(city, year)]

    def clear_cache(self) -> None:
        """Drop every cache entry and forget in-flight resolutions."""
        self._generation += 1
        dropped = len(self._cache)
        self._cache.clear()
        self._in_flight.clear()
        logger.info(
            "Holiday cache cleared (%d entries)", dropped,
            extra={"event": "cache_cleared", "count": dropped},
        )
        self._notify("cache_cleared", {"count": dropped})

    def cached_entry(self, city: str, year: int) -> Optional[CacheEntry]:
        """Current cache entry for a key, fresh or not."""
        return self._cache.get(self.make_key(city, year))

    async def _resolve(self, key: ResolutionKey, generation: int) -> tuple[HolidayRecord, ...]:
        try:
            records = tuple(await self.resolver.resolve(key.city, key.year))
        except Exception as e:
            logger.exception("Holiday resolution failed for %s/%d", key.city, key.year)
            self._emit("source_failed", key, source="resolver", reason=str(e))
            return ()
        finally:
            if self._in_flight.get(key) is asyncio.current_task():
                del self._in_flight[key]

        if generation != self._generation:
            return records

        entry = CacheEntry(key=key, records=records, fetched_at=self._clock())
        self._cache[key] = entry
        self._emit("cache_stored", key, count=len(entry.records))
        return entry.records

    def _emit(self, event: str, key: ResolutionKey, **fields: Any) -> None:
        payload = {"city": key.city, "year": key.year, **fields}
        level = logging.WARNING if event == "source_failed" else logging.DEBUG
        logger.log(
            level, "%s %s/%d", event, key.city, key.year,
            extra={"event": event, **payload},
        )
        self._notify(event, payload)


@lru_cache()
def get_holiday_service() -> HolidayService:
    """Process-wide service wired from settings."""
    from workdays.integrations.brasil_api import BrasilAPIHolidaySource
    from workdays.integrations.gemini import GeminiHolidaySource

    resolver = HolidayResolver(
        national_source=BrasilAPIHolidaySource(),
        municipal_source=GeminiHolidaySource(),
    )
    return HolidayService(resolver)
