"""
Holiday resolver - the one place cross-source precedence is decided.

Precedence is always: national (or static fallback), static city-local,
then AI additions. Records are deduplicated by calendar date and the first
one seen wins, so official sources always beat AI duplicates.

A failing source never fails the resolution: national errors fall back to
the static table and AI errors leave the list unchanged. Both are published
to subscribers as source_failed{source, reason}.
"""
import logging
from typing import Any, Iterable, Optional

from workdays.config import get_settings
from workdays.integrations.base import MunicipalSource, NationalSource
from workdays.schemas.holiday import HolidayRecord
from workdays.utils.cities import display_name, get_city, is_national_key, normalize_city
from workdays.utils.events import EventPublisher
from workdays.utils.holidays import local_holidays, national_holidays

logger = logging.getLogger(__name__)


def merge_holidays(
    base: Iterable[HolidayRecord],
    extra: Iterable[HolidayRecord],
) -> list[HolidayRecord]:
    """Append records from extra whose date is not already present. Order is preserved."""
    merged: list[HolidayRecord] = []
    seen = set()
    for record in list(base) + list(extra):
        if record.date in seen:
            continue
        seen.add(record.date)
        merged.append(record)
    return merged


class HolidayResolver(EventPublisher):
    """Combines the national source, the static table and the optional AI source."""

    def __init__(
        self,
        national_source: NationalSource,
        municipal_source: Optional[MunicipalSource] = None,
        ai_enabled: Optional[bool] = None,
        country: Optional[str] = None,
    ):
        settings = get_settings()
        self.national_source = national_source
        self.municipal_source = municipal_source
        self.ai_enabled = settings.ai_augmentation_enabled if ai_enabled is None else ai_enabled
        self.country = country or settings.ai_country
        self._listeners = []
        # Sources that swallow their own failures still report them through us
        if isinstance(municipal_source, EventPublisher):
            municipal_source.subscribe(self._notify)

    async def resolve(self, city: str, year: int) -> list[HolidayRecord]:
        city_key = normalize_city(city)

        records = merge_holidays(await self._national(city_key, year), [])

        if is_national_key(city_key):
            return records

        records = merge_holidays(records, local_holidays(city_key, year))

        if self.ai_enabled and self.municipal_source is not None:
            records = await self._augment(records, city_key, year)

        return records

    async def _national(self, city_key: str, year: int) -> list[HolidayRecord]:
        try:
            return await self.national_source.fetch(year)
        except Exception as e:
            self._source_failed("national", city_key, year, e)
            logger.warning("Using static national holidays for %d", year)
            return national_holidays(year)

    async def _augment(
        self,
        records: list[HolidayRecord],
        city_key: str,
        year: int,
    ) -> list[HolidayRecord]:
        info = get_city(city_key)
        try:
            ai_records = await self.municipal_source.fetch(
                display_name(city_key),
                info.state if info else None,
                year,
                self.country,
            )
        except Exception as e:
            self._source_failed("ai", city_key, year, e)
            return records

        if ai_records is None:
            logger.info("No AI holidays for %s/%d; using base holidays", city_key, year)
            return records

        merged = merge_holidays(records, ai_records)
        logger.info(
            "Added %d AI holidays for %s/%d",
            len(merged) - len(records), city_key, year,
            extra={"city": city_key, "year": year, "count": len(merged) - len(records)},
        )
        return merged

    def _source_failed(self, source: str, city_key: str, year: int, error: Exception) -> None:
        payload: dict[str, Any] = {"city": city_key, "year": year, "source": source, "reason": str(error)}
        logger.warning(
            "%s holiday source failed for %s/%d: %s", source, city_key, year, error,
            extra={"event": "source_failed", **payload},
        )
        self._notify("source_failed", payload)
