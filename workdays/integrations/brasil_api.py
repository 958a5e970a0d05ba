"""
BrasilAPI national holiday source.

Docs: https://brasilapi.com.br/docs#tag/Feriados-Nacionais
One GET per year. National holidays do not depend on the city, and a
published year never changes, so successful fetches are cached forever.
"""
import logging
from typing import Optional

import httpx

from workdays.config import get_settings
from workdays.integrations.base import MalformedResponse, NationalSource, SourceUnavailable
from workdays.schemas.holiday import HolidayKind, HolidayRecord

logger = logging.getLogger(__name__)


class BrasilAPIHolidaySource(NationalSource):
    """Year-keyed, cached client for BrasilAPI /feriados/v1/{year}."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        settings = get_settings()
        self.base_url = (base_url or settings.brasil_api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.national_timeout_seconds
        self._cache: dict[int, tuple[HolidayRecord, ...]] = {}

    async def fetch(self, year: int) -> list[HolidayRecord]:
        if year in self._cache:
            return list(self._cache[year])
        records = await self._fetch_remote(year)
        self._cache[year] = tuple(records)
        logger.info("Fetched %d national holidays for %d", len(records), year)
        return records

    async def _fetch_remote(self, year: int) -> list[HolidayRecord]:
        url = f"{self.base_url}/{year}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise SourceUnavailable(
                f"BrasilAPI returned HTTP {e.response.status_code} for {year}"
            ) from e
        except httpx.TimeoutException as e:
            raise SourceUnavailable(f"BrasilAPI timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise SourceUnavailable(f"BrasilAPI request failed: {e}") from e
        except ValueError as e:
            raise MalformedResponse("BrasilAPI returned invalid JSON") from e

        return _parse_holidays(data)

    def clear_cache(self) -> None:
        self._cache.clear()


def _parse_holidays(data) -> list[HolidayRecord]:
    """Validate the BrasilAPI array. Every record is tagged national."""
    if not isinstance(data, list):
        raise MalformedResponse(f"Expected a JSON array, got {type(data).__name__}")
    records = []
    for item in data:
        if not isinstance(item, dict):
            raise MalformedResponse(f"Malformed BrasilAPI holiday: {item!r}")
        try:
            records.append(HolidayRecord.from_payload({**item, "type": HolidayKind.NATIONAL.value}))
        except ValueError as e:
            raise MalformedResponse(f"Malformed BrasilAPI holiday: {e}") from e
    return records
