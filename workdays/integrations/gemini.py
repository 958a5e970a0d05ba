"""
Gemini municipal holiday source - optional, best-effort.

Asks Gemini for official municipal/state holidays as JSON, pulls the first
balanced {...} object out of the free-form answer and validates each record.
Any failure (no API key, HTTP error, timeout, bad JSON, bad record) returns
None. This source never raises to the caller; failures are published to
subscribers as source_failed{source="ai"}.

Successful lookups are cached for the life of the process (no TTL), bounded
by an LRU so a long-running process cannot grow without limit.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

import httpx
from cachetools import LRUCache

from workdays.config import get_settings
from workdays.integrations.base import (
    ConfigurationMissing,
    MalformedResponse,
    MunicipalSource,
    SourceUnavailable,
)
from workdays.schemas.holiday import AIHolidayResponse, HolidayKind, HolidayRecord
from workdays.utils.events import EventPublisher

logger = logging.getLogger(__name__)

SOURCE_NAME = "Gemini AI"

GENERATION_CONFIG = {
    "temperature": 0.1,
    "topP": 0.8,
    "topK": 10,
    "maxOutputTokens": 1024,
}

PROMPT_TEMPLATE = """\
Por favor, forneça os feriados municipais oficiais e pontos facultativos para {location} em {year}.

Inclua apenas:
1. Feriados municipais específicos da cidade
2. Feriados estaduais se aplicável
3. Datas exatas no formato YYYY-MM-DD
4. Nomes oficiais dos feriados em português
5. Tipo de feriado (city para municipal, state para estadual)

Retorne apenas feriados oficiais, não datas comemorativas.

Formato JSON exato:
{{
  "holidays": [
    {{"date": "YYYY-MM-DD", "name": "Nome do Feriado", "type": "city"}}
  ]
}}

Responda apenas com o JSON, sem texto adicional.
"""


def build_prompt(city: str, state: Optional[str], year: int, country: str = "Brazil") -> str:
    """Natural-language request for a strict {holidays: [...]} JSON object."""
    location = f"{city}, {state}, {country}" if state else f"{city}, {country}"
    return PROMPT_TEMPLATE.format(location=location, year=year)


def cache_key(city: str, state: Optional[str], country: str, year: int) -> tuple[str, str, str, int]:
    """Case-insensitive composite key."""
    return (
        city.strip().lower(),
        (state or "none").strip().lower(),
        country.strip().lower(),
        year,
    )


def extract_json_object(text: str) -> Optional[str]:
    """
    Return the first balanced {...} region of text, or None.

    Braces inside JSON string literals are ignored, so names such as
    "Dia {x}" cannot unbalance the scan.
    """
    start = text.find("{")
    if start < 0:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start:index + 1]
    return None


def _candidate_text(data: Any) -> str:
    """Pull candidates[0].content.parts[0].text out of a generateContent reply."""
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedResponse("No content received from Gemini") from e
    if not isinstance(text, str) or not text.strip():
        raise MalformedResponse("Empty text received from Gemini")
    return text


def parse_holidays_text(text: str, year: Optional[int] = None) -> list[HolidayRecord]:
    """
    Parse the embedded {holidays: [...]} object.
    Raises MalformedResponse if the JSON or any record is invalid.
    When year is given, well-formed records dated in another year are dropped.
    """
    raw = extract_json_object(text)
    if raw is None:
        raise MalformedResponse("No JSON object found in Gemini response")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"Unparseable JSON in Gemini response: {e}") from e

    items = payload.get("holidays", [])
    if not isinstance(items, list):
        raise MalformedResponse("'holidays' is not a list")

    records = []
    for item in items:
        try:
            records.append(HolidayRecord.from_payload(item, default_kind=HolidayKind.CITY))
        except ValueError as e:
            raise MalformedResponse(f"Malformed AI holiday: {e}") from e

    if year is not None:
        in_year = [record for record in records if record.date.year == year]
        if len(in_year) != len(records):
            logger.debug("Dropped %d AI holidays outside %d", len(records) - len(in_year), year)
        records = in_year
    return records


class GeminiHolidaySource(EventPublisher, MunicipalSource):
    """Cached Gemini generateContent client for municipal holidays."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_entries: Optional[int] = None,
    ):
        settings = get_settings()
        # None means "read GEMINI_API_KEY from settings on every call"
        self._api_key = api_key
        self.api_url = api_url or settings.gemini_api_url
        self.timeout = timeout if timeout is not None else settings.ai_timeout_seconds
        self._cache: LRUCache = LRUCache(
            maxsize=max_entries if max_entries is not None else settings.ai_cache_max_entries
        )
        self._listeners = []

    def _resolve_api_key(self) -> str:
        api_key = self._api_key if self._api_key is not None else get_settings().gemini_api_key
        if not api_key:
            raise ConfigurationMissing("Gemini API key not configured")
        return api_key

    async def fetch(
        self,
        city: str,
        state: Optional[str],
        year: int,
        country: str = "Brazil",
    ) -> Optional[list[HolidayRecord]]:
        response = await self.fetch_response(city, state, year, country)
        if response is None:
            return None
        return list(response.holidays)

    async def fetch_response(
        self,
        city: str,
        state: Optional[str],
        year: int,
        country: str = "Brazil",
    ) -> Optional[AIHolidayResponse]:
        """Like fetch() but keeps the source/last_updated metadata."""
        key = cache_key(city, state, country, year)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("AI holiday cache hit for %s", key)
            return cached

        try:
            api_key = self._resolve_api_key()
            text = await self._generate(api_key, build_prompt(city, state, year, country))
            holidays = parse_holidays_text(text, year)
        except ConfigurationMissing:
            logger.debug("Gemini API key not configured; skipping municipal lookup")
            return None
        except SourceUnavailable as e:
            payload = {"city": city, "year": year, "source": "ai", "reason": str(e)}
            logger.warning(
                "Gemini holiday lookup failed for %s/%d: %s", city, year, str(e),
                extra={"event": "source_failed", **payload},
            )
            self._notify("source_failed", payload)
            return None

        response = AIHolidayResponse(
            holidays=holidays,
            source=SOURCE_NAME,
            last_updated=datetime.now(timezone.utc).isoformat(),
        )
        self._cache[key] = response
        logger.info("Gemini returned %d holidays for %s/%d", len(holidays), city, year)
        return response

    async def _generate(self, api_key: str, prompt: str) -> str:
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": GENERATION_CONFIG,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.api_url,
                    params={"key": api_key},
                    headers={"Content-Type": "application/json"},
                    json=body,
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise SourceUnavailable(f"Gemini API error: {e.response.status_code}") from e
        except httpx.TimeoutException as e:
            raise SourceUnavailable(f"Gemini timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise SourceUnavailable(f"Gemini request failed: {e}") from e
        except ValueError as e:
            raise MalformedResponse("Gemini returned invalid JSON") from e

        return _candidate_text(data)

    def clear_cache(self) -> None:
        self._cache.clear()
