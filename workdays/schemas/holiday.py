"""
Holiday schemas - the one record shape every source is parsed into.
"""
import datetime
from enum import Enum
from typing import Any, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field

from workdays.utils.dates import format_holiday_date, parse_holiday_date


class HolidayKind(str, Enum):
    NATIONAL = "national"
    STATE = "state"
    CITY = "city"


# Wire "type" values -> HolidayKind (BrasilAPI and AI payloads)
_KIND_ALIASES = {
    "national": HolidayKind.NATIONAL,
    "nacional": HolidayKind.NATIONAL,
    "state": HolidayKind.STATE,
    "estadual": HolidayKind.STATE,
    "city": HolidayKind.CITY,
    "municipal": HolidayKind.CITY,
}


def parse_kind(raw: Any, default: Optional[HolidayKind] = None) -> HolidayKind:
    """Map a wire type string onto HolidayKind. Raises ValueError if unknown."""
    if raw is None or raw == "":
        if default is not None:
            return default
        raise ValueError("Holiday type is missing")
    kind = _KIND_ALIASES.get(str(raw).strip().lower())
    if kind is None:
        raise ValueError(f"Unknown holiday type: {raw!r}")
    return kind


class HolidayRecord(BaseModel):
    """
    A single non-working day. Immutable.
    Two records with the same date are the same holiday for dedup purposes.
    """
    model_config = ConfigDict(frozen=True)

    date: datetime.date
    name: str = Field(..., min_length=1)
    kind: HolidayKind

    @property
    def iso_date(self) -> str:
        return format_holiday_date(self.date)

    @classmethod
    def from_payload(
        cls,
        item: Any,
        default_kind: Optional[HolidayKind] = None,
    ) -> "HolidayRecord":
        """
        Validate one {date, name, type} wire object.
        Raises ValueError on any shape problem.
        """
        if not isinstance(item, dict):
            raise ValueError(f"Holiday entry is not an object: {item!r}")
        raw_date = item.get("date")
        name = item.get("name")
        if not isinstance(raw_date, str):
            raise ValueError(f"Holiday date is missing or not a string: {raw_date!r}")
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Holiday name is missing")
        return cls(
            date=parse_holiday_date(raw_date),
            name=name.strip(),
            kind=parse_kind(item.get("type"), default=default_kind),
        )


class ResolutionKey(NamedTuple):
    """Cache and coalescing key. city is always a canonical city key."""
    city: str
    year: int


class CacheEntry(BaseModel):
    """A resolved holiday list. Replaced wholesale on refresh, never mutated."""
    model_config = ConfigDict(frozen=True)

    key: ResolutionKey
    records: tuple[HolidayRecord, ...]
    fetched_at: float

    def is_fresh(self, now: float, ttl_seconds: float) -> bool:
        return now - self.fetched_at < ttl_seconds


class AIHolidayResponse(BaseModel):
    """Parsed AI lookup result with provenance metadata."""
    holidays: list[HolidayRecord] = Field(default_factory=list)
    source: str = "Gemini AI"
    last_updated: str = Field(..., description="ISO-8601 UTC timestamp of the lookup")
