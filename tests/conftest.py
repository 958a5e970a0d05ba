"""
Test configuration and fixtures.
No test touches the network: sources are stubbed or httpx.AsyncClient is patched.
"""
import asyncio
from datetime import date
from typing import Optional

import pytest

from workdays.config import get_settings
from workdays.integrations.base import MunicipalSource, NationalSource, SourceUnavailable
from workdays.schemas.holiday import HolidayKind, HolidayRecord
from workdays.utils.holidays import national_holidays


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate every test from the developer's environment and .env."""
    for var in ("GEMINI_API_KEY", "AI_AUGMENTATION_ENABLED", "HOLIDAY_CACHE_TTL_SECONDS"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("GEMINI_API_KEY", "")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class StubNationalSource(NationalSource):
    """Counts calls; optionally fails or blocks until released."""

    def __init__(
        self,
        fail: bool = False,
        gate: Optional[asyncio.Event] = None,
        error: Optional[Exception] = None,
    ):
        self.fail = fail
        self.gate = gate
        self.error = error
        self.calls: list[int] = []

    async def fetch(self, year: int) -> list[HolidayRecord]:
        self.calls.append(year)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        if self.fail:
            raise SourceUnavailable("registry down")
        # Same dates as the static table, but with registry names
        return [
            HolidayRecord(date=h.date, name=f"{h.name} (API)", kind=HolidayKind.NATIONAL)
            for h in national_holidays(year)
        ]


class StubMunicipalSource(MunicipalSource):
    """Returns a fixed list (or None), or raises error; records the arguments it was called with."""

    def __init__(self, records: Optional[list[HolidayRecord]] = None, error: Optional[Exception] = None):
        self.records = records
        self.error = error
        self.calls: list[tuple] = []

    async def fetch(self, city, state, year, country="Brazil"):
        self.calls.append((city, state, year, country))
        if self.error is not None:
            raise self.error
        return None if self.records is None else list(self.records)


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def national_source():
    return StubNationalSource()


@pytest.fixture
def failing_national_source():
    return StubNationalSource(fail=True)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def ai_new_year_and_city():
    """AI answer that duplicates New Year and adds one genuine city holiday."""
    return [
        HolidayRecord(date=date(2025, 1, 1), name="Ano Novo (IA)", kind=HolidayKind.CITY),
        HolidayRecord(date=date(2025, 12, 8), name="Nossa Senhora da Conceição da Praia", kind=HolidayKind.CITY),
    ]


@pytest.fixture
def make_national_source():
    return StubNationalSource


@pytest.fixture
def make_municipal_source():
    return StubMunicipalSource


@pytest.fixture
def raising_municipal_source():
    """AI source that breaks the never-raise contract."""
    return StubMunicipalSource(error=RuntimeError("ai client bug"))
