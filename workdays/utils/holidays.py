"""
Static holiday table - the last-resort fallback and the only source of
city-local holidays.

Eight fixed national holidays plus a small addendum per supported city.
Uses dateutil for Easter-dependent dates (São Paulo's Carnival).
All computations are pure functions with no I/O.
"""
from datetime import date, timedelta
from functools import lru_cache

from dateutil.easter import easter

from workdays.schemas.holiday import HolidayKind, HolidayRecord
from workdays.utils.cities import normalize_city

# (month, day, name)
NATIONAL_FIXED: tuple[tuple[int, int, str], ...] = (
    (1, 1, "Confraternização Universal"),
    (4, 21, "Tiradentes"),
    (5, 1, "Dia do Trabalhador"),
    (9, 7, "Independência do Brasil"),
    (10, 12, "Nossa Senhora Aparecida"),
    (11, 2, "Finados"),
    (11, 15, "Proclamação da República"),
    (12, 25, "Natal"),
)

# (month, day, name, kind)
LOCAL_FIXED: dict[str, tuple[tuple[int, int, str, HolidayKind], ...]] = {
    "salvador": (
        (1, 6, "Dia de Reis", HolidayKind.CITY),
        (6, 24, "São João", HolidayKind.STATE),
        (6, 29, "São Pedro", HolidayKind.CITY),
        (7, 2, "Independência da Bahia", HolidayKind.STATE),
    ),
    "rio-de-janeiro": (
        (4, 23, "Dia de São Jorge", HolidayKind.STATE),
        (10, 17, "Zumbi dos Palmares", HolidayKind.CITY),
        (11, 20, "Dia da Consciência Negra", HolidayKind.STATE),
    ),
    "sao-paulo": (
        (1, 25, "Aniversário de São Paulo", HolidayKind.CITY),
        (7, 9, "Revolução Constitucionalista", HolidayKind.STATE),
    ),
}


def _carnival_tuesday(year: int) -> date:
    """Carnival Tuesday falls 47 days before Easter Sunday."""
    return easter(year) - timedelta(days=47)


@lru_cache(maxsize=32)
def _national(year: int) -> tuple[HolidayRecord, ...]:
    return tuple(
        HolidayRecord(date=date(year, month, day), name=name, kind=HolidayKind.NATIONAL)
        for month, day, name in NATIONAL_FIXED
    )


@lru_cache(maxsize=64)
def _local(city_key: str, year: int) -> tuple[HolidayRecord, ...]:
    records = [
        HolidayRecord(date=date(year, month, day), name=name, kind=kind)
        for month, day, name, kind in LOCAL_FIXED.get(city_key, ())
    ]
    if city_key == "sao-paulo":
        # Movable; always between the January and July dates
        records.insert(1, HolidayRecord(
            date=_carnival_tuesday(year), name="Carnaval", kind=HolidayKind.CITY,
        ))
    return tuple(records)


def national_holidays(year: int) -> list[HolidayRecord]:
    """The eight fixed national holidays for a year."""
    return list(_national(year))


def local_holidays(city: str, year: int) -> list[HolidayRecord]:
    """
    City-local addendum for a supported city.
    Unknown cities and the national key return an empty list.
    """
    return list(_local(normalize_city(city), year))


def holidays_for(city: str, year: int) -> list[HolidayRecord]:
    """National holidays followed by the city's local holidays. Never raises."""
    return national_holidays(year) + local_holidays(city, year)


def city_holiday_dates(city: str, year: int) -> list[date]:
    """Date-only projection of holidays_for()."""
    return [record.date for record in holidays_for(city, year)]
