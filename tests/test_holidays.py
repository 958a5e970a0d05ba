"""
Static holiday table tests.
The static table is the last-resort fallback, so it must always answer.
"""
from datetime import date

from workdays.schemas.holiday import HolidayKind
from workdays.utils.holidays import (
    _carnival_tuesday,
    city_holiday_dates,
    holidays_for,
    local_holidays,
    national_holidays,
)

NATIONAL_DATES_2025 = [
    date(2025, 1, 1),
    date(2025, 4, 21),
    date(2025, 5, 1),
    date(2025, 9, 7),
    date(2025, 10, 12),
    date(2025, 11, 2),
    date(2025, 11, 15),
    date(2025, 12, 25),
]


class TestCarnivalTuesday:
    def test_carnival_2025(self):
        # Easter 2025 is April 20 - Carnival Tuesday is March 4
        assert _carnival_tuesday(2025) == date(2025, 3, 4)

    def test_carnival_2026(self):
        # Easter 2026 is April 5 - Carnival Tuesday is February 17
        assert _carnival_tuesday(2026) == date(2026, 2, 17)


class TestNationalHolidays:
    def test_returns_eight_holidays(self):
        assert len(national_holidays(2025)) == 8

    def test_dates_in_calendar_order(self):
        assert [h.date for h in national_holidays(2025)] == NATIONAL_DATES_2025

    def test_all_national_kind(self):
        assert {h.kind for h in national_holidays(2030)} == {HolidayKind.NATIONAL}

    def test_independence_day_name(self):
        independence = [h for h in national_holidays(2025) if h.date == date(2025, 9, 7)]
        assert independence[0].name == "Independência do Brasil"

    def test_returns_fresh_list(self):
        first = national_holidays(2025)
        first.clear()
        assert len(national_holidays(2025)) == 8


class TestLocalHolidays:
    def test_salvador_has_four(self):
        local = local_holidays("salvador", 2025)
        assert [h.date for h in local] == [
            date(2025, 1, 6), date(2025, 6, 24), date(2025, 6, 29), date(2025, 7, 2),
        ]

    def test_rio_alias(self):
        assert local_holidays("rio", 2025) == local_holidays("rio-de-janeiro", 2025)
        assert len(local_holidays("rio", 2025)) == 3

    def test_sao_paulo_includes_carnival(self):
        local = local_holidays("sp", 2025)
        assert [h.name for h in local] == [
            "Aniversário de São Paulo", "Carnaval", "Revolução Constitucionalista",
        ]
        assert local[1].date == date(2025, 3, 4)

    def test_unknown_city_is_empty(self):
        assert local_holidays("curitiba", 2025) == []

    def test_national_key_is_empty(self):
        assert local_holidays("brasil", 2025) == []


class TestHolidaysFor:
    def test_national_first_then_local(self):
        holidays = holidays_for("salvador", 2025)
        assert [h.date for h in holidays[:8]] == NATIONAL_DATES_2025
        assert len(holidays) == 12

    def test_unknown_city_gets_national_only(self):
        assert holidays_for("Belo Horizonte", 2025) == national_holidays(2025)

    def test_every_city_contains_national_dates(self):
        for city in ("salvador", "rio", "sp", "brazil", "manaus"):
            dates = city_holiday_dates(city, 2027)
            for national in national_holidays(2027):
                assert national.date in dates

    def test_city_holiday_dates_projection(self):
        assert city_holiday_dates("brazil", 2025) == NATIONAL_DATES_2025
