"""
Print the resolved holidays for a city and year.

Usage:
    python scripts/show_holidays.py
    python scripts/show_holidays.py --city rio --year 2026
    python scripts/show_holidays.py --city sp --dates-only --no-ai
"""
import argparse
import asyncio
import logging
from datetime import date

from workdays.config import get_settings
from workdays.integrations.brasil_api import BrasilAPIHolidaySource
from workdays.services.holiday_resolver import HolidayResolver
from workdays.services.holiday_service import HolidayService, get_holiday_service
from workdays.utils.dates import format_holiday_date
from workdays.utils.logging import configure_structured_logging

logger = logging.getLogger(__name__)


def build_service(no_ai: bool = False) -> HolidayService:
    """Shared process-wide service, or a private one without the AI source."""
    if no_ai:
        return HolidayService(HolidayResolver(BrasilAPIHolidaySource(), ai_enabled=False))
    return get_holiday_service()


async def main():
    parser = argparse.ArgumentParser(description="Show resolved holidays")
    parser.add_argument("--city", default="salvador")
    parser.add_argument("--year", type=int, default=date.today().year)
    parser.add_argument("--dates-only", action="store_true")
    parser.add_argument("--no-ai", action="store_true", help="Skip the Gemini municipal lookup")
    args = parser.parse_args()

    configure_structured_logging(get_settings().log_level)

    service = build_service(no_ai=args.no_ai)

    if args.dates_only:
        for day in await service.get_holiday_dates(args.city, args.year):
            print(format_holiday_date(day))
        return

    holidays = await service.get_holidays(args.city, args.year)
    for holiday in holidays:
        print(f"{holiday.iso_date}  {holiday.kind.value:<8}  {holiday.name}")
    logger.info("%d holidays for %s/%d", len(holidays), args.city, args.year)


if __name__ == "__main__":
    asyncio.run(main())
