"""
Holiday source contract and error taxonomy.

Sources only report failure. Deciding what to do about a failed source
(static fallback, skipping augmentation) belongs to the resolver.
"""
from abc import ABC, abstractmethod
from typing import Optional

from workdays.schemas.holiday import HolidayRecord


class HolidaySourceError(Exception):
    """Base class for holiday source failures."""


class SourceUnavailable(HolidaySourceError):
    """Network, HTTP or timeout failure of a single source."""


class MalformedResponse(SourceUnavailable):
    """Payload did not match the expected shape. Handled like SourceUnavailable."""


class ConfigurationMissing(HolidaySourceError):
    """A credential is absent. The source is treated as disabled."""


class NationalSource(ABC):
    """City-independent national holidays for a year."""

    @abstractmethod
    async def fetch(self, year: int) -> list[HolidayRecord]:
        """
        Return national holidays for year.
        Raises SourceUnavailable (or MalformedResponse) on failure.
        """
        ...


class MunicipalSource(ABC):
    """Best-effort city/state holidays. Never raises."""

    @abstractmethod
    async def fetch(
        self,
        city: str,
        state: Optional[str],
        year: int,
        country: str = "Brazil",
    ) -> Optional[list[HolidayRecord]]:
        """Return extra holidays, or None when the lookup failed or is disabled."""
        ...
