"""
City catalogue and alias normalization.

Every lookup, cache access and in-flight check uses the canonical key
returned by normalize_city(), so "rio" and "rio-de-janeiro" can never
produce two cache entries.
"""
import re
import unicodedata
from typing import NamedTuple, Optional


class CityInfo(NamedTuple):
    key: str
    name: str
    state: Optional[str]


NATIONAL_KEY = "brazil"

CITIES: dict[str, CityInfo] = {
    "salvador": CityInfo("salvador", "Salvador", "Bahia"),
    "rio-de-janeiro": CityInfo("rio-de-janeiro", "Rio de Janeiro", "Rio de Janeiro"),
    "sao-paulo": CityInfo("sao-paulo", "São Paulo", "São Paulo"),
}

CITY_ALIASES: dict[str, str] = {
    "salvador": "salvador",
    "ssa": "salvador",
    "rio": "rio-de-janeiro",
    "rj": "rio-de-janeiro",
    "rio-de-janeiro": "rio-de-janeiro",
    "sp": "sao-paulo",
    "sampa": "sao-paulo",
    "sao-paulo": "sao-paulo",
    "brazil": NATIONAL_KEY,
    "brasil": NATIONAL_KEY,
    "br": NATIONAL_KEY,
    "": NATIONAL_KEY,
}


def _slugify(value: str) -> str:
    """Fold accents and case; spaces and underscores become hyphens."""
    folded = unicodedata.normalize("NFKD", value)
    folded = "".join(ch for ch in folded if not unicodedata.combining(ch))
    folded = folded.strip().lower()
    folded = re.sub(r"[\s_]+", "-", folded)
    folded = re.sub(r"[^a-z0-9-]", "", folded)
    return re.sub(r"-{2,}", "-", folded).strip("-")


def normalize_city(city: Optional[str]) -> str:
    """
    Map any spelling of a city to its canonical key.

    Known aliases collapse to one key. Unknown cities keep their slug
    (e.g. "Belo Horizonte" -> "belo-horizonte") and are served by the
    national-only branch.
    """
    slug = _slugify(city or "")
    return CITY_ALIASES.get(slug, slug)


def get_city(city_key: str) -> Optional[CityInfo]:
    """Return catalogue info for a canonical key, or None for unsupported cities."""
    return CITIES.get(city_key)


def is_national_key(city_key: str) -> bool:
    return city_key == NATIONAL_KEY


def display_name(city_key: str) -> str:
    """Human-readable name used in AI prompts."""
    info = CITIES.get(city_key)
    if info:
        return info.name
    return city_key.replace("-", " ").title()
