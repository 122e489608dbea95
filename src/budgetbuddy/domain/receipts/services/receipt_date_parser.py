"""Heuristic transaction-date detection in recognized receipt text.

Used only when structured extraction did not return a date. Three patterns
are tried in priority order and, within a pattern, matches in text order:

1. ``D[./-]M[./-]YYYY`` (two-digit years allowed)
2. ``YYYY[./-]M[./-]D``
3. ``D <month name> YYYY`` with English or French month names

The first candidate with a plausible day, month and year wins. An
implausible match does not end the search: later matches of the same
pattern are still tried before moving to the next pattern, so a phone
number or item code shaped like a date cannot hide the real one.
"""

from __future__ import annotations

import re
from typing import Iterator, Optional

MIN_YEAR = 2000
MAX_YEAR = 2100
TWO_DIGIT_YEAR_PIVOT = 50

_DAY_MONTH_YEAR = re.compile(r"\b(\d{1,2})[./-](\d{1,2})[./-](\d{2,4})\b")
_YEAR_MONTH_DAY = re.compile(r"\b(\d{4})[./-](\d{1,2})[./-](\d{1,2})\b")
_DAY_MONTH_NAME_YEAR = re.compile(r"\b(\d{1,2})\s+([^\W\d_]+)\s+(\d{4})\b")

# fmt: off
MONTH_NAMES: dict[str, int] = {
    "january": 1, "jan": 1, "janvier": 1,
    "february": 2, "feb": 2, "février": 2, "fevrier": 2, "fev": 2, "fév": 2,
    "march": 3, "mar": 3, "mars": 3,
    "april": 4, "apr": 4, "avril": 4, "avr": 4,
    "may": 5, "mai": 5,
    "june": 6, "jun": 6, "juin": 6,
    "july": 7, "jul": 7, "juillet": 7,
    "august": 8, "aug": 8, "août": 8, "aout": 8,
    "september": 9, "sep": 9, "sept": 9, "septembre": 9,
    "october": 10, "oct": 10, "octobre": 10,
    "november": 11, "nov": 11, "novembre": 11,
    "december": 12, "dec": 12, "décembre": 12, "decembre": 12, "déc": 12,
}
# fmt: on


def expand_two_digit_year(year: int) -> int:
    """Map a two-digit year onto a century (>=50 -> 1900s, <50 -> 2000s)."""
    if year >= 100:
        return year
    return year + (1900 if year >= TWO_DIGIT_YEAR_PIVOT else 2000)


def month_from_name(name: str) -> Optional[int]:
    return MONTH_NAMES.get(name.casefold())


def is_plausible_date(day: int, month: int, year: int) -> bool:
    return 1 <= day <= 31 and 1 <= month <= 12 and MIN_YEAR <= year <= MAX_YEAR


def _day_month_year_candidates(text: str) -> Iterator[tuple[int, int, int]]:
    for match in _DAY_MONTH_YEAR.finditer(text):
        day, month, year = (int(group) for group in match.groups())
        yield day, month, expand_two_digit_year(year)


def _year_month_day_candidates(text: str) -> Iterator[tuple[int, int, int]]:
    for match in _YEAR_MONTH_DAY.finditer(text):
        year, month, day = (int(group) for group in match.groups())
        yield day, month, year


def _month_name_candidates(text: str) -> Iterator[tuple[int, int, int]]:
    for match in _DAY_MONTH_NAME_YEAR.finditer(text):
        month = month_from_name(match.group(2))
        if month is None:
            continue
        yield int(match.group(1)), month, int(match.group(3))


_CANDIDATE_SOURCES = (
    _day_month_year_candidates,
    _year_month_day_candidates,
    _month_name_candidates,
)


def find_receipt_date(text: Optional[str]) -> Optional[str]:
    """
    Find the most likely transaction date in recognized receipt text.

    Parameters
    ----------
    text
        Raw recognizer output

    Returns
    -------
    Date formatted as DD-MM-YYYY, or None if no plausible date was found
    """
    if not text:
        return None

    for candidates in _CANDIDATE_SOURCES:
        for day, month, year in candidates(text):
            if is_plausible_date(day, month, year):
                return f"{day:02d}-{month:02d}-{year}"

    return None
