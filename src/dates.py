"""Partial date handling: canonical ISO-like strings and GEDCOM dates.

A partial date is known to year, year-month or year-month-day precision and
is stored canonically as "YYYY", "YYYY-MM" or "YYYY-MM-DD".
"""

import re


# Month name mappings (handle abbreviations and full names)
MONTH_MAP = {
    "JAN": 1,
    "JANUARY": 1,
    "FEB": 2,
    "FEBRUARY": 2,
    "MAR": 3,
    "MARCH": 3,
    "APR": 4,
    "APRIL": 4,
    "MAY": 5,
    "JUN": 6,
    "JUNE": 6,
    "JUL": 7,
    "JULY": 7,
    "AUG": 8,
    "AUGUST": 8,
    "SEP": 9,
    "SEPT": 9,
    "SEPTEMBER": 9,
    "OCT": 10,
    "OCTOBER": 10,
    "NOV": 11,
    "NOVEMBER": 11,
    "DEC": 12,
    "DECEMBER": 12,
}

GEDCOM_MONTHS = [
    "JAN", "FEB", "MAR", "APR", "MAY", "JUN",
    "JUL", "AUG", "SEP", "OCT", "NOV", "DEC",
]

DISPLAY_MONTHS = {
    "it": ["gen", "feb", "mar", "apr", "mag", "giu", "lug", "ago", "set", "ott", "nov", "dic"],
    "en": ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"],
}

_QUALIFIER_RE = re.compile(r"^(ABT|EST|CAL|BEF|AFT|BET)\.?\s+", re.IGNORECASE)
_RANGE_END_RE = re.compile(r"\s+AND\s+.*$", re.IGNORECASE)
_FULL_RE = re.compile(r"\b(\d{1,2})\s+([A-Za-z]{3,})\s+(\d{4})\b")
_MONTH_YEAR_RE = re.compile(r"\b([A-Za-z]{3,})\s+(\d{4})\b")
_YEAR_RE = re.compile(r"(\d{4})")
_PARTIAL_RE = re.compile(r"^\d{4}(-(0[1-9]|1[0-2])(-(0[1-9]|[12]\d|3[01]))?)?$")


def month_to_number(month: str) -> str:
    """Map a GEDCOM month name to a zero-padded number; unknown names map to '01'."""
    key = month.upper()
    number = MONTH_MAP.get(key) or MONTH_MAP.get(key[:3], 1)
    return f"{number:02d}"


def parse_gedcom_date(value: str | None) -> str | None:
    """
    Parse a GEDCOM date value into a canonical partial date.

    Handles formats like:
    - "15 JAN 1980" -> "1980-01-15"
    - "MAR 1982"    -> "1982-03"
    - "1980"        -> "1980"
    - "ABT 1850"    -> "1850"

    Returns None if no year can be found.
    """
    if not value:
        return None

    cleaned = _QUALIFIER_RE.sub("", value.strip()).strip()
    # BET x AND y keeps the lower bound
    cleaned = _RANGE_END_RE.sub("", cleaned)

    match = _FULL_RE.search(cleaned)
    if match:
        day = match.group(1).zfill(2)
        return f"{match.group(3)}-{month_to_number(match.group(2))}-{day}"

    match = _MONTH_YEAR_RE.search(cleaned)
    if match:
        return f"{match.group(2)}-{month_to_number(match.group(1))}"

    match = _YEAR_RE.search(cleaned)
    if match:
        return match.group(1)

    return None


def to_gedcom_date(partial: str | None) -> str:
    """
    Convert a partial date to GEDCOM form ("1980", "MAR 1982", "15 JAN 1980").

    Values that are not canonical partial dates are passed through unchanged.
    """
    if not partial:
        return ""
    if not is_partial_date(partial):
        return partial
    parts = partial.split("-")
    if len(parts) == 1:
        return parts[0]
    month = GEDCOM_MONTHS[int(parts[1]) - 1]
    if len(parts) == 2:
        return f"{month} {parts[0]}"
    return f"{int(parts[2])} {month} {parts[0]}"


def is_partial_date(value: str | None) -> bool:
    return bool(value) and _PARTIAL_RE.match(value) is not None


def extract_year(partial: str) -> str:
    return partial.split("-")[0]


def format_date(partial: str | None, locale: str = "it") -> str:
    """Format a partial date for display, e.g. "15 gen 1980" or "Mar 1980"."""
    if not partial:
        return ""
    if not is_partial_date(partial):
        return partial
    parts = partial.split("-")
    months = DISPLAY_MONTHS.get(locale, DISPLAY_MONTHS["it"])

    if len(parts) == 1:
        return parts[0]
    month = months[int(parts[1]) - 1]
    if len(parts) == 2:
        return f"{month} {parts[0]}"
    return f"{int(parts[2])} {month} {parts[0]}"


def format_date_range(birth: str | None, death: str | None) -> str:
    """Format a lifespan as "1920 - 2000", "1980", "? - 2020" or ""."""
    birth_year = extract_year(birth) if birth else ""
    death_year = extract_year(death) if death else ""

    if not birth_year and not death_year:
        return ""
    if not death_year:
        return birth_year
    if not birth_year:
        return f"? - {death_year}"
    return f"{birth_year} - {death_year}"
