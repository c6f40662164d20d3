"""
Calendar dates associated with files.
"""
from dataclasses import dataclass
from datetime import date
from typing import Optional

from .config import config
from .result import Result


@dataclass(frozen=True, order=True)
class Datestamp:
    """
    A calendar date (year, month, day).

    Build instances with from_strings() or from_date(); both validate the
    components. Days are only range checked (1-31), so "February 30" is
    accepted.
    """
    year: int
    month: int
    day: int

    @classmethod
    def from_strings(cls, year_str: str, month_str: str, day_str: str,
                     today: Optional[date] = None,
                     year_window: Optional[int] = None) -> Result['Datestamp']:
        """
        Create a Datestamp from string components.

        Args:
            year_str: Year, base-10 (e.g. "2012")
            month_str: Month, base-10 (e.g. "08")
            day_str: Day, base-10 (e.g. "06")
            today: Reference date for the year window (default: today)
            year_window: How many years back a date may lie (default: config.year_window)

        Returns:
            Result holding the Datestamp, or a failure describing the problem
        """
        year = _parse_int(year_str)
        if year is None:
            return Result.failure(f"'{year_str}' is not a valid year string.")

        month = _parse_int(month_str)
        if month is None:
            return Result.failure(f"'{month_str}' is not a valid month string.")

        day = _parse_int(day_str)
        if day is None:
            return Result.failure(f"'{day_str}' is not a valid day string.")

        return cls._validated(year, month, day, today, year_window)

    @classmethod
    def from_date(cls, value: date, today: Optional[date] = None,
                  year_window: Optional[int] = None) -> Result['Datestamp']:
        """Create a Datestamp from a date, applying the same checks."""
        return cls._validated(value.year, value.month, value.day, today, year_window)

    @classmethod
    def _validated(cls, year: int, month: int, day: int,
                   today: Optional[date], year_window: Optional[int]) -> Result['Datestamp']:
        # Reality checks: the date has to be reasonable for a photo
        if year_window is None:
            year_window = config.year_window
        cur_year = (today or date.today()).year
        if year < cur_year - year_window or year > cur_year:
            return Result.failure(f"{year} is not a valid year.")

        if month < 1 or month > 12:
            return Result.failure(f"{month} is not a valid month.")

        if day < 1 or day > 31:
            return Result.failure(f"{day} is not a valid day.")

        return Result.success(cls(year, month, day))

    def __str__(self) -> str:
        """Canonical YYYY_MM_DD form."""
        return f"{self.year:04d}_{self.month:02d}_{self.day:02d}"

    def year_string(self) -> str:
        return f"{self.year:04d}"


def _parse_int(text: str) -> Optional[int]:
    try:
        return int(str(text).strip(), 10)
    except (TypeError, ValueError):
        return None
