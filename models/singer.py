"""
models/singer.py
----------------
Domain model for singers and the payloads used to create and filter them.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional


def as_date(value) -> Optional[date]:
    """
    Reduce a date-like value to a calendar date.

    `None` stays `None` (the absent-date sentinel). A `datetime` keeps only
    its date components; time-of-day and timezone are dropped.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"expected a date, got {type(value).__name__}")


@dataclass
class SingerInfo:
    """Songs and awards of a singer, in the order they were given."""
    songs: list[str] = field(default_factory=list)
    awards: list[str] = field(default_factory=list)


@dataclass
class Singer:
    """
    Represents a stored singer.

    Attributes:
        singer_id: Caller-supplied primary key.
        first_name: First name ('' when absent).
        last_name: Last name ('' when absent).
        info: Songs and awards.
        birth_date: Date of birth (None when absent).
    """
    singer_id: int
    first_name: str = ""
    last_name: str = ""
    info: SingerInfo = field(default_factory=SingerInfo)
    birth_date: Optional[date] = None

    def __str__(self) -> str:
        name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return f"#{self.singer_id} {name or '<unnamed>'} | {self.birth_date or '-'}"


@dataclass
class CreatePayload:
    """Fields needed to store a new singer. Same semantics as `Singer`."""
    singer_id: int
    first_name: str = ""
    last_name: str = ""
    info: SingerInfo = field(default_factory=SingerInfo)
    birth_date: Optional[date] = None


@dataclass
class FilterPayload:
    """
    Conditions for listing singers. Every set condition must hold.

    Attributes:
        name: Case-sensitive substring of the first or last name ('' = any).
        birth_date_start: Inclusive lower bound (None = unbounded).
        birth_date_end: Inclusive upper bound (None = unbounded).
    """
    name: str = ""
    birth_date_start: Optional[date] = None
    birth_date_end: Optional[date] = None
