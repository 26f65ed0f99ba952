"""Small helper utilities used by the option and generation layers.

Provided:
- now_utc() -> datetime: current time, timezone-aware UTC
- as_utc(dt) -> datetime: attach UTC to naive datetimes
- add_date(t, years, months, days) -> datetime: calendar arithmetic
- int_to_bytes(n) -> bytes: minimal big-endian representation
- filter_non_empty(values) -> list: drop empty entries

Datetimes handled here are always timezone-aware UTC on the way out,
which is what the certificate builder and the validity checks compare.
"""

from datetime import datetime, timedelta, timezone
from typing import Iterable, List, TypeVar

T = TypeVar("T")


def now_utc() -> datetime:
	"""Return the current time as a timezone-aware UTC datetime."""
	return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
	"""Interpret naive datetimes as UTC; convert aware ones to UTC."""
	if dt.tzinfo is None:
		return dt.replace(tzinfo=timezone.utc)
	return dt.astimezone(timezone.utc)


def add_date(t: datetime, years: int, months: int, days: int) -> datetime:
	"""Add years, months and days to `t`, normalising overflowing dates.

	Months outside 1..12 roll into neighbouring years and days past the end
	of the month roll into the next one, so Oct 31 + 1 month is Dec 1.
	The time of day is preserved.
	"""
	month0 = t.month - 1 + months
	year = t.year + years + month0 // 12
	month = month0 % 12 + 1
	first = t.replace(year=year, month=month, day=1)
	return first + timedelta(days=t.day - 1 + days)


def int_to_bytes(n: int) -> bytes:
	"""Big-endian bytes of a non-negative int, with no leading zeros.

	Zero encodes to b"".
	"""
	return n.to_bytes((n.bit_length() + 7) // 8, "big")


def filter_non_empty(values: Iterable[T]) -> List[T]:
	"""Return a new list without empty/None entries, preserving order."""
	return [v for v in values if v]
