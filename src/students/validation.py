"""
Business rules for student records.

Pure functions only: nothing here touches the store. The store calls these
before mutating anything so that every stored record satisfies every rule.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Union

from .schemas import Statistics, Student

GPA_MIN = 0.0
GPA_MAX = 4.0
MINIMUM_AGE = 18

GPA_RANGE_ERROR = "GPA must be between 0 and 4.0"
UNDERAGE_ERROR = "Student must be at least {minimum_age} years old"
EMAIL_FORMAT_ERROR = "Invalid email format"

# local-part "@" domain "." suffix, no whitespace and no extra "@" anywhere
_EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

_TWO_PLACES = Decimal("0.01")

DateLike = Union[date, datetime, str]


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip())
    raise TypeError(f"Expected a date, got {type(value).__name__}")


def validate_gpa(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if math.isnan(value):
        return False
    return GPA_MIN <= value <= GPA_MAX


def calculate_age(date_of_birth: DateLike, reference: Optional[DateLike] = None) -> int:
    """Full years elapsed between ``date_of_birth`` and ``reference`` (today by default)."""
    born = _as_date(date_of_birth)
    today = _as_date(reference) if reference is not None else date.today()
    age = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        age -= 1
    return age


def validate_age(
    date_of_birth: DateLike,
    reference: Optional[DateLike] = None,
    minimum_age: int = MINIMUM_AGE,
) -> bool:
    try:
        return calculate_age(date_of_birth, reference) >= minimum_age
    except (TypeError, ValueError):
        return False


def validate_email(value: object) -> bool:
    if not isinstance(value, str):
        return False
    return _EMAIL_PATTERN.fullmatch(value) is not None


def round_average(value: float) -> float:
    """
    Round to two decimals from the exact binary value, ties away from zero.

    Matches fixed-point formatting of the float rather than ``round()``,
    which rounds ties to even.
    """
    return float(Decimal(value).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def compute_statistics(records: Iterable[Student]) -> Statistics:
    gpas = [record.gpa for record in records]
    if not gpas:
        return Statistics(count=0, average_gpa=0, highest_gpa=0, lowest_gpa=0)
    # plain left-to-right float addition; sum() is compensated on 3.12+
    total = 0.0
    for gpa in gpas:
        total += gpa
    average = total / len(gpas)
    return Statistics(
        count=len(gpas),
        average_gpa=round_average(average),
        highest_gpa=max(gpas),
        lowest_gpa=min(gpas),
    )
