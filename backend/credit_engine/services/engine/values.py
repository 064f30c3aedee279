"""Typed access to applicant record values."""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Union

FieldValue = Union[bool, int, float, Decimal, str, date, datetime]

# Open applicant record: field name -> number, string, boolean or date
ApplicantRecord = Mapping[str, FieldValue]


def is_missing(record: ApplicantRecord, field: str) -> bool:
    """True when the field is absent or null."""
    return record.get(field) is None


def is_blank(record: ApplicantRecord, field: str) -> bool:
    """True when the field is absent, null or an empty string."""
    value = record.get(field)
    return value is None or (isinstance(value, str) and not value.strip())


def is_number(value: Any) -> bool:
    """Numbers are int, float or Decimal; booleans are not numbers."""
    if isinstance(value, bool):
        return False
    if isinstance(value, float) and value != value:
        return False
    return isinstance(value, (int, float, Decimal))


def as_number(value: Any) -> Optional[Decimal]:
    """
    Coerce a numeric value to Decimal.

    Args:
        value: Record value

    Returns:
        Decimal value, or None when the value is not a number
    """
    if not is_number(value):
        return None
    try:
        return value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        return None


def as_date(value: Any) -> Optional[datetime]:
    """
    Coerce a date, datetime or ISO-8601 string to a naive datetime.

    Returns:
        datetime, or None when the value is not a date
    """
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value).replace(tzinfo=None)
        except ValueError:
            return None
    return None


def as_text(value: Any) -> str:
    """String form used by the textual operators and categorical lookups."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, Decimal) and value == value.to_integral_value():
        return str(value.quantize(Decimal(1)))
    return str(value)
