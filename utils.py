"""
Utility functions for the application.
"""
from datetime import datetime, date
from typing import Optional


def parse_date(date_str: str, default: Optional[date] = None) -> Optional[date]:
    """
    Parse date string in multiple formats.

    Supports formats:
    - yyyy-mm-dd (ISO format, HTML date input)
    - dd.mm.yyyy

    Args:
        date_str: Date string to parse
        default: Default value to return if parsing fails (default: None)

    Returns:
        Parsed date object or default value if parsing fails

    Examples:
        >>> parse_date('1990-12-31')
        datetime.date(1990, 12, 31)
        >>> parse_date('31.12.1990')
        datetime.date(1990, 12, 31)
        >>> parse_date('invalid')
        None
    """
    if not date_str or not date_str.strip():
        return default

    date_str = date_str.strip()

    formats = (
        '%Y-%m-%d',
        '%d.%m.%Y',
    )

    for fmt in formats:
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue

    return default


def parse_integer(value_str: str, default: Optional[int] = None) -> Optional[int]:
    """
    Parse integer value.

    Args:
        value_str: Integer string to parse
        default: Default value to return if parsing fails (default: None)

    Returns:
        Parsed integer value or default if parsing fails

    Examples:
        >>> parse_integer('42')
        42
        >>> parse_integer('invalid')
        None
    """
    if not value_str or not value_str.strip():
        return default

    value_str = value_str.strip()

    try:
        return int(value_str)
    except ValueError:
        return default


def parse_bool(value_str: Optional[str]) -> bool:
    """Interpret checkbox / query-string flags ('1', 'true', 'yes', 'on')."""
    return (value_str or '').strip().lower() in ('1', 'true', 'yes', 'on')
