"""Time Utilities - UTC timestamps and date parsing"""
from datetime import datetime, timezone
from typing import Optional
from dateutil import parser as date_parser


def utc_now() -> datetime:
    """Get current UTC datetime"""
    return datetime.now(timezone.utc)


def parse_iso(iso_string: str) -> datetime:
    """
    Parse ISO 8601 string to datetime

    Args:
        iso_string: ISO formatted date or datetime string

    Returns:
        Datetime object in UTC
    """
    dt = date_parser.isoparse(iso_string)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def try_parse_iso(value: str) -> Optional[datetime]:
    """Parse an ISO 8601 string, returning None when it is not one"""
    try:
        return parse_iso(value)
    except (ValueError, OverflowError):
        return None
