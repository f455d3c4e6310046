"""
Utility functions for the application.
"""
from typing import Any, Dict, Optional, Tuple
from datetime import date, datetime, time
from diaryledger.core.config import settings


def format_response(data: Any, message: str = "Success") -> Dict[str, Any]:
    """Format API response."""
    return {
        "message": message,
        "data": data
    }


def format_error(message: str, kind: Optional[str] = None) -> Dict[str, Any]:
    """Format error response."""
    response = {"detail": message}
    if kind:
        response["kind"] = kind
    return response


def normalize_pagination(page: Optional[int], page_size: Optional[int]) -> Tuple[int, int]:
    """
    Default and clamp pagination parameters.

    Pages are 1-indexed; an unset or non-positive page becomes 1. An unset or
    non-positive page size becomes the default, and anything above the
    maximum is clamped to it.
    """
    if not page or page <= 0:
        page = 1
    if not page_size or page_size <= 0:
        page_size = settings.DEFAULT_PAGE_SIZE
    elif page_size > settings.MAX_PAGE_SIZE:
        page_size = settings.MAX_PAGE_SIZE
    return page, page_size


def start_of_day(value: Optional[date]) -> Optional[datetime]:
    """Lower bound of a date window; datetimes pass through unchanged."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def end_of_day(value: Optional[date]) -> Optional[datetime]:
    """Inclusive upper bound of a date window; datetimes pass through unchanged."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime.combine(value, time.max)
