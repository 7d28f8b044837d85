"""
Utility functions for Meeting Radar.
"""

import asyncio
import functools
import uuid
from datetime import datetime, date, time
from typing import Optional, Tuple, Type

from dateutil import parser as date_parser
from dateutil import tz

from ..config import get_logger

logger = get_logger("utils")


def generate_id(prefix: str = "", length: int = 32) -> str:
    """
    Generate a unique ID.

    Args:
        prefix: Optional prefix for the ID.
        length: Length of the random part.

    Returns:
        Unique ID string.
    """
    random_part = uuid.uuid4().hex[:length]
    return f"{prefix}{random_part}" if prefix else random_part


def parse_datetime(dt_string: Optional[str], default_tz=tz.UTC) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp into an aware datetime.

    Args:
        dt_string: Datetime string to parse.
        default_tz: Timezone applied when the string carries no offset.

    Returns:
        Parsed datetime or None if parsing fails.
    """
    if not dt_string or not dt_string.strip():
        return None
    try:
        dt = date_parser.isoparse(dt_string.strip())
    except (ValueError, OverflowError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=default_tz)
    return dt


def parse_date(date_string: Optional[str], default_tz=tz.UTC) -> Optional[datetime]:
    """
    Parse a date-only value (YYYY-MM-DD) as the start of that day.

    Args:
        date_string: Date string to parse.
        default_tz: Timezone the day is anchored in.

    Returns:
        Aware datetime at midnight, or None if parsing fails.
    """
    if not date_string or not date_string.strip():
        return None
    try:
        day = date.fromisoformat(date_string.strip())
    except ValueError:
        return None
    return datetime.combine(day, time.min, tzinfo=default_tz)


def retry_async(
    max_retries: int = 3,
    delay: float = 1.0,
    backoff: float = 2.0,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,)
):
    """
    Decorator for retrying async functions.

    Args:
        max_retries: Maximum number of retry attempts.
        delay: Initial delay between retries in seconds.
        backoff: Backoff multiplier for delay.
        retry_on: Exception types that trigger a retry; anything else propagates.

    Returns:
        Decorated function.
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            current_delay = delay

            for attempt in range(max_retries + 1):
                try:
                    return await func(*args, **kwargs)
                except retry_on as e:
                    if attempt >= max_retries:
                        raise
                    logger.warning(
                        f"{func.__name__} failed (attempt {attempt + 1}/{max_retries + 1}): {e}; "
                        f"retrying in {current_delay:.1f}s"
                    )
                    await asyncio.sleep(current_delay)
                    current_delay *= backoff

        return wrapper

    return decorator
