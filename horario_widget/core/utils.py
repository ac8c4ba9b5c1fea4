"""
Utility functions for date handling and text normalisation
"""
import re
import unicodedata
from datetime import datetime, timedelta, timezone, time
from typing import Any, Optional, Tuple
from bson import ObjectId
import logging

# Configure logging
logger = logging.getLogger(__name__)

# "7:30", "07:30", "7.30"
_TIME_PATTERN = re.compile(r'^\s*(\d{1,2})[:.](\d{1,2})\s*$')


class TextUtils:
    """Utility class for text normalisation"""

    @staticmethod
    def strip_accents(text: str) -> str:
        """Remove accents/diacritics (Miércoles -> Miercoles)"""
        nfkd = unicodedata.normalize("NFKD", text)
        return "".join(c for c in nfkd if not unicodedata.combining(c))

    @staticmethod
    def normalize_label(text: Any) -> str:
        """Lower-case, accent-free, trimmed version of a label"""
        if not isinstance(text, str):
            return ""
        return TextUtils.strip_accents(text).strip().lower()


class DateTimeUtils:
    """Utility class for date and time operations"""

    @staticmethod
    def parse_clock(value: Any) -> Optional[time]:
        """Parse "H:MM" or "HH:MM" into a time, None if malformed"""
        if isinstance(value, time):
            return value
        if not isinstance(value, str):
            return None
        match = _TIME_PATTERN.match(value)
        if not match:
            return None
        hour, minute = int(match.group(1)), int(match.group(2))
        if hour > 23 or minute > 59:
            return None
        return time(hour, minute)

    @staticmethod
    def parse_time_range(label: Any) -> Tuple[Optional[time], Optional[time]]:
        """Split a slot label like "7:30 - 8:20 (M1)" into (start, end)"""
        if not isinstance(label, str):
            return None, None
        # Drop the trailing "(M1)" block marker
        label = label.split("(")[0]
        parts = label.split("-")
        start = DateTimeUtils.parse_clock(parts[0])
        end = DateTimeUtils.parse_clock(parts[1]) if len(parts) > 1 else None
        return start, end

    @staticmethod
    def ensure_aware(dt: datetime) -> datetime:
        """Attach UTC to naive datetimes (pymongo returns naive UTC by default)"""
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt

    @staticmethod
    def day_window(now: datetime) -> Tuple[datetime, datetime]:
        """Half-open [midnight today, midnight tomorrow) around now"""
        start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        return start, start + timedelta(days=1)

    @staticmethod
    def to_millis(dt: datetime) -> int:
        """Epoch milliseconds for an aware or naive-UTC datetime"""
        return int(DateTimeUtils.ensure_aware(dt).timestamp() * 1000)

    @staticmethod
    def from_millis(millis: int, tz=None) -> datetime:
        """Datetime from epoch milliseconds in the given timezone"""
        return datetime.fromtimestamp(millis / 1000, tz=tz or timezone.utc)

    @staticmethod
    def format_clock(dt: Any) -> str:
        """Format a datetime or time as HH:MM"""
        return dt.strftime("%H:%M")


# Convenience functions
def normalize_label(text: Any) -> str:
    return TextUtils.normalize_label(text)

def parse_time_range(label: Any) -> Tuple[Optional[time], Optional[time]]:
    return DateTimeUtils.parse_time_range(label)

def ensure_aware(dt: datetime) -> datetime:
    return DateTimeUtils.ensure_aware(dt)

def day_window(now: datetime) -> Tuple[datetime, datetime]:
    return DateTimeUtils.day_window(now)

def to_millis(dt: datetime) -> int:
    return DateTimeUtils.to_millis(dt)

def from_millis(millis: int, tz=None) -> datetime:
    return DateTimeUtils.from_millis(millis, tz)

def format_clock(dt: Any) -> str:
    return DateTimeUtils.format_clock(dt)

def format_object_id(obj_id: Any) -> str:
    """Convert ObjectId to string"""
    if isinstance(obj_id, ObjectId):
        return str(obj_id)
    return str(obj_id) if obj_id is not None else ""
