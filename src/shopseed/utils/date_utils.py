from datetime import datetime, timezone
from typing import Optional, Tuple

import pytz
from dateutil import parser as date_parser


class DateUtils:
    """
    Date/time helpers for the importer

    Key Features:
    - Timezone-aware datetime handling (everything is stored in UTC)
    - Flexible parsing of the free-form timestamps found in source files
    - Explicit default substitution for values that cannot be parsed
    """

    UTC = timezone.utc

    @classmethod
    def now_utc(cls) -> datetime:
        """Get current UTC datetime - always use this for database storage"""
        return datetime.now(cls.UTC)

    @classmethod
    def to_utc(cls, dt: datetime, source_timezone: Optional[str] = None) -> datetime:
        """
        Convert datetime to UTC

        Args:
            dt: datetime to convert
            source_timezone: source timezone (if dt is naive)
        """
        if dt.tzinfo is None:
            if source_timezone:
                tz = pytz.timezone(source_timezone)
                dt = tz.localize(dt)
            else:
                # Assume UTC if no timezone specified
                dt = dt.replace(tzinfo=cls.UTC)

        return dt.astimezone(cls.UTC)

    @classmethod
    def parse_flexible(cls, date_string: str, source_timezone: Optional[str] = None) -> datetime:
        """
        Parse a date string in any format dateutil understands

        Handles e.g.:
        - 2024-01-03T10:30:00Z
        - 2024-01-03 10:30:00
        - Jan 3, 2024
        - 01/03/2024 10:30 AM

        Raises ValueError when the string is not a date.
        """
        try:
            parsed_dt = date_parser.parse(date_string)
        except (ValueError, TypeError, OverflowError) as e:
            raise ValueError(f"Invalid date format: {date_string}") from e

        return cls.to_utc(parsed_dt, source_timezone)

    @classmethod
    def parse_or_default(
        cls,
        raw: Optional[str],
        default: datetime,
        source_timezone: Optional[str] = None
    ) -> Tuple[datetime, bool]:
        """
        Parse raw, substituting default when it is missing or not a date

        Returns (value, was_defaulted) so callers can count substitutions.
        """
        if raw is None or not raw.strip():
            return default, True

        try:
            return cls.parse_flexible(raw.strip(), source_timezone), False
        except ValueError:
            return default, True
