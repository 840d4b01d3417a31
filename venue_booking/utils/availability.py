"""
Venue availability checking.

A booking occupies the half-open window [fromDate + fromTime, toDate + toTime).
Two windows conflict when each starts before the other ends, so a booking that
starts exactly when another ends is not a conflict.

Dates and times are combined into naive wall-clock datetimes in the campus
timezone (``settings.TIMEZONE``). No UTC conversion happens anywhere.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Iterable, Optional, Union
from zoneinfo import ZoneInfo

from venue_booking.core.config import settings
from venue_booking.models.booking import BookingStatus, LIVE_STATUSES
from venue_booking.models.venue_block import BlockType

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"

DateLike = Union[str, date, None]
TimeLike = Union[str, time, None]


class InvalidRangeError(ValueError):
    """Raised for a missing, unparseable or non-positive booking window."""


@dataclass(frozen=True)
class TimeWindow:
    start: datetime
    end: datetime
    
    def overlaps(self, other: "TimeWindow") -> bool:
        return self.start < other.end and other.start < self.end
    
    @property
    def duration_hours(self) -> float:
        return (self.end - self.start).total_seconds() / 3600
    
    def describe(self) -> str:
        return f"{self.start.strftime('%Y-%m-%d %H:%M')} to {self.end.strftime('%Y-%m-%d %H:%M')}"


@dataclass(frozen=True)
class Available:
    available = True


@dataclass(frozen=True)
class Conflict:
    """
    The window that stands in the way. ``booking_id`` is set for a live
    booking and ``block_id`` for an admin block on the venue.
    """
    booking_id: Optional[str]
    window: TimeWindow
    event_name: Optional[str] = None
    block_id: Optional[str] = None
    
    available = False
    
    @property
    def is_block(self) -> bool:
        return self.block_id is not None


AvailabilityResult = Union[Available, Conflict]


def _parse_date(value: DateLike, field: str) -> date:
    if value is None or value == "":
        raise InvalidRangeError(f"{field} is required")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value), DATE_FORMAT).date()
    except ValueError:
        raise InvalidRangeError(f"{field} must be in YYYY-MM-DD format")


def _parse_time(value: TimeLike, field: str) -> time:
    if value is None or value == "":
        raise InvalidRangeError(f"{field} is required")
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    try:
        return datetime.strptime(str(value), TIME_FORMAT).time()
    except ValueError:
        raise InvalidRangeError(f"{field} must be in HH:MM format (24-hour)")


def build_window(
    from_date: DateLike,
    from_time: TimeLike,
    to_date: DateLike,
    to_time: TimeLike
) -> TimeWindow:
    """
    Combine the four wire fields into a single comparable window.
    
    Raises:
        InvalidRangeError: If a field is missing or unparseable, or if the
            window does not end strictly after it starts.
    """
    start = datetime.combine(_parse_date(from_date, "fromDate"), _parse_time(from_time, "fromTime"))
    end = datetime.combine(_parse_date(to_date, "toDate"), _parse_time(to_time, "toTime"))
    
    if end <= start:
        raise InvalidRangeError("Booking must end after it starts")
    
    return TimeWindow(start=start, end=end)


def window_for(booking: Any) -> TimeWindow:
    return build_window(booking.from_date, booking.from_time, booking.to_date, booking.to_time)


def is_live(booking: Any) -> bool:
    return BookingStatus(booking.status) in LIVE_STATUSES


def check_availability(
    venue_id: str,
    proposed: TimeWindow,
    existing: Iterable[Any],
    exclude_booking_id: Optional[str] = None,
    blocks: Iterable[Any] = ()
) -> AvailabilityResult:
    """
    Classify a proposed window against the existing bookings of a venue.
    
    ``existing`` may hold any objects exposing ``id``, ``venue_id``, ``status``
    and the four date/time fields. Bookings for other venues, the excluded
    booking and bookings that are not live are ignored. ``blocks`` are admin
    blocks on the venue; they carry no status and always conflict. When
    several windows overlap, the earliest-starting one is reported.
    """
    conflicts = []
    for booking in existing:
        if str(booking.venue_id) != str(venue_id):
            continue
        if exclude_booking_id is not None and str(booking.id) == str(exclude_booking_id):
            continue
        if not is_live(booking):
            continue
        
        window = window_for(booking)
        if proposed.overlaps(window):
            conflict = Conflict(
                booking_id=str(booking.id),
                window=window,
                event_name=getattr(booking, "event_name", None)
            )
            conflicts.append((window.start, str(booking.id), conflict))
    
    for block in blocks:
        if str(block.venue_id) != str(venue_id):
            continue
        
        window = window_for(block)
        if proposed.overlaps(window):
            conflict = Conflict(
                booking_id=None,
                window=window,
                event_name=block.reason or f"{BlockType(block.block_type).value} block",
                block_id=str(block.id)
            )
            conflicts.append((window.start, str(block.id), conflict))
    
    if not conflicts:
        return Available()
    
    _, conflict_id, conflict = min(conflicts, key=lambda item: (item[0], item[1]))
    logger.debug(f"Venue {venue_id} window {proposed.describe()} conflicts with {conflict_id}")
    return conflict


def campus_now() -> datetime:
    """Current time in the campus timezone, timezone-aware."""
    return datetime.now(ZoneInfo(settings.TIMEZONE))


def local_now() -> datetime:
    """Current wall-clock time in the campus timezone, without tzinfo."""
    return campus_now().replace(tzinfo=None)
