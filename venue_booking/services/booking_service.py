from typing import Optional, List, Tuple
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
from datetime import timedelta
import logging

from venue_booking.core.actor import Actor
from venue_booking.models.booking import Booking, BookingStatus, ALLOWED_TRANSITIONS
from venue_booking.models.venue import Venue, VenueType
from venue_booking.models.audit_log import AuditAction, TargetType
from venue_booking.models.notification import NotificationType
from venue_booking.repositories.booking_repository import BookingRepository
from venue_booking.repositories.venue_repository import VenueRepository
from venue_booking.repositories.venue_block_repository import VenueBlockRepository
from venue_booking.repositories.club_repository import ClubRepository
from venue_booking.repositories.audit_log_repository import AuditLogRepository
from venue_booking.repositories.notification_repository import NotificationRepository
from venue_booking.schemas.booking import BookingCreate, BookingUpdate, BookingStatusUpdate
from venue_booking.utils.availability import (
    Conflict,
    InvalidRangeError,
    TimeWindow,
    build_window,
    check_availability,
    local_now,
    window_for,
)
from venue_booking.utils.query_params import parse_enum, parse_date, validate_paging

logger = logging.getLogger(__name__)

STATUS_AUDIT_ACTIONS = {
    BookingStatus.APPROVED: AuditAction.BOOKING_APPROVED,
    BookingStatus.REJECTED: AuditAction.BOOKING_REJECTED,
    BookingStatus.CANCELLED: AuditAction.BOOKING_CANCELLED,
}

STATUS_NOTIFICATIONS = {
    BookingStatus.APPROVED: NotificationType.BOOKING_APPROVED,
    BookingStatus.REJECTED: NotificationType.BOOKING_REJECTED,
    BookingStatus.CANCELLED: NotificationType.BOOKING_CANCELLED,
}


def to_window(from_date, from_time, to_date, to_time) -> TimeWindow:
    try:
        return build_window(from_date, from_time, to_date, to_time)
    except InvalidRangeError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid booking window: {str(e)}"
        )


class BookingService:

    def __init__(self, db: Session):
        self.db = db
        self.booking_repo = BookingRepository(db)
        self.venue_repo = VenueRepository(db)
        self.block_repo = VenueBlockRepository(db)
        self.club_repo = ClubRepository(db)
        self.audit_repo = AuditLogRepository(db)
        self.notification_repo = NotificationRepository(db)

    def _verify_admin(self, actor: Actor) -> None:
        if not actor.is_admin:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Admin role required"
            )

    def _verify_club_access(self, actor: Actor, club_id: str) -> None:
        if not actor.acts_for_club(club_id):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You don't have permission to manage bookings for this club"
            )

    def _get_booking_or_404(self, booking_id: str) -> Booking:
        booking = self.booking_repo.get_by_id(booking_id)
        if not booking:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Booking not found"
            )
        return booking

    def _load_bookable_venue(self, venue_id: str, lock: bool = False) -> Venue:
        if lock:
            venue = self.venue_repo.get_for_update(venue_id)
        else:
            venue = self.venue_repo.get_by_id(venue_id)

        if not venue:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Venue not found"
            )

        if venue.maintenance_mode:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Venue is under maintenance"
            )

        if not venue.is_active:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Venue is currently inactive"
            )

        return venue

    def _enforce_capacity(self, venue: Venue, participants: int) -> None:
        if participants > venue.capacity:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Venue '{venue.name}' holds at most {venue.capacity} participants"
            )

    def _enforce_schedule(self, venue: Venue, window: TimeWindow) -> None:
        """Venue time rules, applied whenever a window is requested or moved."""
        if venue.max_booking_duration_hours and window.duration_hours > venue.max_booking_duration_hours:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Bookings for this venue cannot exceed {venue.max_booking_duration_hours} hours"
            )

        now = local_now()
        if window.start <= now:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot book a venue for a time in the past"
            )

        hours_ahead = (window.start - now).total_seconds() / 3600
        if venue.min_advance_booking_hours and hours_ahead < venue.min_advance_booking_hours:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Booking must be made at least {venue.min_advance_booking_hours} hours in advance"
            )

        if venue.max_advance_booking_days and (window.start.date() - now.date()).days > venue.max_advance_booking_days:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Booking cannot be made more than {venue.max_advance_booking_days} days in advance"
            )

        if not venue.allow_weekend_bookings:
            day = window.start.date()
            last_day = (window.end - timedelta(microseconds=1)).date()
            while day <= last_day:
                if day.weekday() >= 5:
                    raise HTTPException(
                        status_code=status.HTTP_400_BAD_REQUEST,
                        detail="Weekend bookings are not allowed for this venue"
                    )
                day += timedelta(days=1)

        if venue.opens_at and window.start.time() < venue.opens_at:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Venue opens at {venue.opens_at.strftime('%H:%M')}"
            )

        if venue.closes_at and window.end.time() > venue.closes_at:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Venue closes at {venue.closes_at.strftime('%H:%M')}"
            )

    def _ensure_available(
        self,
        venue: Venue,
        window: TimeWindow,
        exclude_booking_id: Optional[str] = None
    ) -> None:
        from_date, to_date = window.start.date(), window.end.date()
        existing = self.booking_repo.list_live_for_venue(venue.id, from_date=from_date, to_date=to_date)
        blocks = self.block_repo.list_for_venue(venue.id, from_date=from_date, to_date=to_date)
        result = check_availability(
            venue.id,
            window,
            existing,
            exclude_booking_id=exclude_booking_id,
            blocks=blocks
        )

        if isinstance(result, Conflict) and result.is_block:
            logger.info(
                f"Rejected booking window {window.describe()} on venue {venue.id}: "
                f"overlaps block {result.block_id}"
            )
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=(
                    f"Venue '{venue.name}' is blocked from "
                    f"{result.window.describe()} ({result.event_name})"
                )
            )

        if isinstance(result, Conflict):
            logger.info(
                f"Rejected booking window {window.describe()} on venue {venue.id}: "
                f"overlaps booking {result.booking_id}"
            )
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=(
                    f"Venue '{venue.name}' is unavailable for the selected time: "
                    f"already booked from {result.window.describe()} for '{result.event_name}'"
                )
            )

    def _slot_taken(self, venue: Venue) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Venue '{venue.name}' is unavailable for the selected time"
        )

    def create_booking(self, actor: Actor, booking_data: BookingCreate) -> Booking:
        """
        Create a pending booking.

        The venue row stays locked from the availability check until the
        insert commits, so concurrent requests for one venue are checked
        one after another.
        """
        self._verify_club_access(actor, booking_data.clubId)

        club = self.club_repo.get_by_id(booking_data.clubId)
        if not club:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Club not found"
            )

        if not club.is_active:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Club is not active"
            )

        window = to_window(
            booking_data.fromDate,
            booking_data.fromTime,
            booking_data.toDate,
            booking_data.toTime
        )

        venue = self._load_bookable_venue(booking_data.venueId, lock=True)
        self._enforce_capacity(venue, booking_data.participants)
        self._enforce_schedule(venue, window)
        self._ensure_available(venue, window)

        try:
            booking = self.booking_repo.create(
                venue_id=venue.id,
                club_id=club.id,
                event_name=booking_data.eventName,
                event_type=booking_data.eventType,
                faculty_in_charge=booking_data.facultyInCharge,
                department=booking_data.department,
                mobile_number=booking_data.mobileNumber,
                participants=booking_data.participants,
                logistics=booking_data.logistics,
                notes=booking_data.notes,
                from_date=window.start.date(),
                to_date=window.end.date(),
                from_time=window.start.time(),
                to_time=window.end.time()
            )
        except IntegrityError:
            logger.warning(f"Integrity error while booking venue {venue.id} for {window.describe()}")
            raise self._slot_taken(venue)

        logger.info(f"Booking {booking.id} created for venue {venue.id} by club {club.id}")

        self.audit_repo.record(
            action=AuditAction.BOOKING_CREATED,
            actor=actor,
            target_type=TargetType.BOOKING,
            target_id=booking.id,
            target_name=booking.event_name,
            details=f"'{booking.event_name}' requested {venue.name} from {window.describe()}",
            metadata={"venueId": venue.id, "clubId": club.id}
        )
        self.notification_repo.create_for_booking(
            booking,
            NotificationType.BOOKING_CREATED,
            f"Your booking of {venue.name} for '{booking.event_name}' "
            f"({window.describe()}) is pending approval"
        )

        return booking

    def update_booking(self, actor: Actor, booking_id: str, booking_data: BookingUpdate) -> Booking:
        booking = self._get_booking_or_404(booking_id)
        self._verify_club_access(actor, booking.club_id)

        window = to_window(
            booking_data.fromDate or booking.from_date,
            booking_data.fromTime or booking.from_time,
            booking_data.toDate or booking.to_date,
            booking_data.toTime or booking.to_time
        )

        # Time rules and the overlap check only apply when the window moves
        window_changed = window != window_for(booking)

        venue = self._load_bookable_venue(booking.venue_id, lock=window_changed)
        self.db.refresh(booking)

        if booking.status != BookingStatus.PENDING:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Only pending bookings can be modified"
            )

        self._enforce_capacity(venue, booking_data.participants or booking.participants)
        if window_changed:
            self._enforce_schedule(venue, window)
            self._ensure_available(venue, window, exclude_booking_id=booking.id)

        field_map = {
            "eventName": "event_name",
            "eventType": "event_type",
            "facultyInCharge": "faculty_in_charge",
            "department": "department",
            "mobileNumber": "mobile_number",
            "participants": "participants",
            "logistics": "logistics",
            "notes": "notes",
        }
        update_dict = {
            field_map[key]: value
            for key, value in booking_data.dict(exclude_unset=True).items()
            if key in field_map and value is not None
        }
        if window_changed:
            update_dict.update(
                from_date=window.start.date(),
                to_date=window.end.date(),
                from_time=window.start.time(),
                to_time=window.end.time()
            )

        try:
            booking = self.booking_repo.update(booking, **update_dict)
        except IntegrityError:
            raise self._slot_taken(venue)

        self.audit_repo.record(
            action=AuditAction.BOOKING_UPDATED,
            actor=actor,
            target_type=TargetType.BOOKING,
            target_id=booking.id,
            target_name=booking.event_name,
            details=f"Booking '{booking.event_name}' updated to {window.describe()}",
            metadata={"updatedFields": sorted(update_dict.keys())}
        )
        self.notification_repo.create_for_booking(
            booking,
            NotificationType.BOOKING_MODIFIED,
            f"Your booking for '{booking.event_name}' now runs {window.describe()}"
        )

        return booking

    def _apply_status(
        self,
        actor: Actor,
        booking: Booking,
        new_status: BookingStatus,
        reason: Optional[str] = None
    ) -> Booking:
        old_status = booking.status
        if new_status not in ALLOWED_TRANSITIONS[old_status]:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Cannot change booking status from '{old_status.value}' to '{new_status.value}'"
            )

        reviewed_by = actor.id if new_status in (BookingStatus.APPROVED, BookingStatus.REJECTED) else None
        booking = self.booking_repo.set_status(
            booking,
            new_status,
            reviewed_by=reviewed_by,
            rejection_reason=reason
        )

        logger.info(f"Booking {booking.id} moved from {old_status.value} to {new_status.value} by {actor.id}")

        self.audit_repo.record(
            action=STATUS_AUDIT_ACTIONS[new_status],
            actor=actor,
            target_type=TargetType.BOOKING,
            target_id=booking.id,
            target_name=booking.event_name,
            details=f"Booking '{booking.event_name}' {new_status.value}" + (f": {reason}" if reason else ""),
            metadata={"from": old_status.value, "to": new_status.value}
        )

        message = f"Your booking for '{booking.event_name}' was {new_status.value}"
        if reason:
            message += f". Reason: {reason}"
        self.notification_repo.create_for_booking(booking, STATUS_NOTIFICATIONS[new_status], message)

        return booking

    def update_status(self, actor: Actor, booking_id: str, status_data: BookingStatusUpdate) -> Booking:
        self._verify_admin(actor)
        booking = self._get_booking_or_404(booking_id)
        return self._apply_status(actor, booking, BookingStatus(status_data.status), status_data.reason)

    def cancel_booking(self, actor: Actor, booking_id: str, reason: Optional[str] = None) -> Booking:
        booking = self._get_booking_or_404(booking_id)
        self._verify_club_access(actor, booking.club_id)
        return self._apply_status(actor, booking, BookingStatus.CANCELLED, reason)

    def delete_booking(self, actor: Actor, booking_id: str) -> None:
        booking = self._get_booking_or_404(booking_id)
        self._verify_club_access(actor, booking.club_id)

        if booking.status != BookingStatus.PENDING:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Only pending bookings can be deleted"
            )

        booking_name = booking.event_name
        self.notification_repo.delete_for_booking(booking.id)
        self.booking_repo.delete(booking)

        self.audit_repo.record(
            action=AuditAction.BOOKING_DELETED,
            actor=actor,
            target_type=TargetType.BOOKING,
            target_id=booking_id,
            target_name=booking_name,
            details=f"Pending booking '{booking_name}' deleted"
        )

    def get_booking(self, actor: Actor, booking_id: str) -> Booking:
        booking = self._get_booking_or_404(booking_id)
        self._verify_club_access(actor, booking.club_id)
        return booking

    def list_bookings(
        self,
        actor: Actor,
        venue_id: Optional[str] = None,
        venue_type: Optional[str] = None,
        status_filter: Optional[str] = None,
        department: Optional[str] = None,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[Booking], int]:
        self._verify_admin(actor)
        validate_paging(page, limit)

        return self.booking_repo.get_all(
            venue_id=venue_id,
            venue_type=parse_enum(VenueType, venue_type, "venueType"),
            status=parse_enum(BookingStatus, status_filter, "status"),
            department=department,
            from_date=parse_date(from_date, "fromDate"),
            to_date=parse_date(to_date, "toDate"),
            page=page,
            limit=limit
        )

    def list_club_bookings(
        self,
        actor: Actor,
        club_id: str,
        status_filter: Optional[str] = None
    ) -> List[Booking]:
        self._verify_club_access(actor, club_id)

        if not self.club_repo.get_by_id(club_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Club not found"
            )

        return self.booking_repo.get_by_club(club_id, status=parse_enum(BookingStatus, status_filter, "status"))

    def list_venue_bookings(self, venue_id: str, status_filter: Optional[str] = None) -> List[Booking]:
        if not self.venue_repo.get_by_id(venue_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Venue not found"
            )

        return self.booking_repo.get_by_venue(venue_id, status=parse_enum(BookingStatus, status_filter, "status"))

    def get_statistics(
        self,
        actor: Actor,
        venue_type: Optional[str] = None,
        department: Optional[str] = None
    ) -> dict:
        self._verify_admin(actor)
        return self.booking_repo.get_statistics(
            venue_type=parse_enum(VenueType, venue_type, "venueType"),
            department=department
        )
