from typing import Optional, List, Tuple
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
from datetime import time
import logging

from venue_booking.core.actor import Actor
from venue_booking.models.venue import Venue, VenueType
from venue_booking.models.venue_block import VenueBlock
from venue_booking.models.audit_log import AuditAction, TargetType
from venue_booking.repositories.venue_repository import VenueRepository
from venue_booking.repositories.venue_block_repository import VenueBlockRepository
from venue_booking.repositories.booking_repository import BookingRepository
from venue_booking.repositories.audit_log_repository import AuditLogRepository
from venue_booking.schemas.venue import VenueCreate, VenueUpdate, VenueMaintenanceUpdate, BookingRules
from venue_booking.schemas.venue_block import VenueBlockCreate
from venue_booking.schemas.booking import BookingWindow
from venue_booking.services.booking_service import to_window
from venue_booking.utils.availability import (
    AvailabilityResult,
    Conflict,
    TimeWindow,
    check_availability,
    window_for,
)
from venue_booking.utils.query_params import parse_enum, parse_date, validate_paging

logger = logging.getLogger(__name__)

RULE_COLUMNS = {
    "maxAdvanceBookingDays": "max_advance_booking_days",
    "minAdvanceBookingHours": "min_advance_booking_hours",
    "maxBookingDurationHours": "max_booking_duration_hours",
    "allowWeekendBookings": "allow_weekend_bookings",
    "opensAt": "opens_at",
    "closesAt": "closes_at",
}
CLOCK_FIELDS = ("opensAt", "closesAt")


def _clock(value: Optional[str]) -> Optional[time]:
    return time.fromisoformat(value) if value else None


def _rule_columns(rules: BookingRules, exclude_unset: bool = False) -> dict:
    """Map rule fields onto venue columns. With ``exclude_unset`` only the fields sent are mapped."""
    columns = {}
    for key, value in rules.dict(exclude_unset=exclude_unset).items():
        columns[RULE_COLUMNS[key]] = _clock(value) if key in CLOCK_FIELDS else value
    return columns


class VenueService:

    def __init__(self, db: Session):
        self.db = db
        self.venue_repo = VenueRepository(db)
        self.block_repo = VenueBlockRepository(db)
        self.booking_repo = BookingRepository(db)
        self.audit_repo = AuditLogRepository(db)

    def _verify_admin(self, actor: Actor) -> None:
        if not actor.is_admin:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Admin role required"
            )

    def get_venue(self, venue_id: str) -> Venue:
        venue = self.venue_repo.get_by_id(venue_id)
        if not venue:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Venue not found"
            )
        return venue

    def list_venues(
        self,
        department: Optional[str] = None,
        venue_type: Optional[str] = None,
        is_active: Optional[bool] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[Venue], int]:
        validate_paging(page, limit)
        return self.venue_repo.get_all(
            department=department,
            venue_type=parse_enum(VenueType, venue_type, "venueType"),
            is_active=is_active,
            page=page,
            limit=limit
        )

    def create_venue(self, actor: Actor, venue_data: VenueCreate) -> Venue:
        self._verify_admin(actor)

        venue = self.venue_repo.create(
            name=venue_data.name,
            venue_type=venue_data.venueType,
            department=venue_data.department,
            capacity=venue_data.capacity,
            location=venue_data.location,
            faculty_in_charge=venue_data.facultyInCharge,
            faculty_contact=venue_data.facultyContact,
            features=venue_data.features,
            **_rule_columns(venue_data.bookingRules)
        )

        logger.info(f"Venue {venue.id} ({venue.name}) created by {actor.id}")
        self.audit_repo.record(
            action=AuditAction.VENUE_CREATED,
            actor=actor,
            target_type=TargetType.VENUE,
            target_id=venue.id,
            target_name=venue.name,
            details=f"Venue '{venue.name}' created in {venue.department}"
        )
        return venue

    def update_venue(self, actor: Actor, venue_id: str, venue_data: VenueUpdate) -> Venue:
        self._verify_admin(actor)
        venue = self.get_venue(venue_id)

        field_map = {
            "name": "name",
            "venueType": "venue_type",
            "department": "department",
            "location": "location",
            "capacity": "capacity",
            "facultyInCharge": "faculty_in_charge",
            "facultyContact": "faculty_contact",
            "features": "features",
        }

        update_dict = {}
        for key, value in venue_data.dict(exclude_unset=True).items():
            if key in field_map and value is not None:
                update_dict[field_map[key]] = value

        if venue_data.bookingRules is not None:
            update_dict.update(_rule_columns(venue_data.bookingRules, exclude_unset=True))

        opens_at = update_dict.get("opens_at", venue.opens_at)
        closes_at = update_dict.get("closes_at", venue.closes_at)
        if opens_at and closes_at and closes_at <= opens_at:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Closing time must be after opening time"
            )

        if not update_dict:
            return venue

        venue = self.venue_repo.update(venue, **update_dict)

        self.audit_repo.record(
            action=AuditAction.VENUE_UPDATED,
            actor=actor,
            target_type=TargetType.VENUE,
            target_id=venue.id,
            target_name=venue.name,
            details=f"Venue '{venue.name}' updated",
            metadata={"updatedFields": sorted(update_dict.keys())}
        )
        return venue

    def set_maintenance(self, actor: Actor, venue_id: str, maintenance_data: VenueMaintenanceUpdate) -> Venue:
        self._verify_admin(actor)
        venue = self.get_venue(venue_id)

        venue = self.venue_repo.set_maintenance(
            venue,
            enabled=maintenance_data.maintenanceMode,
            reason=maintenance_data.reason
        )

        state = "entered" if venue.maintenance_mode else "left"
        logger.info(f"Venue {venue.id} {state} maintenance mode")
        self.audit_repo.record(
            action=AuditAction.VENUE_MAINTENANCE,
            actor=actor,
            target_type=TargetType.VENUE,
            target_id=venue.id,
            target_name=venue.name,
            details=f"Venue '{venue.name}' {state} maintenance mode"
            + (f": {maintenance_data.reason}" if venue.maintenance_mode and maintenance_data.reason else "")
        )
        return venue

    def list_blocks(
        self,
        venue_id: str,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None
    ) -> List[VenueBlock]:
        venue = self.get_venue(venue_id)
        return self.block_repo.list_for_venue(
            venue.id,
            from_date=parse_date(from_date, "fromDate"),
            to_date=parse_date(to_date, "toDate")
        )

    def create_blocks(
        self,
        actor: Actor,
        venue_id: str,
        blocks_data: List[VenueBlockCreate]
    ) -> Tuple[List[VenueBlock], List[str]]:
        """
        Block one or more windows on a venue. Either every block is stored or
        none is. Live bookings already inside a block are not touched; their
        ids are returned so an admin can follow up with the clubs.
        """
        self._verify_admin(actor)

        venue = self.venue_repo.get_for_update(venue_id)
        if not venue:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Venue not found"
            )

        blocks = []
        seen = set()
        for block_data in blocks_data:
            window = to_window(block_data.fromDate, block_data.fromTime, block_data.toDate, block_data.toTime)
            key = (window.start, window.end)
            duplicate = key in seen or self.block_repo.find_exact(
                venue.id,
                window.start.date(),
                window.start.time(),
                window.end.date(),
                window.end.time()
            )
            if duplicate:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Venue '{venue.name}' is already blocked from {window.describe()}"
                )
            seen.add(key)

            blocks.append(self.block_repo.build(
                venue_id=venue.id,
                from_date=window.start.date(),
                from_time=window.start.time(),
                to_date=window.end.date(),
                to_time=window.end.time(),
                block_type=block_data.blockType,
                reason=block_data.reason,
                created_by=actor.id
            ))

        try:
            blocks = self.block_repo.create_many(blocks)
        except IntegrityError:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Could not block venue '{venue.name}'"
            )

        overlapping = set()
        for block in blocks:
            window = window_for(block)
            overlapping.update(
                booking.id
                for booking in self.booking_repo.list_live_for_venue(venue.id, window.start.date(), window.end.date())
                if window_for(booking).overlaps(window)
            )

            self.audit_repo.record(
                action=AuditAction.VENUE_BLOCKED,
                actor=actor,
                target_type=TargetType.VENUE,
                target_id=venue.id,
                target_name=venue.name,
                details=f"Venue '{venue.name}' blocked from {window.describe()}"
                + (f": {block.reason}" if block.reason else ""),
                metadata={"blockId": block.id, "blockType": block.block_type.value}
            )

        logger.info(f"{len(blocks)} block(s) added to venue {venue.id} by {actor.id}")
        if overlapping:
            logger.warning(f"Blocks on venue {venue.id} overlap live bookings {sorted(overlapping)}")

        return blocks, sorted(overlapping)

    def delete_block(self, actor: Actor, venue_id: str, block_id: str) -> None:
        self._verify_admin(actor)

        block = self.block_repo.get_by_id(block_id)
        if not block or block.venue_id != venue_id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Venue block not found"
            )

        venue = block.venue
        window = window_for(block)
        self.block_repo.delete(block)

        self.audit_repo.record(
            action=AuditAction.VENUE_UNBLOCKED,
            actor=actor,
            target_type=TargetType.VENUE,
            target_id=venue.id,
            target_name=venue.name,
            details=f"Block on venue '{venue.name}' from {window.describe()} removed",
            metadata={"blockId": block_id}
        )

    def _classify(self, venue_id: str, window: TimeWindow) -> AvailabilityResult:
        from_date, to_date = window.start.date(), window.end.date()
        return check_availability(
            venue_id,
            window,
            self.booking_repo.list_live_for_venue(venue_id, from_date, to_date),
            blocks=self.block_repo.list_for_venue(venue_id, from_date, to_date)
        )

    def check_venue_availability(self, venue_id: str, window_data: BookingWindow) -> dict:
        """
        Advisory availability preview. The booking workflow repeats the check
        under a lock when the booking is actually created.
        """
        venue = self.get_venue(venue_id)
        window = to_window(window_data.fromDate, window_data.fromTime, window_data.toDate, window_data.toTime)

        if not venue.is_bookable:
            return {"success": True, "venueId": venue.id, "available": False, "conflict": None}

        result = self._classify(venue.id, window)

        conflict = None
        if isinstance(result, Conflict):
            conflict = {
                "bookingId": result.booking_id,
                "blockId": result.block_id,
                "eventName": result.event_name,
                "start": result.window.start.strftime("%Y-%m-%d %H:%M"),
                "end": result.window.end.strftime("%Y-%m-%d %H:%M"),
            }

        return {
            "success": True,
            "venueId": venue.id,
            "available": result.available,
            "conflict": conflict
        }

    def find_available_venues(
        self,
        window_data: BookingWindow,
        venue_type: Optional[str] = None,
        min_capacity: Optional[int] = None
    ) -> List[Venue]:
        window = to_window(window_data.fromDate, window_data.fromTime, window_data.toDate, window_data.toTime)
        candidates = self.venue_repo.get_bookable(
            venue_type=parse_enum(VenueType, venue_type, "venueType"),
            min_capacity=min_capacity
        )

        return [venue for venue in candidates if self._classify(venue.id, window).available]
