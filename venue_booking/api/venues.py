from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from venue_booking.api.deps import get_actor
from venue_booking.core.actor import Actor
from venue_booking.core.database import get_db
from venue_booking.schemas.booking import AvailabilityResponse, BookingWindow
from venue_booking.schemas.venue_block import VenueBlockCreate, VenueBlockBulkCreate, VenueBlocksResponse
from venue_booking.schemas.venue import (
    VenueCreate,
    VenueUpdate,
    VenueMaintenanceUpdate,
    VenuesResponse,
    VenueDetailResponse,
)
from venue_booking.services.booking_service import BookingService
from venue_booking.services.venue_service import VenueService
from venue_booking.utils.query_params import pagination

router = APIRouter(prefix="/venues", tags=["venues"])


@router.get("", response_model=VenuesResponse)
def list_venues(
    department: Optional[str] = None,
    venueType: Optional[str] = None,
    isActive: Optional[bool] = None,
    page: int = 1,
    limit: int = 10,
    db: Session = Depends(get_db)
) -> dict:
    venues, total = VenueService(db).list_venues(
        department=department,
        venue_type=venueType,
        is_active=isActive,
        page=page,
        limit=limit
    )
    return {
        "success": True,
        "venues": [venue.to_dict() for venue in venues],
        "pagination": pagination(page, limit, total)
    }


@router.get("/available", response_model=VenuesResponse)
def list_available_venues(
    window: BookingWindow = Depends(),
    venueType: Optional[str] = None,
    minCapacity: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db)
) -> dict:
    venues = VenueService(db).find_available_venues(window, venue_type=venueType, min_capacity=minCapacity)
    return {"success": True, "venues": [venue.to_dict() for venue in venues]}


@router.post("", response_model=VenueDetailResponse, status_code=status.HTTP_201_CREATED)
def create_venue(
    payload: VenueCreate,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db)
) -> dict:
    venue = VenueService(db).create_venue(actor, payload)
    return {"success": True, "venue": venue.to_dict()}


@router.get("/{venue_id}", response_model=VenueDetailResponse)
def get_venue(venue_id: str, db: Session = Depends(get_db)) -> dict:
    venue = VenueService(db).get_venue(venue_id)
    return {"success": True, "venue": venue.to_dict()}


@router.put("/{venue_id}", response_model=VenueDetailResponse)
def update_venue(
    venue_id: str,
    payload: VenueUpdate,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db)
) -> dict:
    venue = VenueService(db).update_venue(actor, venue_id, payload)
    return {"success": True, "venue": venue.to_dict()}


@router.put("/{venue_id}/maintenance", response_model=VenueDetailResponse)
def set_venue_maintenance(
    venue_id: str,
    payload: VenueMaintenanceUpdate,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db)
) -> dict:
    venue = VenueService(db).set_maintenance(actor, venue_id, payload)
    return {"success": True, "venue": venue.to_dict()}


@router.post("/{venue_id}/availability", response_model=AvailabilityResponse)
def check_venue_availability(
    venue_id: str,
    payload: BookingWindow,
    db: Session = Depends(get_db)
) -> dict:
    return VenueService(db).check_venue_availability(venue_id, payload)


@router.get("/{venue_id}/bookings")
def list_venue_bookings(
    venue_id: str,
    status: Optional[str] = None,
    db: Session = Depends(get_db)
) -> dict:
    bookings = BookingService(db).list_venue_bookings(venue_id, status_filter=status)
    return {"success": True, "bookings": [booking.to_dict(include_club=True) for booking in bookings]}


@router.get("/{venue_id}/blocks", response_model=VenueBlocksResponse)
def list_venue_blocks(
    venue_id: str,
    fromDate: Optional[str] = None,
    toDate: Optional[str] = None,
    db: Session = Depends(get_db)
) -> dict:
    blocks = VenueService(db).list_blocks(venue_id, from_date=fromDate, to_date=toDate)
    return {"success": True, "blocks": [block.to_dict() for block in blocks]}


@router.post("/{venue_id}/blocks", response_model=VenueBlocksResponse, status_code=status.HTTP_201_CREATED)
def block_venue(
    venue_id: str,
    payload: VenueBlockCreate,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db)
) -> dict:
    blocks, overlapping = VenueService(db).create_blocks(actor, venue_id, [payload])
    return {
        "success": True,
        "blocks": [block.to_dict() for block in blocks],
        "overlappingBookingIds": overlapping
    }


@router.post("/{venue_id}/blocks/bulk", response_model=VenueBlocksResponse, status_code=status.HTTP_201_CREATED)
def bulk_block_venue(
    venue_id: str,
    payload: VenueBlockBulkCreate,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db)
) -> dict:
    blocks, overlapping = VenueService(db).create_blocks(actor, venue_id, payload.blocks)
    return {
        "success": True,
        "blocks": [block.to_dict() for block in blocks],
        "overlappingBookingIds": overlapping
    }


@router.delete("/{venue_id}/blocks/{block_id}")
def unblock_venue(
    venue_id: str,
    block_id: str,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db)
) -> dict:
    VenueService(db).delete_block(actor, venue_id, block_id)
    return {"success": True, "message": "Venue block removed successfully"}
