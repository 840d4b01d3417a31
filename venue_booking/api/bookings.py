from typing import Optional
from fastapi import APIRouter, Depends, Body, status
from sqlalchemy.orm import Session

from venue_booking.api.deps import get_actor
from venue_booking.core.actor import Actor
from venue_booking.core.database import get_db
from venue_booking.schemas.booking import BookingCreate, BookingUpdate, BookingStatusUpdate
from venue_booking.services.booking_service import BookingService
from venue_booking.utils.query_params import pagination

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.get("")
def list_bookings(
    venueId: Optional[str] = None,
    venueType: Optional[str] = None,
    status: Optional[str] = None,
    department: Optional[str] = None,
    fromDate: Optional[str] = None,
    toDate: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db)
) -> dict:
    bookings, total = BookingService(db).list_bookings(
        actor,
        venue_id=venueId,
        venue_type=venueType,
        status_filter=status,
        department=department,
        from_date=fromDate,
        to_date=toDate,
        page=page,
        limit=limit
    )
    return {
        "success": True,
        "bookings": [booking.to_dict(include_venue=True, include_club=True) for booking in bookings],
        "pagination": pagination(page, limit, total)
    }


@router.get("/stats")
def get_booking_stats(
    venueType: Optional[str] = None,
    department: Optional[str] = None,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db)
) -> dict:
    stats = BookingService(db).get_statistics(actor, venue_type=venueType, department=department)
    return {"success": True, "statistics": stats}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: BookingCreate,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db)
) -> dict:
    booking = BookingService(db).create_booking(actor, payload)
    return {
        "success": True,
        "message": "Booking created successfully",
        "booking": booking.to_dict(include_venue=True, include_club=True)
    }


@router.get("/{booking_id}")
def get_booking(
    booking_id: str,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db)
) -> dict:
    booking = BookingService(db).get_booking(actor, booking_id)
    return {"success": True, "booking": booking.to_dict(include_venue=True, include_club=True)}


@router.put("/{booking_id}")
def update_booking(
    booking_id: str,
    payload: BookingUpdate,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db)
) -> dict:
    booking = BookingService(db).update_booking(actor, booking_id, payload)
    return {
        "success": True,
        "message": "Booking updated successfully",
        "booking": booking.to_dict(include_venue=True, include_club=True)
    }


@router.put("/{booking_id}/status")
def update_booking_status(
    booking_id: str,
    payload: BookingStatusUpdate,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db)
) -> dict:
    booking = BookingService(db).update_status(actor, booking_id, payload)
    return {
        "success": True,
        "message": f"Booking {booking.status.value} successfully",
        "booking": booking.to_dict(include_venue=True, include_club=True)
    }


@router.post("/{booking_id}/cancel")
def cancel_booking(
    booking_id: str,
    reason: Optional[str] = Body(None, embed=True),
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db)
) -> dict:
    booking = BookingService(db).cancel_booking(actor, booking_id, reason=reason)
    return {
        "success": True,
        "message": "Booking cancelled successfully",
        "booking": booking.to_dict(include_venue=True, include_club=True)
    }


@router.delete("/{booking_id}")
def delete_booking(
    booking_id: str,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db)
) -> dict:
    BookingService(db).delete_booking(actor, booking_id)
    return {"success": True, "message": "Booking deleted successfully"}
