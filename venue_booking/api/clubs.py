from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from venue_booking.api.deps import get_actor
from venue_booking.core.actor import Actor
from venue_booking.core.database import get_db
from venue_booking.schemas.club import ClubCreate, ClubUpdate, ClubsResponse, ClubDetailResponse
from venue_booking.services.booking_service import BookingService
from venue_booking.services.club_service import ClubService

router = APIRouter(prefix="/clubs", tags=["clubs"])


@router.get("", response_model=ClubsResponse)
def list_clubs(
    includeInactive: bool = False,
    department: Optional[str] = None,
    db: Session = Depends(get_db)
) -> dict:
    clubs = ClubService(db).list_clubs(include_inactive=includeInactive, department=department)
    return {"success": True, "clubs": [club.to_dict() for club in clubs]}


@router.post("", response_model=ClubDetailResponse, status_code=status.HTTP_201_CREATED)
def create_club(
    payload: ClubCreate,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db)
) -> dict:
    club = ClubService(db).create_club(actor, payload)
    return {"success": True, "club": club.to_dict()}


@router.get("/{club_id}", response_model=ClubDetailResponse)
def get_club(club_id: str, db: Session = Depends(get_db)) -> dict:
    club = ClubService(db).get_club(club_id)
    return {"success": True, "club": club.to_dict()}


@router.put("/{club_id}", response_model=ClubDetailResponse)
def update_club(
    club_id: str,
    payload: ClubUpdate,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db)
) -> dict:
    club = ClubService(db).update_club(actor, club_id, payload)
    return {"success": True, "club": club.to_dict()}


@router.delete("/{club_id}", response_model=ClubDetailResponse)
def deactivate_club(
    club_id: str,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db)
) -> dict:
    club = ClubService(db).deactivate_club(actor, club_id)
    return {"success": True, "club": club.to_dict()}


@router.get("/{club_id}/bookings")
def list_club_bookings(
    club_id: str,
    status: Optional[str] = None,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db)
) -> dict:
    bookings = BookingService(db).list_club_bookings(actor, club_id, status_filter=status)
    return {"success": True, "bookings": [booking.to_dict(include_venue=True) for booking in bookings]}
