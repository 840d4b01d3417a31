from typing import Optional, List
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
import logging

from venue_booking.core.actor import Actor
from venue_booking.models.club import Club
from venue_booking.models.audit_log import AuditAction, TargetType
from venue_booking.repositories.club_repository import ClubRepository
from venue_booking.repositories.audit_log_repository import AuditLogRepository
from venue_booking.schemas.club import ClubCreate, ClubUpdate

logger = logging.getLogger(__name__)


class ClubService:

    def __init__(self, db: Session):
        self.db = db
        self.club_repo = ClubRepository(db)
        self.audit_repo = AuditLogRepository(db)

    def _verify_admin(self, actor: Actor) -> None:
        if not actor.is_admin:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Admin role required"
            )

    def _ensure_name_free(self, name: str, club_id: Optional[str] = None) -> None:
        existing = self.club_repo.get_by_name(name)
        if existing and existing.id != club_id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"A club named '{name}' already exists"
            )

    def get_club(self, club_id: str) -> Club:
        club = self.club_repo.get_by_id(club_id)
        if not club:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Club not found"
            )
        return club

    def list_clubs(self, include_inactive: bool = False, department: Optional[str] = None) -> List[Club]:
        return self.club_repo.get_all(active_only=not include_inactive, department=department)

    def create_club(self, actor: Actor, club_data: ClubCreate) -> Club:
        self._verify_admin(actor)
        self._ensure_name_free(club_data.name)

        try:
            club = self.club_repo.create(
                name=club_data.name,
                department=club_data.department,
                faculty_coordinator=club_data.facultyCoordinator,
                contact_email=club_data.contactEmail,
                contact_phone=club_data.contactPhone
            )
        except IntegrityError:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"A club named '{club_data.name}' already exists"
            )

        logger.info(f"Club {club.id} ({club.name}) created by {actor.id}")
        self.audit_repo.record(
            action=AuditAction.CLUB_CREATED,
            actor=actor,
            target_type=TargetType.CLUB,
            target_id=club.id,
            target_name=club.name,
            details=f"Club '{club.name}' created for {club.department}"
        )
        return club

    def update_club(self, actor: Actor, club_id: str, club_data: ClubUpdate) -> Club:
        club = self.get_club(club_id)
        if not actor.acts_for_club(club.id):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You don't have permission to manage this club"
            )

        field_map = {
            "name": "name",
            "department": "department",
            "facultyCoordinator": "faculty_coordinator",
            "contactEmail": "contact_email",
            "contactPhone": "contact_phone",
        }
        update_dict = {
            field_map[key]: value
            for key, value in club_data.dict(exclude_unset=True).items()
            if key in field_map and value is not None
        }

        if "name" in update_dict:
            self._ensure_name_free(update_dict["name"], club_id=club.id)

        if not update_dict:
            return club

        club = self.club_repo.update(club, **update_dict)

        self.audit_repo.record(
            action=AuditAction.CLUB_UPDATED,
            actor=actor,
            target_type=TargetType.CLUB,
            target_id=club.id,
            target_name=club.name,
            details=f"Club '{club.name}' updated",
            metadata={"updatedFields": sorted(update_dict.keys())}
        )
        return club

    def deactivate_club(self, actor: Actor, club_id: str) -> Club:
        self._verify_admin(actor)
        club = self.get_club(club_id)

        if not club.is_active:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Club is already inactive"
            )

        club = self.club_repo.deactivate(club)

        self.audit_repo.record(
            action=AuditAction.CLUB_DEACTIVATED,
            actor=actor,
            target_type=TargetType.CLUB,
            target_id=club.id,
            target_name=club.name,
            details=f"Club '{club.name}' deactivated"
        )
        return club
