from typing import Optional, List
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from venue_booking.models.club import Club
import uuid


class ClubRepository:
    
    def __init__(self, db: Session):
        self.db = db
    
    def get_by_id(self, club_id: str) -> Optional[Club]:
        return self.db.query(Club).filter(Club.id == club_id).first()
    
    def get_by_name(self, name: str) -> Optional[Club]:
        return self.db.query(Club).filter(Club.name.ilike(name.strip())).first()
    
    def get_all(
        self,
        active_only: bool = True,
        department: Optional[str] = None
    ) -> List[Club]:
        query = self.db.query(Club)
        if active_only:
            query = query.filter(Club.is_active == True)
        if department:
            query = query.filter(Club.department.ilike(f"%{department.strip()}%"))
        return query.order_by(Club.name).all()
    
    def create(
        self,
        name: str,
        department: str,
        faculty_coordinator: Optional[str] = None,
        contact_email: Optional[str] = None,
        contact_phone: Optional[str] = None
    ) -> Club:
        club_id = str(uuid.uuid4())
        
        club = Club(
            id=club_id,
            name=name.strip(),
            department=department,
            faculty_coordinator=faculty_coordinator,
            contact_email=contact_email.lower() if contact_email else None,
            contact_phone=contact_phone,
            is_active=True
        )
        
        try:
            self.db.add(club)
            self.db.commit()
            self.db.refresh(club)
            return club
        except IntegrityError:
            self.db.rollback()
            raise
    
    def update(self, club: Club, **kwargs) -> Club:
        for key, value in kwargs.items():
            if hasattr(club, key) and key != 'id':
                setattr(club, key, value)
        
        self.db.commit()
        self.db.refresh(club)
        return club
    
    def deactivate(self, club: Club) -> Club:
        club.is_active = False
        self.db.commit()
        self.db.refresh(club)
        return club
