from dataclasses import dataclass
from typing import Optional
import enum


class ActorRole(str, enum.Enum):
    ADMIN = "admin"
    CLUB = "club"
    STUDENT = "student"


@dataclass(frozen=True)
class Actor:
    """
    The party performing an operation. Services take it as an explicit
    argument instead of reading any ambient session.
    
    For club actors ``id`` is the club ID.
    """
    id: str
    role: ActorRole
    name: Optional[str] = None
    
    @property
    def is_admin(self) -> bool:
        return self.role == ActorRole.ADMIN
    
    def acts_for_club(self, club_id: str) -> bool:
        return self.is_admin or (self.role == ActorRole.CLUB and self.id == club_id)
