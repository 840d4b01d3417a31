from typing import Optional, List, Tuple
from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from venue_booking.core.actor import Actor
from venue_booking.models.audit_log import AuditLog, AuditAction, TargetType
from venue_booking.repositories.audit_log_repository import AuditLogRepository
from venue_booking.utils.query_params import parse_enum, parse_date, validate_paging


class AdminService:

    def __init__(self, db: Session):
        self.db = db
        self.audit_repo = AuditLogRepository(db)

    def get_audit_logs(
        self,
        actor: Actor,
        action: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        actor_id: Optional[str] = None,
        target_type: Optional[str] = None,
        target_id: Optional[str] = None,
        page: int = 1,
        limit: int = 50
    ) -> Tuple[List[AuditLog], int]:
        if not actor.is_admin:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Admin role required"
            )
        validate_paging(page, limit, max_limit=200)

        return self.audit_repo.get_all(
            action=parse_enum(AuditAction, action, "action"),
            start_date=parse_date(start_date, "startDate"),
            end_date=parse_date(end_date, "endDate"),
            actor_id=actor_id,
            target_type=parse_enum(TargetType, target_type, "targetType"),
            target_id=target_id,
            page=page,
            limit=limit
        )
