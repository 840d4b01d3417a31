from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import math

from venue_booking.api.deps import get_actor
from venue_booking.core.actor import Actor
from venue_booking.core.database import get_db
from venue_booking.schemas.audit_log import AuditLogsListResponse
from venue_booking.services.admin_service import AdminService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/audit-logs", response_model=AuditLogsListResponse)
def get_audit_logs(
    action: Optional[str] = None,
    startDate: Optional[str] = None,
    endDate: Optional[str] = None,
    actorId: Optional[str] = None,
    targetType: Optional[str] = None,
    targetId: Optional[str] = None,
    page: int = 1,
    limit: int = 50,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db)
) -> dict:
    logs, total = AdminService(db).get_audit_logs(
        actor,
        action=action,
        start_date=startDate,
        end_date=endDate,
        actor_id=actorId,
        target_type=targetType,
        target_id=targetId,
        page=page,
        limit=limit
    )
    return {
        "success": True,
        "logs": [log.to_dict() for log in logs],
        "pagination": {
            "currentPage": page,
            "totalPages": math.ceil(total / limit) if total else 0,
            "totalItems": total
        }
    }
