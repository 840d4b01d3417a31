from typing import Optional, List, Tuple
from sqlalchemy.orm import Session
from datetime import datetime, date
from venue_booking.core.actor import Actor
from venue_booking.models.audit_log import AuditLog, AuditAction, TargetType
import uuid


class AuditLogRepository:
    
    def __init__(self, db: Session):
        self.db = db
    
    def get_all(
        self,
        action: Optional[AuditAction] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        actor_id: Optional[str] = None,
        target_type: Optional[TargetType] = None,
        target_id: Optional[str] = None,
        page: int = 1,
        limit: int = 50
    ) -> Tuple[List[AuditLog], int]:
        query = self.db.query(AuditLog)
        
        if action:
            query = query.filter(AuditLog.action == action)
        
        if start_date:
            query = query.filter(AuditLog.timestamp >= datetime.combine(start_date, datetime.min.time()))
        
        if end_date:
            query = query.filter(AuditLog.timestamp <= datetime.combine(end_date, datetime.max.time()))
        
        if actor_id:
            query = query.filter(AuditLog.actor_id == actor_id)
        
        if target_type:
            query = query.filter(AuditLog.target_type == target_type)
        
        if target_id:
            query = query.filter(AuditLog.target_id == target_id)
        
        total_count = query.count()
        
        offset = (page - 1) * limit
        logs = query.order_by(AuditLog.timestamp.desc()).offset(offset).limit(limit).all()
        
        return logs, total_count
    
    def record(
        self,
        action: AuditAction,
        actor: Actor,
        target_type: TargetType,
        target_id: str,
        target_name: Optional[str] = None,
        details: Optional[str] = None,
        metadata: Optional[dict] = None
    ) -> AuditLog:
        log = AuditLog(
            id=str(uuid.uuid4()),
            action=action,
            actor_id=actor.id,
            actor_name=actor.name,
            actor_role=actor.role.value,
            target_type=target_type,
            target_id=target_id,
            target_name=target_name,
            details=details,
            extra_metadata=metadata
        )
        
        self.db.add(log)
        self.db.commit()
        self.db.refresh(log)
        return log
