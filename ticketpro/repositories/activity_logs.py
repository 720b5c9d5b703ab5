from __future__ import annotations

import json
import uuid
from sqlalchemy.orm import Session

from ticketpro.models.activity_log import ActivityLog


class ActivityLogRepository:
    """Insert and read only; rows are never updated or removed."""

    def __init__(self, db: Session):
        self.db = db

    def add(self, user_id: str, action: str, entity_type: str, entity_id: str | None = None,
            details: dict | None = None, ip_address: str | None = None, user_agent: str | None = None) -> ActivityLog:
        row = ActivityLog(
            id=str(uuid.uuid4()),
            user_id=user_id,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            details=json.dumps(details or {}, ensure_ascii=False),
            ip_address=ip_address,
            user_agent=(user_agent or "")[:255] or None,
        )
        self.db.add(row)
        self.db.flush()
        return row

    def list(self, limit: int = 100, user_id: str | None = None) -> list[ActivityLog]:
        q = self.db.query(ActivityLog)
        if user_id:
            q = q.filter(ActivityLog.user_id == user_id)
        return q.order_by(ActivityLog.created_at.desc()).limit(limit).all()
