from fastapi import Request
from sqlalchemy.orm import Session

from ticketpro.repositories.activity_logs import ActivityLogRepository


def log_activity(db: Session, user_id: str, action: str, entity_type: str, entity_id: str | None = None,
                 details: dict | None = None, request: Request | None = None):
    """Append an activity row in the caller's unit of work (no commit here)."""
    ip = user_agent = None
    if request is not None:
        ip = request.client.host if request.client else None
        user_agent = request.headers.get("user-agent")
    return ActivityLogRepository(db).add(
        user_id=user_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        details=details,
        ip_address=ip,
        user_agent=user_agent,
    )
