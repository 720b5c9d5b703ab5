from datetime import datetime, timezone
from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ticketpro.db.session import get_db
from ticketpro.api.deps import require_permission
from ticketpro.api.responses import ok
from ticketpro.api.serializers import activity_out
from ticketpro.core.permissions import Permission
from ticketpro.models.user import User
from ticketpro.repositories.activity_logs import ActivityLogRepository
from ticketpro.services import settings_service

router = APIRouter(tags=["settings"])

@router.get("/settings")
def get_settings(db: Session = Depends(get_db),
                 me: User = Depends(require_permission(Permission.SYSTEM_SETTINGS))):
    return ok(settings_service.get_settings(db), "Settings retrieved successfully")

@router.put("/settings")
def update_settings(request: Request, values: dict = Body(...), db: Session = Depends(get_db),
                    me: User = Depends(require_permission(Permission.SYSTEM_SETTINGS))):
    return ok(settings_service.update_settings(db, me, values, request), "Settings updated successfully")

@router.get("/settings/export/data")
def export_data(format: str = "json", db: Session = Depends(get_db),
                me: User = Depends(require_permission(Permission.SYSTEM_SETTINGS))):
    data = settings_service.export_data(db, format)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d")
    if format == "csv":
        return Response(content=data, media_type="text/csv",
                        headers={"Content-Disposition": f'attachment; filename="bd-ticketpro-{stamp}.csv"'})
    return ok(data, "Data exported successfully")

@router.get("/settings/logs/activity")
def activity_logs(limit: int = Query(100, ge=1, le=1000), user_id: str | None = None,
                  db: Session = Depends(get_db),
                  me: User = Depends(require_permission(Permission.SYSTEM_SETTINGS))):
    rows = ActivityLogRepository(db).list(limit=limit, user_id=user_id)
    return ok({"logs": [activity_out(r) for r in rows]}, "Activity logs retrieved successfully")

@router.get("/settings/system-info")
def system_info(db: Session = Depends(get_db),
                me: User = Depends(require_permission(Permission.SYSTEM_SETTINGS))):
    return ok(settings_service.system_info(db), "System info retrieved successfully")
