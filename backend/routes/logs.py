# backend/routes/logs.py
from datetime import datetime
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from database import get_db
from models.log import Log
from models.users import User
from utils.tokenJWT import get_current_admin

router = APIRouter(prefix="/api/logs", tags=["Logs"])


class LogResponse(BaseModel):
    id: int
    user_id: Optional[int] = None
    action: str
    resource: str
    status: str
    ip: Optional[str] = None
    ts: Optional[datetime] = None
    meta: Optional[Any] = None

    class Config:
        from_attributes = True

class LogPage(BaseModel):
    items: List[LogResponse]
    total: int
    page: int
    page_size: int


# Audit trail, newest first (Admin only)
@router.get("", response_model=LogPage)
def get_logs(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    action: Optional[str] = Query(None, description="Filter by action, e.g. ORDER_PAY"),
    resource: Optional[str] = Query(None, description="Filter by resource, e.g. orders"),
    user_id: Optional[int] = Query(None),
    status: Optional[str] = Query(None, description="SUCCESS or FAIL"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    query = db.query(Log)

    if action:
        query = query.filter(Log.action == action.upper())
    if resource:
        query = query.filter(Log.resource == resource)
    if user_id is not None:
        query = query.filter(Log.user_id == user_id)
    if status:
        query = query.filter(Log.status == status.upper())

    query = query.order_by(Log.id.desc())

    total = query.count()
    logs = query.offset((page - 1) * page_size).limit(page_size).all()

    return {"items": logs, "total": total, "page": page, "page_size": page_size}
