"""
Activity API Endpoints
Page-view tracking for the admin dashboard

Open to anonymous callers (the login page reports views too); the email is
recorded when a valid token comes with the request.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Header
from pydantic import BaseModel

from app.core.auth import TokenUser, get_current_user_optional
from app.core.database import get_firestore
from app.services.activity_service import ActivityService

router = APIRouter()


class PageView(BaseModel):
    page: str


@router.post("/page-view")
async def log_page_view(
    body: PageView,
    user_agent: Optional[str] = Header(None),
    db=Depends(get_firestore),
    user: Optional[TokenUser] = Depends(get_current_user_optional)
):
    """Record a page view (never fails the caller)"""
    activity_id = ActivityService(db).log_page_view(body.page, user_agent, user.email if user else None)
    return {
        "status": "success",
        "data": {"id": activity_id, "logged": activity_id is not None}
    }
