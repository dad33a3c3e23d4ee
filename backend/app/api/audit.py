"""
Audit Logs API Endpoints
Read-only viewer over the newest audit events

Author: TM3
Date: 2026-02-10
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.database import get_firestore
from app.core.exceptions import CMSException
from app.services import audit_service
from app.services.audit_service import AUDIT_PAGE_SIZE, AuditService
from app.services.listing import paginate, pagination_window

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def get_audit_logs(
    action: str = Query("all", description="create | update | delete | restore | all"),
    entity_type: str = Query("all", description="Entity type or all"),
    date_range: str = Query("all", pattern="^(all|today|week|month)$"),
    search: Optional[str] = Query(None, description="Search name, id, actor, page or type"),
    page: int = Query(1, ge=1),
    db=Depends(get_firestore)
):
    """
    Get audit logs with the viewer's filters

    Stats and entity types are computed over the unfiltered logs.
    """
    try:
        logs = AuditService(db).list_logs()
        filtered = audit_service.filter_logs(
            logs, action=action, entity_type=entity_type, date_range=date_range, search=search or ""
        )
        result = paginate(filtered, page, AUDIT_PAGE_SIZE, min_pages=1)

        return {
            "status": "success",
            "total": result.total_items,
            "count": len(result.items),
            "stats": audit_service.stats(logs),
            "entity_types": audit_service.entity_types(logs),
            "pagination": dict(result.to_dict(), window=pagination_window(result.page, result.total_pages)),
            "data": [audit_service.serialize_log(log) for log in result.items]
        }

    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error fetching audit logs: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching audit logs: {str(e)}")
