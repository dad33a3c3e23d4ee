"""
Recycle Bin API Endpoints
Deleted products: restore, permanent delete and their bulk versions

Single-item actions need `confirm_name` equal to the item name.
Permanent deletes are admin only. Bulk permanent delete needs a hold
started with POST /bulk/hold and kept for the long-press duration
before calling /bulk/delete.

Author: TM3
Date: 2026-02-10
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from app.core.auth import TokenUser, get_current_user, require_admin
from app.core.database import get_firestore
from app.core.exceptions import CMSException
from app.services import recycle_bin_service
from app.services.long_press import HoldRegistry, hold_registry
from app.services.recycle_bin_service import RecycleBinService

logger = logging.getLogger(__name__)

router = APIRouter()


class ConfirmRequest(BaseModel):
    confirm_name: str


class BulkIdsRequest(BaseModel):
    ids: List[str] = Field(..., min_length=1)


class BulkDeleteRequest(BaseModel):
    ids: List[str] = Field(..., min_length=1)
    hold_id: str


def get_hold_registry() -> HoldRegistry:
    return hold_registry


@router.get("/")
async def get_deleted_items(
    search: Optional[str] = Query(None, description="Search name or item code"),
    page: int = Query(1, ge=1),
    db=Depends(get_firestore)
):
    """Get recycle bin items, most recently deleted first"""
    try:
        items = RecycleBinService(db).list_items()
        result = recycle_bin_service.search(items, search or "", page)
        current = result["page"]

        return {
            "status": "success",
            "total": current.total_items,
            "count": len(current.items),
            "pagination": dict(current.to_dict(), window=result["window"]),
            "data": [item.to_dict() for item in current.items]
        }
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error fetching recycle bin: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching recycle bin: {str(e)}")


# /bulk/... must stay above /{item_id} routes or "bulk" matches as an item id
@router.post("/bulk/restore")
async def bulk_restore(
    body: BulkIdsRequest,
    db=Depends(get_firestore),
    user: TokenUser = Depends(get_current_user)
):
    try:
        restored = RecycleBinService(db).bulk_restore(body.ids, actor=user.to_actor())
        return {"status": "success", "data": {"restored": restored}}
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error bulk restoring: {e}")
        raise HTTPException(status_code=500, detail=f"Error restoring items: {str(e)}")


@router.post("/bulk/hold")
async def begin_hold(
    db=Depends(get_firestore),
    holds: HoldRegistry = Depends(get_hold_registry)
):
    """Pointer down on the bulk delete button"""
    hold = RecycleBinService(db, holds).begin_bulk_delete_hold()
    return {
        "status": "success",
        "data": {"hold_id": hold.id, "duration_ms": holds.duration_ms}
    }


@router.delete("/bulk/hold/{hold_id}")
async def release_hold(
    hold_id: str,
    db=Depends(get_firestore),
    holds: HoldRegistry = Depends(get_hold_registry)
):
    """Pointer released before the hold completed"""
    RecycleBinService(db, holds).release_hold(hold_id)
    return {"status": "success", "data": {"hold_id": hold_id}}


@router.post("/bulk/delete")
async def bulk_permanent_delete(
    body: BulkDeleteRequest,
    db=Depends(get_firestore),
    holds: HoldRegistry = Depends(get_hold_registry),
    user: TokenUser = Depends(require_admin)
):
    try:
        deleted = RecycleBinService(db, holds).bulk_permanent_delete(body.ids, body.hold_id, actor=user.to_actor())
        return {"status": "success", "data": {"deleted": deleted}}
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error bulk deleting: {e}")
        raise HTTPException(status_code=500, detail=f"Error deleting items: {str(e)}")


@router.post("/{item_id}/restore")
async def restore_item(
    item_id: str,
    body: ConfirmRequest,
    db=Depends(get_firestore),
    user: TokenUser = Depends(get_current_user)
):
    try:
        item = RecycleBinService(db).restore(item_id, body.confirm_name, actor=user.to_actor())
        return {
            "status": "success",
            "data": {"id": item.id, "name": item.display_name, "collection": item.target_collection}
        }
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error restoring {item_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error restoring item: {str(e)}")


@router.delete("/{item_id}")
async def permanently_delete_item(
    item_id: str,
    confirm_name: str = Query(..., description="Item name typed by the admin"),
    db=Depends(get_firestore),
    user: TokenUser = Depends(require_admin)
):
    """Delete forever (cannot be undone, admins only)"""
    try:
        item = RecycleBinService(db).permanent_delete(item_id, confirm_name, actor=user.to_actor())
        return {"status": "success", "data": {"id": item.id, "name": item.display_name}}
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error deleting {item_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error deleting item: {str(e)}")
