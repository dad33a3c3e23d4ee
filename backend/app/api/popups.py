"""
Popups API Endpoints
Home popup manager: list, live preview, save (multipart) and delete

Author: TM3
Date: 2026-02-10
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from app.api.uploads import parse_form_json, to_uploaded_file
from app.core.auth import TokenUser, get_current_user
from app.core.database import get_firestore
from app.core.exceptions import CMSException
from app.domain.content import PopupDraft
from app.services import popup_service
from app.services.popup_service import PopupService
from app.services.storage_service import CloudinaryStorage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def get_popups(
    db=Depends(get_firestore),
    storage: CloudinaryStorage = Depends(get_storage)
):
    try:
        popups = PopupService(db, storage).list_popups()
        return {
            "status": "success",
            "count": len(popups),
            "data": [popup.to_dict() for popup in popups]
        }
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error fetching popups: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching popups: {str(e)}")


@router.post("/preview")
async def preview_popup(draft: PopupDraft):
    """Render the visitor view of an unsaved popup"""
    return {"status": "success", "data": popup_service.preview(draft)}


async def _save(popup_id, draft, image, db, storage, user) -> str:
    return PopupService(db, storage).save_popup(
        parse_form_json(draft, PopupDraft),
        editing_id=popup_id,
        image_file=await to_uploaded_file(image),
        actor=user.to_actor(),
    )


@router.post("/")
async def create_popup(
    draft: str = Form(..., description="PopupDraft as JSON"),
    image: Optional[UploadFile] = File(None),
    db=Depends(get_firestore),
    storage: CloudinaryStorage = Depends(get_storage),
    user: TokenUser = Depends(get_current_user)
):
    try:
        popup_id = await _save(None, draft, image, db, storage, user)
        return {"status": "success", "data": {"id": popup_id}}
    except (HTTPException, CMSException):
        raise
    except Exception as e:
        logger.error(f"Error creating popup: {e}")
        raise HTTPException(status_code=500, detail=f"Error creating popup: {str(e)}")


@router.put("/{popup_id}")
async def update_popup(
    popup_id: str,
    draft: str = Form(..., description="PopupDraft as JSON"),
    image: Optional[UploadFile] = File(None),
    db=Depends(get_firestore),
    storage: CloudinaryStorage = Depends(get_storage),
    user: TokenUser = Depends(get_current_user)
):
    try:
        await _save(popup_id, draft, image, db, storage, user)
        return {"status": "success", "data": {"id": popup_id}}
    except (HTTPException, CMSException):
        raise
    except Exception as e:
        logger.error(f"Error updating popup {popup_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating popup: {str(e)}")


@router.delete("/{popup_id}")
async def delete_popup(
    popup_id: str,
    db=Depends(get_firestore),
    storage: CloudinaryStorage = Depends(get_storage),
    user: TokenUser = Depends(get_current_user)
):
    try:
        PopupService(db, storage).delete_popup(popup_id, actor=user.to_actor())
        return {"status": "success", "data": {"id": popup_id}}
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error deleting popup {popup_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error deleting popup: {str(e)}")
