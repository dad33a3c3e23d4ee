"""
FAQ API Endpoints
CRUD for the FAQ manager

Author: TM3
Date: 2026-02-10
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from app.core.auth import TokenUser, get_current_user
from app.core.database import get_firestore
from app.core.exceptions import CMSException
from app.domain.catalog import FAQ_ICONS
from app.domain.content import FaqDraft
from app.services.faq_service import FaqService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def get_faqs(db=Depends(get_firestore)):
    """Get all FAQs, newest first, with the icon choices"""
    try:
        faqs = FaqService(db).list_faqs()
        return {
            "status": "success",
            "count": len(faqs),
            "icons": list(FAQ_ICONS),
            "data": [faq.to_dict() for faq in faqs]
        }
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error fetching FAQs: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching FAQs: {str(e)}")


@router.post("/")
async def create_faq(
    draft: FaqDraft,
    db=Depends(get_firestore),
    user: TokenUser = Depends(get_current_user)
):
    try:
        faq_id = FaqService(db).create_faq(draft, actor=user.to_actor())
        return {"status": "success", "data": {"id": faq_id}}
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error creating FAQ: {e}")
        raise HTTPException(status_code=500, detail=f"Error creating FAQ: {str(e)}")


@router.put("/{faq_id}")
async def update_faq(
    faq_id: str,
    draft: FaqDraft,
    db=Depends(get_firestore),
    user: TokenUser = Depends(get_current_user)
):
    """Update question, answer and icon"""
    try:
        FaqService(db).update_faq(faq_id, draft, actor=user.to_actor())
        return {"status": "success", "data": {"id": faq_id}}
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error updating FAQ {faq_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating FAQ: {str(e)}")


@router.delete("/{faq_id}")
async def delete_faq(
    faq_id: str,
    db=Depends(get_firestore),
    user: TokenUser = Depends(get_current_user)
):
    try:
        FaqService(db).delete_faq(faq_id, actor=user.to_actor())
        return {"status": "success", "data": {"id": faq_id}}
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error deleting FAQ {faq_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error deleting FAQ: {str(e)}")
