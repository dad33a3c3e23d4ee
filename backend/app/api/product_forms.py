"""
Product Forms API Endpoints
Add / edit product forms for the website, Shopify and Taskflow catalogs

`profile` is one of: website, shopify, taskflow

Author: TM3
Date: 2026-02-10
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile

from app.api.uploads import parse_form_json, to_uploaded_file, to_uploaded_files
from app.core.auth import TokenUser, get_current_user
from app.core.database import get_firestore
from app.core.exceptions import CMSException
from app.domain.product import ProductFormDraft
from app.services import product_form_service
from app.services.product_form_service import ProductFormFiles, ProductFormService, get_profile
from app.services.storage_service import CloudinaryStorage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter()


def _split_ids(raw: Optional[str]) -> List[str]:
    return [part.strip() for part in (raw or "").split(",") if part.strip()]


@router.get("/{profile}/options")
async def get_form_options(
    profile: str,
    websites: Optional[str] = Query(None, description="Comma-separated websites to narrow the pickers"),
    db=Depends(get_firestore),
    storage: CloudinaryStorage = Depends(get_storage)
):
    """Categories, brands, applications and product classes for the pickers"""
    try:
        form = get_profile(profile)
        options = ProductFormService(db, storage).classification_options(form, _split_ids(websites))
        return {"status": "success", "data": options}
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error fetching {profile} form options: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching form options: {str(e)}")


@router.get("/{profile}/spec-fields")
async def get_spec_fields(
    profile: str,
    category_ids: str = Query(..., description="Comma-separated category ids"),
    db=Depends(get_firestore),
    storage: CloudinaryStorage = Depends(get_storage)
):
    """Spec inputs for the selected categories"""
    try:
        form = get_profile(profile)
        fields = ProductFormService(db, storage).spec_fields(form, _split_ids(category_ids))
        return {"status": "success", "count": len(fields), "data": fields}
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error fetching spec fields: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching spec fields: {str(e)}")


@router.post("/{profile}/seo-preview")
async def get_seo_preview(profile: str, draft: ProductFormDraft):
    form = get_profile(profile)
    draft.websites = product_form_service.form_websites(form, draft)
    return {"status": "success", "data": product_form_service.seo_preview(draft)}


@router.post("/{profile}")
async def publish_product(
    profile: str,
    draft: str = Form(..., description="ProductFormDraft as JSON"),
    editing_id: Optional[str] = Form(None),
    main_image: Optional[UploadFile] = File(None),
    raw_image: Optional[UploadFile] = File(None),
    qr_code_image: Optional[UploadFile] = File(None),
    dimension_drawing_image: Optional[UploadFile] = File(None),
    mounting_height_image: Optional[UploadFile] = File(None),
    gallery_images: Optional[List[UploadFile]] = File(None),
    db=Depends(get_firestore),
    storage: CloudinaryStorage = Depends(get_storage),
    user: TokenUser = Depends(get_current_user)
):
    """
    Save the form as a product

    Pending categories / brands / applications are created first and
    their temp- ids are replaced with the real ones.
    """
    try:
        form = get_profile(profile)
        files = ProductFormFiles(
            main=await to_uploaded_file(main_image),
            raw=await to_uploaded_file(raw_image),
            qr=await to_uploaded_file(qr_code_image),
            dimension_drawing=await to_uploaded_file(dimension_drawing_image),
            mounting_height=await to_uploaded_file(mounting_height_image),
            gallery=await to_uploaded_files(gallery_images),
        )

        product_id = ProductFormService(db, storage).publish(
            form,
            parse_form_json(draft, ProductFormDraft),
            files=files,
            editing_id=editing_id or None,
            actor=user.to_actor(),
        )
        return {"status": "success", "data": {"id": product_id}}

    except (HTTPException, CMSException):
        raise
    except Exception as e:
        logger.error(f"Error publishing {profile} product: {e}")
        raise HTTPException(status_code=500, detail=f"Error publishing product: {str(e)}")
