"""
Master Data API Endpoints
Brands, applications, product families, spec groups and standalone spec labels

Brand / application / product family saves are multipart (draft JSON plus
an optional image); spec groups and labels are plain JSON.

Author: TM3
Date: 2026-02-10
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from pydantic import BaseModel, Field

from app.api.uploads import parse_form_json, to_uploaded_file
from app.core.auth import TokenUser, get_current_user
from app.core.database import get_firestore
from app.core.exceptions import CMSException
from app.domain.catalog import Website
from app.domain.master_data import ApplicationDraft, BrandDraft, ProductFamilyDraft, SpecGroupDraft
from app.services.master_data_service import MasterDataService, get_kind
from app.services.storage_service import CloudinaryStorage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter()


class FamilyWebsitesRequest(BaseModel):
    websites: List[Website] = Field(default_factory=list)


class SpecItemRequest(BaseModel):
    label: str = ""


class ActiveRequest(BaseModel):
    isActive: bool


@router.get("/{kind}")
async def get_items(kind: str, db=Depends(get_firestore)):
    """List one collection (kind: brands, applications, product-families, spec-groups, spec-items)"""
    try:
        items = MasterDataService(db).list_items(get_kind(kind))
        return {
            "status": "success",
            "count": len(items),
            "data": [item.to_dict() for item in items]
        }
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error fetching {kind}: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching {kind}: {str(e)}")


async def _save_with_image(save, item_id, draft_model, draft, image, user) -> str:
    return save(
        parse_form_json(draft, draft_model),
        editing_id=item_id,
        image_file=await to_uploaded_file(image),
        actor=user.to_actor(),
    )


@router.post("/brands")
async def create_brand(
    draft: str = Form(..., description="BrandDraft as JSON"),
    logo: Optional[UploadFile] = File(None),
    db=Depends(get_firestore),
    storage: CloudinaryStorage = Depends(get_storage),
    user: TokenUser = Depends(get_current_user)
):
    try:
        service = MasterDataService(db, storage)
        brand_id = await _save_with_image(service.save_brand, None, BrandDraft, draft, logo, user)
        return {"status": "success", "data": {"id": brand_id}}
    except (HTTPException, CMSException):
        raise
    except Exception as e:
        logger.error(f"Error creating brand: {e}")
        raise HTTPException(status_code=500, detail=f"Error creating brand: {str(e)}")


@router.put("/brands/{brand_id}")
async def update_brand(
    brand_id: str,
    draft: str = Form(..., description="BrandDraft as JSON"),
    logo: Optional[UploadFile] = File(None),
    db=Depends(get_firestore),
    storage: CloudinaryStorage = Depends(get_storage),
    user: TokenUser = Depends(get_current_user)
):
    try:
        service = MasterDataService(db, storage)
        await _save_with_image(service.save_brand, brand_id, BrandDraft, draft, logo, user)
        return {"status": "success", "data": {"id": brand_id}}
    except (HTTPException, CMSException):
        raise
    except Exception as e:
        logger.error(f"Error updating brand {brand_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating brand: {str(e)}")


@router.post("/applications")
async def create_application(
    draft: str = Form(..., description="ApplicationDraft as JSON"),
    image: Optional[UploadFile] = File(None),
    db=Depends(get_firestore),
    storage: CloudinaryStorage = Depends(get_storage),
    user: TokenUser = Depends(get_current_user)
):
    try:
        service = MasterDataService(db, storage)
        application_id = await _save_with_image(service.save_application, None, ApplicationDraft, draft, image, user)
        return {"status": "success", "data": {"id": application_id}}
    except (HTTPException, CMSException):
        raise
    except Exception as e:
        logger.error(f"Error creating application: {e}")
        raise HTTPException(status_code=500, detail=f"Error creating application: {str(e)}")


@router.put("/applications/{application_id}")
async def update_application(
    application_id: str,
    draft: str = Form(..., description="ApplicationDraft as JSON"),
    image: Optional[UploadFile] = File(None),
    db=Depends(get_firestore),
    storage: CloudinaryStorage = Depends(get_storage),
    user: TokenUser = Depends(get_current_user)
):
    try:
        service = MasterDataService(db, storage)
        await _save_with_image(service.save_application, application_id, ApplicationDraft, draft, image, user)
        return {"status": "success", "data": {"id": application_id}}
    except (HTTPException, CMSException):
        raise
    except Exception as e:
        logger.error(f"Error updating application {application_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating application: {str(e)}")


# must stay above /product-families/{family_id}
@router.put("/product-families/websites")
async def set_family_websites(
    body: FamilyWebsitesRequest,
    db=Depends(get_firestore),
    user: TokenUser = Depends(get_current_user)
):
    """Apply one website selection to every product family"""
    try:
        updated = MasterDataService(db).set_family_websites(body.websites, actor=user.to_actor())
        return {"status": "success", "data": {"updated": updated}}
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error updating product family websites: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating websites: {str(e)}")


@router.post("/product-families")
async def create_product_family(
    draft: str = Form(..., description="ProductFamilyDraft as JSON"),
    image: Optional[UploadFile] = File(None),
    db=Depends(get_firestore),
    storage: CloudinaryStorage = Depends(get_storage),
    user: TokenUser = Depends(get_current_user)
):
    try:
        service = MasterDataService(db, storage)
        family_id = await _save_with_image(service.save_product_family, None, ProductFamilyDraft, draft, image, user)
        return {"status": "success", "data": {"id": family_id}}
    except (HTTPException, CMSException):
        raise
    except Exception as e:
        logger.error(f"Error creating product family: {e}")
        raise HTTPException(status_code=500, detail=f"Error creating product family: {str(e)}")


@router.put("/product-families/{family_id}")
async def update_product_family(
    family_id: str,
    draft: str = Form(..., description="ProductFamilyDraft as JSON"),
    image: Optional[UploadFile] = File(None),
    db=Depends(get_firestore),
    storage: CloudinaryStorage = Depends(get_storage),
    user: TokenUser = Depends(get_current_user)
):
    try:
        service = MasterDataService(db, storage)
        await _save_with_image(service.save_product_family, family_id, ProductFamilyDraft, draft, image, user)
        return {"status": "success", "data": {"id": family_id}}
    except (HTTPException, CMSException):
        raise
    except Exception as e:
        logger.error(f"Error updating product family {family_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating product family: {str(e)}")


@router.post("/spec-groups")
async def create_spec_group(
    draft: SpecGroupDraft,
    db=Depends(get_firestore),
    user: TokenUser = Depends(get_current_user)
):
    try:
        group_id = MasterDataService(db).save_spec_group(draft, actor=user.to_actor())
        return {"status": "success", "data": {"id": group_id}}
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error creating spec group: {e}")
        raise HTTPException(status_code=500, detail=f"Error creating spec group: {str(e)}")


@router.put("/spec-groups/{group_id}")
async def update_spec_group(
    group_id: str,
    draft: SpecGroupDraft,
    db=Depends(get_firestore),
    user: TokenUser = Depends(get_current_user)
):
    try:
        MasterDataService(db).save_spec_group(draft, editing_id=group_id, actor=user.to_actor())
        return {"status": "success", "data": {"id": group_id}}
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error updating spec group {group_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating spec group: {str(e)}")


@router.post("/spec-items")
async def add_spec_item(
    body: SpecItemRequest,
    db=Depends(get_firestore),
    user: TokenUser = Depends(get_current_user)
):
    try:
        item_id = MasterDataService(db).add_spec_item(body.label, actor=user.to_actor())
        return {"status": "success", "data": {"id": item_id}}
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error adding spec item: {e}")
        raise HTTPException(status_code=500, detail=f"Error adding spec item: {str(e)}")


@router.patch("/{kind}/{item_id}/active")
async def set_active(
    kind: str,
    item_id: str,
    body: ActiveRequest,
    db=Depends(get_firestore),
    user: TokenUser = Depends(get_current_user)
):
    """Show / hide an application or spec group"""
    try:
        MasterDataService(db).set_active(get_kind(kind), item_id, body.isActive, actor=user.to_actor())
        return {"status": "success", "data": {"id": item_id, "isActive": body.isActive}}
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error updating {kind}/{item_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating {kind}: {str(e)}")


@router.delete("/{kind}/{item_id}")
async def delete_item(
    kind: str,
    item_id: str,
    db=Depends(get_firestore),
    user: TokenUser = Depends(get_current_user)
):
    try:
        MasterDataService(db).delete_item(get_kind(kind), item_id, actor=user.to_actor())
        return {"status": "success", "data": {"id": item_id}}
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error deleting {kind}/{item_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error deleting {kind}: {str(e)}")
