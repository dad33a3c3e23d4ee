"""
Uploads API Endpoints
Single file upload to Cloudinary, plus helpers shared by the routers that
accept files (blogs, popups, projects, product forms)

Author: TM3
Date: 2026-02-10
"""
import json
import logging
from typing import List, Optional, Type, TypeVar

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from pydantic import BaseModel, ValidationError

from app.core.exceptions import CMSException
from app.services.storage_service import CloudinaryStorage, UploadedFile, get_storage

logger = logging.getLogger(__name__)

router = APIRouter()

M = TypeVar("M", bound=BaseModel)


async def to_uploaded_file(file: Optional[UploadFile]) -> Optional[UploadedFile]:
    """Read an UploadFile into memory; empty file fields count as no file"""
    if file is None or not file.filename:
        return None
    content = await file.read()
    return UploadedFile(
        content=content,
        filename=file.filename,
        content_type=file.content_type or "application/octet-stream",
    )


async def to_uploaded_files(files: Optional[List[UploadFile]]) -> List[UploadedFile]:
    result = []
    for file in files or []:
        uploaded = await to_uploaded_file(file)
        if uploaded is not None:
            result.append(uploaded)
    return result


def parse_form_json(raw: Optional[str], model: Type[M]) -> M:
    """Validate a JSON form field (multipart requests carry drafts as JSON text)"""
    try:
        return model.model_validate_json(raw or "{}")
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=json.loads(e.json()))


@router.post("/")
async def upload_file(
    file: UploadFile = File(...),
    folder: Optional[str] = Form(None),
    storage: CloudinaryStorage = Depends(get_storage)
):
    """
    Upload one image or PDF

    Returns the public URL (images get automatic format/quality).
    """
    try:
        uploaded = await to_uploaded_file(file)
        if uploaded is None:
            raise HTTPException(status_code=400, detail="No file provided")

        url = storage.upload(uploaded, folder=folder)
        return {
            "status": "success",
            "data": {"url": url, "filename": uploaded.filename, "resource_type": "raw" if uploaded.is_pdf else "image"}
        }

    except (HTTPException, CMSException):
        raise
    except Exception as e:
        logger.error(f"Error uploading file: {e}")
        raise HTTPException(status_code=500, detail=f"Error uploading file: {str(e)}")
