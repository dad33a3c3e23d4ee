"""
Blogs API Endpoints
Blog list, editor save (multipart with images) and delete

Author: TM3
Date: 2026-02-10
"""
import json
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile

from app.api.uploads import parse_form_json, to_uploaded_file
from app.core.auth import TokenUser, get_current_user
from app.core.database import get_firestore
from app.core.exceptions import CMSException
from app.domain.catalog import BlogCategory, BlogStatus, BlogWebsite
from app.domain.content import BlogDraft
from app.services.blog_service import BlogService
from app.services.listing import pagination_window
from app.services.storage_service import CloudinaryStorage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/options")
async def get_blog_options():
    """Category, status and website choices for the editor"""
    return {
        "status": "success",
        "data": {
            "categories": [c.value for c in BlogCategory],
            "statuses": [s.value for s in BlogStatus],
            "websites": [w.value for w in BlogWebsite],
        }
    }


@router.get("/")
async def get_blogs(
    website: str = Query("all", description="Blog website slug or all"),
    page: int = Query(1, ge=1),
    db=Depends(get_firestore),
    storage: CloudinaryStorage = Depends(get_storage)
):
    """Get blogs newest first, 5 per page"""
    try:
        result = BlogService(db, storage).list_blogs(website, page)
        return {
            "status": "success",
            "total": result.total_items,
            "count": len(result.items),
            "pagination": dict(result.to_dict(), window=pagination_window(result.page, result.total_pages)),
            "data": [blog.to_dict() for blog in result.items]
        }
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error fetching blogs: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching blogs: {str(e)}")


@router.get("/{blog_id}")
async def get_blog(
    blog_id: str,
    db=Depends(get_firestore),
    storage: CloudinaryStorage = Depends(get_storage)
):
    blog = BlogService(db, storage).get_blog(blog_id)
    return {"status": "success", "data": blog.to_dict()}


async def _save(
    blog_id: Optional[str],
    draft: str,
    cover_image: Optional[UploadFile],
    section_images: Optional[List[UploadFile]],
    section_image_ids: Optional[str],
    db,
    storage: CloudinaryStorage,
    user: TokenUser,
) -> str:
    blog_draft = parse_form_json(draft, BlogDraft)

    ids = json.loads(section_image_ids) if section_image_ids else []
    files = section_images or []
    if len(ids) != len(files):
        raise HTTPException(status_code=400, detail="section_image_ids must match section_images")

    section_files = {}
    for section_id, file in zip(ids, files):
        uploaded = await to_uploaded_file(file)
        if uploaded is not None:
            section_files[section_id] = uploaded

    return BlogService(db, storage).save_blog(
        blog_draft,
        editing_id=blog_id,
        cover_file=await to_uploaded_file(cover_image),
        section_files=section_files,
        actor=user.to_actor(),
    )


@router.post("/")
async def create_blog(
    draft: str = Form(..., description="BlogDraft as JSON"),
    cover_image: Optional[UploadFile] = File(None),
    section_images: Optional[List[UploadFile]] = File(None),
    section_image_ids: Optional[str] = Form(None, description="JSON list of section ids, same order as section_images"),
    db=Depends(get_firestore),
    storage: CloudinaryStorage = Depends(get_storage),
    user: TokenUser = Depends(get_current_user)
):
    """Create a blog post"""
    try:
        blog_id = await _save(None, draft, cover_image, section_images, section_image_ids, db, storage, user)
        return {"status": "success", "data": {"id": blog_id}}
    except (HTTPException, CMSException):
        raise
    except Exception as e:
        logger.error(f"Error creating blog: {e}")
        raise HTTPException(status_code=500, detail=f"Error creating blog: {str(e)}")


@router.put("/{blog_id}")
async def update_blog(
    blog_id: str,
    draft: str = Form(..., description="BlogDraft as JSON"),
    cover_image: Optional[UploadFile] = File(None),
    section_images: Optional[List[UploadFile]] = File(None),
    section_image_ids: Optional[str] = Form(None),
    db=Depends(get_firestore),
    storage: CloudinaryStorage = Depends(get_storage),
    user: TokenUser = Depends(get_current_user)
):
    """Update a blog post"""
    try:
        await _save(blog_id, draft, cover_image, section_images, section_image_ids, db, storage, user)
        return {"status": "success", "data": {"id": blog_id}}
    except (HTTPException, CMSException):
        raise
    except Exception as e:
        logger.error(f"Error updating blog {blog_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating blog: {str(e)}")


@router.delete("/{blog_id}")
async def delete_blog(
    blog_id: str,
    db=Depends(get_firestore),
    storage: CloudinaryStorage = Depends(get_storage),
    user: TokenUser = Depends(get_current_user)
):
    try:
        BlogService(db, storage).delete_blog(blog_id, actor=user.to_actor())
        return {"status": "success", "data": {"id": blog_id}}
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error deleting blog {blog_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error deleting blog: {str(e)}")
