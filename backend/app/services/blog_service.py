"""
Blog Service
Create / edit / list / delete blog posts

Purpose:
- Newest-first blog list filtered by website, 5 per page
- Cover and section image uploads
- Slug and SEO defaults on save

Author: TM3
Date: 2026-02-10
"""
import logging
import re
from typing import Dict, List, Optional

from app.core.database import BLOGS, SERVER_TIMESTAMP
from app.core.exceptions import ValidationFailedException
from app.domain.audit import AuditAction
from app.domain.catalog import BlogWebsite
from app.domain.content import Blog, BlogDraft
from app.repositories.base_repository import FirestoreRepository
from app.services.audit_service import AuditService
from app.services.listing import Page, paginate
from app.services.storage_service import CloudinaryStorage, UploadedFile

logger = logging.getLogger(__name__)

BLOG_PAGE_SIZE = 5
BLOG_PAGE = "/content/blogs"


def make_slug(title: str) -> str:
    """
    "Solar 101: A Guide!" -> "solar-101-a-guide"

    Lower-case, drop everything but word characters and spaces, then turn
    each run of spaces into a hyphen.
    """
    cleaned = re.sub(r"[^\w ]+", "", (title or "").lower())
    return re.sub(r" +", "-", cleaned)


class BlogService:

    def __init__(self, db, storage: CloudinaryStorage):
        self.repo = FirestoreRepository(db, BLOGS, Blog)
        self.storage = storage
        self.audit = AuditService(db)

    def list_blogs(self, website_filter: str = "all", page: int = 1) -> Page:
        """Newest first; website_filter is a blog website slug or "all" """
        blogs = self.repo.find_all(order_by="createdAt", descending=True)
        if website_filter and website_filter != "all":
            blogs = [b for b in blogs if BlogWebsite.resolve(b.website).value == website_filter]
        return paginate(blogs, page, BLOG_PAGE_SIZE, min_pages=1)

    def get_blog(self, blog_id: str) -> Blog:
        return self.repo.get(blog_id)

    def save_blog(
        self,
        draft: BlogDraft,
        editing_id: Optional[str] = None,
        cover_file: Optional[UploadedFile] = None,
        section_files: Optional[Dict[str, UploadedFile]] = None,
        actor: Optional[dict] = None,
    ) -> str:
        """
        Create or update a blog post

        Raises:
            ValidationFailedException: Missing headline or cover image
            StorageUploadException: Image upload failed (nothing is saved)
        """
        if not draft.title.strip() or not (draft.coverImage or cover_file):
            raise ValidationFailedException("Headline and cover image are required.", field="title")

        cover_url = self.storage.upload(cover_file, folder="blogs") if cover_file else draft.coverImage

        section_files = section_files or {}
        sections: List[dict] = []
        for section in draft.sections:
            data = section.model_dump(exclude_none=True)
            upload = section_files.get(section.id)
            if upload is not None:
                data["imageUrl"] = self.storage.upload(upload, folder="blogs")
            sections.append(data)

        auto_slug = make_slug(draft.title)
        slug = draft.seo.slug or auto_slug
        payload = {
            "title": draft.title,
            "category": draft.category.value,
            "status": draft.status.value,
            "website": BlogWebsite.resolve(draft.website).value,
            "coverImage": cover_url,
            "sections": sections,
            "slug": slug,
            "seo": {
                "title": draft.seo.title or draft.title,
                "slug": slug,
                "description": draft.seo.description or "",
            },
            "updatedAt": SERVER_TIMESTAMP,
        }

        if editing_id:
            self.repo.update(editing_id, payload)
            self.audit.log_event(
                AuditAction.UPDATE, "blog", editing_id, draft.title,
                context={"page": BLOG_PAGE, "source": "blog-creator", "collection": BLOGS},
                actor=actor,
            )
            return editing_id

        payload["createdAt"] = SERVER_TIMESTAMP
        blog_id = self.repo.create(payload)
        self.audit.log_event(
            AuditAction.CREATE, "blog", blog_id, draft.title,
            context={"page": BLOG_PAGE, "source": "blog-creator", "collection": BLOGS},
            actor=actor,
        )
        return blog_id

    def delete_blog(self, blog_id: str, actor: Optional[dict] = None) -> None:
        blog = self.repo.get(blog_id)
        self.repo.delete(blog_id)
        self.audit.log_event(
            AuditAction.DELETE, "blog", blog_id, blog.title,
            context={"page": BLOG_PAGE, "source": "blog-list", "collection": BLOGS},
            actor=actor,
        )
