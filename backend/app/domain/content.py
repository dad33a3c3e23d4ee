"""
Content Domain Models

Blogs, FAQs, home popups and projects managed by the content pages.

Author: TM3
Date: 2026-02-10
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.domain.catalog import (
    BlogCategory, BlogStatus, BlogWebsite, ContentWebsite, DEFAULT_FAQ_ICON,
    PopupAlignment, ProjectCategory, Website,
)
from app.domain.document import CMSDocument


class BlogSection(BaseModel):
    """Body section of a blog post"""
    id: Optional[str] = None
    type: str = Field("paragraph", description="paragraph | image-detail")
    title: Optional[str] = None
    description: Optional[str] = None
    imageUrl: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class BlogSeo(BaseModel):
    title: Optional[str] = ""
    slug: Optional[str] = ""
    description: Optional[str] = ""


class Blog(CMSDocument):
    title: Optional[str] = ""
    category: Optional[str] = BlogCategory.INDUSTRY_NEWS.value
    status: Optional[str] = BlogStatus.PUBLISHED.value
    website: Optional[str] = BlogWebsite.DISRUPTIVE.value
    coverImage: Optional[str] = ""
    sections: Optional[List[BlogSection]] = None
    slug: Optional[str] = ""
    seo: Optional[BlogSeo] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class BlogDraft(BaseModel):
    """Blog editor state sent by the dashboard"""
    title: str = ""
    category: BlogCategory = BlogCategory.INDUSTRY_NEWS
    status: BlogStatus = BlogStatus.PUBLISHED
    website: str = BlogWebsite.DISRUPTIVE.value
    coverImage: str = ""
    sections: List[BlogSection] = Field(default_factory=list)
    seo: BlogSeo = Field(default_factory=BlogSeo)


class Faq(CMSDocument):
    question: Optional[str] = ""
    answer: Optional[str] = ""
    icon: Optional[str] = DEFAULT_FAQ_ICON
    createdAt: Optional[datetime] = None


class FaqDraft(BaseModel):
    question: str = ""
    answer: str = ""
    icon: str = DEFAULT_FAQ_ICON


class Popup(CMSDocument):
    title: Optional[str] = ""
    subtitle: Optional[str] = ""
    imageUrl: Optional[str] = ""
    alignment: Optional[str] = PopupAlignment.CENTER.value
    isActive: Optional[bool] = False
    link: Optional[str] = "/products"
    websites: Optional[List[str]] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class PopupDraft(BaseModel):
    title: str = ""
    subtitle: str = ""
    imageUrl: str = ""
    alignment: PopupAlignment = PopupAlignment.CENTER
    isActive: bool = False
    link: str = "/products"
    websites: List[ContentWebsite] = Field(default_factory=list)


class Project(CMSDocument):
    title: Optional[str] = ""
    description: Optional[str] = ""
    category: Optional[str] = ProjectCategory.INDUSTRIAL.value
    website: Optional[str] = Website.DISRUPTIVE.value
    imageUrl: Optional[str] = ""
    logoUrl: Optional[str] = ""
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class ProjectDraft(BaseModel):
    title: str = ""
    description: str = ""
    category: ProjectCategory = ProjectCategory.INDUSTRIAL
    website: str = Website.DISRUPTIVE.value
    imageUrl: str = ""
    logoUrl: str = ""
