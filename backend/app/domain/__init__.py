"""
Domain Layer - Business Entities

This layer contains Pydantic models representing the CMS documents.
Firestore enforces no schema, so models keep unknown fields.

Author: TM3
Date: 2025-10-17
"""
from app.domain.document import CMSDocument
from app.domain.product import Product, ProductFormDraft, SpecGroup, SpecItem
from app.domain.audit import AuditAction, AuditActor, AuditContext, AuditLog
from app.domain.content import (
    Blog, BlogDraft, BlogSection, Faq, FaqDraft, Popup, PopupDraft, Project, ProjectDraft,
)
from app.domain.recycle_bin import RecycleBinItem
from app.domain.master_data import (
    ApplicationDraft, BrandDraft, ProductFamilyDraft, SpecGroupDraft, SpecLabel,
)

__all__ = [
    'CMSDocument',
    'Product', 'ProductFormDraft', 'SpecGroup', 'SpecItem',
    'AuditAction', 'AuditActor', 'AuditContext', 'AuditLog',
    'Blog', 'BlogDraft', 'BlogSection', 'Faq', 'FaqDraft',
    'Popup', 'PopupDraft', 'Project', 'ProjectDraft',
    'RecycleBinItem',
    'ApplicationDraft', 'BrandDraft', 'ProductFamilyDraft', 'SpecGroupDraft', 'SpecLabel',
]
