"""
Audit Log Domain Model

Represents one entry of the cms_audit_logs collection: who did what to
which entity, from which page.

Author: TM3
Date: 2026-02-10
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.domain.document import CMSDocument


class AuditAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    RESTORE = "restore"


class AuditActor(BaseModel):
    """Admin who performed the action"""
    uid: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    accessLevel: Optional[str] = None


class AuditContext(BaseModel):
    """
    Where the action came from

    Fields:
        page: Dashboard route (e.g. /admin/products/all)
        source: Component/action identifier (e.g. recycle-bin:restore)
        collection: Firestore collection touched
        bulk: True when one event covers many documents
    """
    page: Optional[str] = None
    source: Optional[str] = None
    collection: Optional[str] = None
    bulk: bool = False

    model_config = ConfigDict(extra="allow")


class AuditLog(CMSDocument):
    """Audit log entry as stored in Firestore"""

    action: Optional[str] = Field(None, description="create | update | delete | restore")
    entityType: Optional[str] = Field(None, description="product, blog, faq, ...")
    entityId: Optional[str] = None
    entityName: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    context: AuditContext = Field(default_factory=AuditContext)
    actor: AuditActor = Field(default_factory=AuditActor)
    timestamp: Optional[datetime] = None
