"""
Recycle Bin Domain Model

A soft-deleted document: the original payload plus deletion metadata.

Author: TM3
Date: 2026-02-10
"""
from datetime import datetime
from typing import Any, Dict, Optional

from app.domain.document import CMSDocument

# Fields added on soft delete and removed again on restore
DELETION_FIELDS = ("deletedAt", "deletedBy", "originalCollection", "originPage")


class RecycleBinItem(CMSDocument):
    name: Optional[str] = None
    itemDescription: Optional[str] = None
    itemCode: Optional[str] = None
    originalCollection: Optional[str] = None
    originPage: Optional[str] = None
    deletedAt: Optional[datetime] = None
    deletedBy: Optional[Dict[str, Any]] = None

    @property
    def display_name(self) -> str:
        """Name the admin must type to confirm restore / permanent delete"""
        return self.name or self.itemDescription or ""

    @property
    def target_collection(self) -> str:
        return self.originalCollection or "products"

    def restored_payload(self) -> dict:
        """Original document without the deletion metadata or the id"""
        data = self.model_dump(exclude_unset=True)
        data.pop("id", None)
        for key in DELETION_FIELDS:
            data.pop(key, None)
        return data
