"""
Base model for Firestore documents

Firestore does not enforce a schema, so every CMS document model keeps
unknown fields (extra="allow") and uses the stored camelCase field names.

Author: TM3
Date: 2026-02-10
"""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class CMSDocument(BaseModel):
    """A Firestore document plus its id"""

    id: Optional[str] = None

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
        json_encoders={
            datetime: lambda v: v.isoformat()
        }
    )

    @classmethod
    def from_document(cls, doc_id: str, data: Optional[Dict[str, Any]]):
        """Build the model from a snapshot id and its to_dict() payload"""
        payload = dict(data or {})
        payload["id"] = doc_id
        return cls.model_validate(payload)

    def to_dict(self) -> dict:
        """All fields, including the ones not declared on the model"""
        return self.model_dump()

    def to_firestore(self) -> dict:
        """Payload to write back: everything except the id"""
        data = self.model_dump(exclude_unset=True)
        data.pop("id", None)
        return data
