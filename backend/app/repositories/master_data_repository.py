"""
Master Data Repository

Classification collections shared by all product forms: brands, categories,
product families, applications and spec names. Each one stores its display
value in a single field (title or name) plus the websites it is used on.

Author: TM3
Date: 2026-02-10
"""
import logging
from typing import List, Optional, Sequence

from app.core.database import (
    APPLICATIONS, BRANDS, CATEGORIES, PRODUCT_FAMILIES, SPEC_ITEMS, SPECS,
    SERVER_TIMESTAMP, ArrayUnion,
)
from app.domain.document import CMSDocument
from app.repositories.base_repository import FirestoreRepository

logger = logging.getLogger(__name__)

# collection -> field holding the display value
MASTER_FIELDS = {
    BRANDS: "title",
    CATEGORIES: "name",
    APPLICATIONS: "title",
    SPECS: "name",
    PRODUCT_FAMILIES: "title",
    SPEC_ITEMS: "label",
}


class MasterDataRepository(FirestoreRepository):
    """Repository for one master data collection"""

    def __init__(self, db, collection_name: str, field: Optional[str] = None):
        super().__init__(db, collection_name, CMSDocument)
        self.field = field or MASTER_FIELDS.get(collection_name, "name")

    def display_value(self, item: CMSDocument) -> str:
        data = item.to_dict()
        return data.get("title") or data.get("name") or data.get("label") or "Unnamed"

    def find_by_value(self, value: str) -> Optional[CMSDocument]:
        """Case-insensitive lookup on the display field"""
        needle = (value or "").strip().lower()
        if not needle:
            return None
        for item in self.find_all():
            stored = item.to_dict().get(self.field)
            if isinstance(stored, str) and stored.strip().lower() == needle:
                return item
        return None

    def upsert_with_websites(self, value: str, websites: Sequence[str], extra: dict = None) -> str:
        """
        Make sure `value` exists and is linked to `websites`

        Existing entries get the websites merged in; new ones are created
        with `extra` default fields.

        Returns:
            Document id
        """
        existing = self.find_by_value(value)
        if existing is not None:
            self.document(existing.id).update({
                "websites": ArrayUnion(list(websites)),
                "updatedAt": SERVER_TIMESTAMP,
            })
            return existing.id

        payload = {
            self.field: value.strip(),
            "websites": list(websites),
            "createdAt": SERVER_TIMESTAMP,
            "updatedAt": SERVER_TIMESTAMP,
        }
        payload.update(extra or {})
        doc_id = self.create(payload)
        logger.info(f"Created {self.collection_name} entry '{value}'")
        return doc_id

    def find_for_websites(self, websites: List[str]) -> List[CMSDocument]:
        """Entries linked to any of the websites"""
        return self.find_where("websites", "array_contains_any", websites)
