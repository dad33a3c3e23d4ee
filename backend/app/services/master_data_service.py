"""
Master Data Service
Maintenance of the classification collections used by the product forms

Brands, applications and product families carry a display title, the
websites they are used on and an image. Spec groups hold the labels that
become spec fields on the product forms; standalone spec labels are a pool
the group editor picks from. Titles, names and labels are stored upper-case.

Author: TM3
Date: 2026-02-10
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from app.core.database import (
    APPLICATIONS, BRANDS, PRODUCT_FAMILIES, SPEC_ITEMS, SPECS, SERVER_TIMESTAMP, commit_in_chunks,
)
from app.core.exceptions import DocumentNotFoundException, ValidationFailedException
from app.domain.audit import AuditAction
from app.domain.catalog import Website
from app.domain.document import CMSDocument
from app.domain.master_data import ApplicationDraft, BrandDraft, ProductFamilyDraft, SpecGroupDraft
from app.repositories.master_data_repository import MasterDataRepository
from app.services.audit_service import AuditService
from app.services.storage_service import CloudinaryStorage, UploadedFile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MasterDataKind:
    key: str
    collection: str
    field: str
    entity_type: str
    page: str
    newest_first: bool = True
    toggleable: bool = False


KINDS = {
    kind.key: kind for kind in (
        MasterDataKind("brands", BRANDS, "title", "brand", "/products/brands"),
        MasterDataKind(
            "applications", APPLICATIONS, "title", "application", "/products/applications",
            newest_first=False, toggleable=True,
        ),
        MasterDataKind("product-families", PRODUCT_FAMILIES, "title", "product-family", "/products/product-families"),
        MasterDataKind("spec-groups", SPECS, "name", "spec-group", "/products/specs", toggleable=True),
        MasterDataKind("spec-items", SPEC_ITEMS, "label", "spec-item", "/products/specs"),
    )
}


def get_kind(key: str) -> MasterDataKind:
    kind = KINDS.get(key)
    if kind is None:
        raise DocumentNotFoundException("master_data", key)
    return kind


def _websites(websites: List[Website]) -> List[str]:
    return [w.value for w in websites]


def _spec_labels(draft: SpecGroupDraft) -> List[dict]:
    """Non-blank labels, upper-cased, first occurrence wins"""
    labels: List[dict] = []
    for item in draft.items:
        label = item.label.strip().upper()
        if label and all(existing["label"] != label for existing in labels):
            labels.append({"label": label})
    return labels


class MasterDataService:

    def __init__(self, db, storage: Optional[CloudinaryStorage] = None):
        self.db = db
        self.storage = storage
        self.audit = AuditService(db)

    def repo(self, kind: MasterDataKind) -> MasterDataRepository:
        return MasterDataRepository(self.db, kind.collection, kind.field)

    def list_items(self, kind: MasterDataKind) -> List[CMSDocument]:
        return self.repo(kind).find_all(order_by="createdAt", descending=kind.newest_first)

    def _image(self, upload: Optional[UploadedFile], current: str, folder: str) -> str:
        if upload is None:
            return current or ""
        return self.storage.upload(upload, folder=folder)

    def _save(
        self,
        kind: MasterDataKind,
        payload: dict,
        editing_id: Optional[str],
        actor: Optional[dict],
        defaults: Optional[dict] = None,
    ) -> str:
        """Create (with createdAt and `defaults`) or update, then audit"""
        repo = self.repo(kind)
        payload["updatedAt"] = SERVER_TIMESTAMP
        name = payload[kind.field]
        context = {"page": kind.page, "source": f"{kind.entity_type}-maintenance", "collection": kind.collection}

        if editing_id:
            repo.update(editing_id, payload)
            self.audit.log_event(AuditAction.UPDATE, kind.entity_type, editing_id, name, context=context, actor=actor)
            return editing_id

        payload.update(defaults or {})
        payload["createdAt"] = SERVER_TIMESTAMP
        item_id = repo.create(payload)
        self.audit.log_event(AuditAction.CREATE, kind.entity_type, item_id, name, context=context, actor=actor)
        return item_id

    # ------------------------------------------------------------------
    # Brands, applications, product families
    # ------------------------------------------------------------------

    def save_brand(
        self,
        draft: BrandDraft,
        editing_id: Optional[str] = None,
        image_file: Optional[UploadedFile] = None,
        actor: Optional[dict] = None,
    ) -> str:
        if not (draft.title.strip() and draft.category and draft.href and draft.websites):
            raise ValidationFailedException("Required fields missing")
        if image_file is None and not draft.image:
            raise ValidationFailedException("Brand logo is required", field="image")

        payload = {
            "title": draft.title.strip().upper(),
            "description": draft.description or "",
            "category": draft.category,
            "href": draft.href,
            "websites": _websites(draft.websites),
            "image": self._image(image_file, draft.image, "brands"),
        }
        return self._save(KINDS["brands"], payload, editing_id, actor)

    def save_application(
        self,
        draft: ApplicationDraft,
        editing_id: Optional[str] = None,
        image_file: Optional[UploadedFile] = None,
        actor: Optional[dict] = None,
    ) -> str:
        if not draft.title.strip():
            raise ValidationFailedException("Please enter a title", field="title")
        if not draft.websites:
            raise ValidationFailedException("Select at least one website", field="websites")

        payload = {
            "title": draft.title.strip().upper(),
            "description": draft.description,
            "websites": _websites(draft.websites),
            "imageUrl": self._image(image_file, draft.imageUrl, "applications"),
        }
        return self._save(KINDS["applications"], payload, editing_id, actor, defaults={"isActive": True})

    def save_product_family(
        self,
        draft: ProductFamilyDraft,
        editing_id: Optional[str] = None,
        image_file: Optional[UploadedFile] = None,
        actor: Optional[dict] = None,
    ) -> str:
        """
        Create or update a product family

        `specifications` lists the spec group ids whose labels become the
        spec fields of products in this family.
        """
        if not draft.title.strip() or not draft.websites:
            raise ValidationFailedException("Required fields missing")

        payload = {
            "title": draft.title.strip().upper(),
            "description": draft.description,
            "websites": _websites(draft.websites),
            "specifications": list(dict.fromkeys(draft.specifications)),
            "imageUrl": self._image(image_file, draft.imageUrl, "product-families"),
        }
        return self._save(KINDS["product-families"], payload, editing_id, actor, defaults={"isActive": True})

    def set_family_websites(self, websites: List[Website], actor: Optional[dict] = None) -> int:
        """Replace the websites of every product family"""
        if not websites:
            raise ValidationFailedException("Select at least one website first.", field="websites")

        kind = KINDS["product-families"]
        repo = self.repo(kind)
        values = _websites(websites)
        families = repo.find_all()
        updated = commit_in_chunks(
            self.db, families,
            lambda batch, family: batch.update(repo.document(family.id), {
                "websites": values,
                "updatedAt": SERVER_TIMESTAMP,
            }),
        )
        logger.info(f"Set websites of {updated} product families to {values}")

        self.audit.log_event(
            AuditAction.UPDATE, kind.entity_type, None, f"{updated} items",
            context={"page": kind.page, "source": "product-family-maintenance", "collection": kind.collection, "bulk": True},
            metadata={"websites": values},
            actor=actor,
        )
        return updated

    # ------------------------------------------------------------------
    # Spec groups and standalone labels
    # ------------------------------------------------------------------

    def save_spec_group(self, draft: SpecGroupDraft, editing_id: Optional[str] = None, actor: Optional[dict] = None) -> str:
        if not draft.name.strip():
            raise ValidationFailedException("Group name is required", field="name")
        items = _spec_labels(draft)
        if not items:
            raise ValidationFailedException("Add at least one specification", field="items")

        payload = {"name": draft.name.strip().upper(), "items": items}
        return self._save(KINDS["spec-groups"], payload, editing_id, actor, defaults={"isActive": True})

    def add_spec_item(self, label: str, actor: Optional[dict] = None) -> str:
        value = (label or "").strip().upper()
        if not value:
            raise ValidationFailedException("Label is required", field="label")
        return self._save(KINDS["spec-items"], {"label": value}, None, actor)

    # ------------------------------------------------------------------
    # Shared actions
    # ------------------------------------------------------------------

    def set_active(self, kind: MasterDataKind, item_id: str, is_active: bool, actor: Optional[dict] = None) -> None:
        """Show or hide an application / spec group"""
        if not kind.toggleable:
            raise ValidationFailedException(f"{kind.key} cannot be hidden", field="isActive")

        repo = self.repo(kind)
        item = repo.get(item_id)
        repo.update(item_id, {"isActive": is_active})
        self.audit.log_event(
            AuditAction.UPDATE, kind.entity_type, item_id, repo.display_value(item),
            context={"page": kind.page, "source": f"{kind.entity_type}-maintenance", "collection": kind.collection},
            metadata={"isActive": is_active},
            actor=actor,
        )

    def delete_item(self, kind: MasterDataKind, item_id: str, actor: Optional[dict] = None) -> None:
        repo = self.repo(kind)
        item = repo.get(item_id)
        repo.delete(item_id)
        self.audit.log_event(
            AuditAction.DELETE, kind.entity_type, item_id, repo.display_value(item),
            context={"page": kind.page, "source": f"{kind.entity_type}-maintenance", "collection": kind.collection},
            actor=actor,
        )
