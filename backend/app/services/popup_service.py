"""
Popup Service
Home-page popups per website, with the live preview payload
"""
import logging
from typing import List, Optional

from app.core.database import HOME_POPUPS, SERVER_TIMESTAMP
from app.core.exceptions import ValidationFailedException
from app.domain.audit import AuditAction
from app.domain.content import Popup, PopupDraft
from app.repositories.base_repository import FirestoreRepository
from app.services.audit_service import AuditService
from app.services.storage_service import CloudinaryStorage, UploadedFile

logger = logging.getLogger(__name__)

POPUP_CONTEXT = {"page": "/content/popup", "source": "popup-manager", "collection": HOME_POPUPS}


def preview(draft: PopupDraft, image_preview_url: Optional[str] = None) -> dict:
    """What the site visitor would see; hidden unless active on at least one site"""
    return {
        "headline": draft.title,
        "subtitle": draft.subtitle,
        "image": image_preview_url or draft.imageUrl or "",
        "alignment": draft.alignment.value,
        "link": draft.link or "/products",
        "websites": [w.value for w in draft.websites],
        "is_visible": bool(draft.isActive and draft.websites),
    }


class PopupService:

    def __init__(self, db, storage: CloudinaryStorage):
        self.repo = FirestoreRepository(db, HOME_POPUPS, Popup)
        self.storage = storage
        self.audit = AuditService(db)

    def list_popups(self) -> List[Popup]:
        return self.repo.find_all(order_by="createdAt", descending=True)

    def save_popup(
        self,
        draft: PopupDraft,
        editing_id: Optional[str] = None,
        image_file: Optional[UploadedFile] = None,
        actor: Optional[dict] = None,
    ) -> str:
        """
        Create or update a popup

        A new image file replaces the stored URL; otherwise the existing URL
        (or "") is kept.
        """
        if not draft.title.strip():
            raise ValidationFailedException("Headline is required.", field="title")
        if not draft.websites:
            raise ValidationFailedException("Select at least one website.", field="websites")

        image_url = self.storage.upload(image_file, folder="popups") if image_file else (draft.imageUrl or "")
        payload = {
            "title": draft.title,
            "subtitle": draft.subtitle,
            "imageUrl": image_url,
            "alignment": draft.alignment.value,
            "isActive": draft.isActive,
            "link": draft.link or "/products",
            "websites": [w.value for w in draft.websites],
            "updatedAt": SERVER_TIMESTAMP,
        }

        if editing_id:
            self.repo.update(editing_id, payload)
            self.audit.log_event(AuditAction.UPDATE, "popup", editing_id, draft.title, context=POPUP_CONTEXT, actor=actor)
            return editing_id

        payload["createdAt"] = SERVER_TIMESTAMP
        popup_id = self.repo.create(payload)
        self.audit.log_event(AuditAction.CREATE, "popup", popup_id, draft.title, context=POPUP_CONTEXT, actor=actor)
        return popup_id

    def delete_popup(self, popup_id: str, actor: Optional[dict] = None) -> None:
        popup = self.repo.get(popup_id)
        self.repo.delete(popup_id)
        self.audit.log_event(AuditAction.DELETE, "popup", popup_id, popup.title, context=POPUP_CONTEXT, actor=actor)
