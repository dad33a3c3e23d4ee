"""
FAQ Service
Question/answer pairs shown on the websites' FAQ sections
"""
import logging
from typing import List, Optional

from app.core.database import FAQ_SETTINGS, SERVER_TIMESTAMP
from app.core.exceptions import ValidationFailedException
from app.domain.audit import AuditAction
from app.domain.catalog import DEFAULT_FAQ_ICON, FAQ_ICONS
from app.domain.content import Faq, FaqDraft
from app.repositories.base_repository import FirestoreRepository
from app.services.audit_service import AuditService

logger = logging.getLogger(__name__)

FAQ_CONTEXT = {"page": "/content/faq-manager", "source": "faq-manager", "collection": FAQ_SETTINGS}


def _validate(draft: FaqDraft) -> None:
    if not draft.question.strip():
        raise ValidationFailedException("Question is required.", field="question")
    if not draft.answer.strip():
        raise ValidationFailedException("Answer is required.", field="answer")


class FaqService:

    def __init__(self, db):
        self.repo = FirestoreRepository(db, FAQ_SETTINGS, Faq)
        self.audit = AuditService(db)

    def list_faqs(self) -> List[Faq]:
        return self.repo.find_all(order_by="createdAt", descending=True)

    def create_faq(self, draft: FaqDraft, actor: Optional[dict] = None) -> str:
        _validate(draft)
        faq_id = self.repo.create({
            "question": draft.question,
            "answer": draft.answer,
            "icon": draft.icon if draft.icon in FAQ_ICONS else DEFAULT_FAQ_ICON,
            "createdAt": SERVER_TIMESTAMP,
        })
        self.audit.log_event(AuditAction.CREATE, "faq", faq_id, draft.question, context=FAQ_CONTEXT, actor=actor)
        return faq_id

    def update_faq(self, faq_id: str, draft: FaqDraft, actor: Optional[dict] = None) -> None:
        """Only question, answer and icon are written"""
        _validate(draft)
        self.repo.update(faq_id, {
            "question": draft.question,
            "answer": draft.answer,
            "icon": draft.icon if draft.icon in FAQ_ICONS else DEFAULT_FAQ_ICON,
        })
        self.audit.log_event(AuditAction.UPDATE, "faq", faq_id, draft.question, context=FAQ_CONTEXT, actor=actor)

    def delete_faq(self, faq_id: str, actor: Optional[dict] = None) -> None:
        faq = self.repo.get(faq_id)
        self.repo.delete(faq_id)
        self.audit.log_event(AuditAction.DELETE, "faq", faq_id, faq.question, context=FAQ_CONTEXT, actor=actor)
