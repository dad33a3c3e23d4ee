"""
Recycle Bin Service
Restore or permanently delete soft-deleted documents

Single-item actions require the admin to type the item name exactly;
bulk permanent delete requires a completed long-press hold.

Author: TM3
Date: 2026-02-10
"""
import logging
from typing import List, Optional

from app.core.database import RECYCLE_BIN, commit_in_chunks
from app.core.exceptions import ConfirmationMismatchException
from app.domain.audit import AuditAction
from app.domain.recycle_bin import RecycleBinItem
from app.repositories.recycle_bin_repository import RecycleBinRepository
from app.services.audit_service import AuditService
from app.services.listing import Page, paginate, pagination_window, search_documents
from app.services.long_press import HoldRegistry, hold_registry

logger = logging.getLogger(__name__)

RECYCLE_BIN_PAGE_SIZE = 10
RECYCLE_BIN_PAGE = "/recycle-bin/deleted-products"
BULK_DELETE_ACTION = "recycle-bin:bulk-permanent-delete"
SEARCH_FIELDS = ("name", "itemDescription", "itemCode")


def search(items: List[RecycleBinItem], query: str, page: int = 1) -> dict:
    """Filter by name / item code and paginate, with the pager window"""
    rows = search_documents(items, query, SEARCH_FIELDS)
    result: Page = paginate(rows, page, RECYCLE_BIN_PAGE_SIZE)
    return {
        "page": result,
        "window": pagination_window(result.page, result.total_pages),
    }


def _check_confirmation(item: RecycleBinItem, confirm_name: str) -> None:
    # nameless entries can never be confirmed
    if not item.display_name or confirm_name != item.display_name:
        raise ConfirmationMismatchException(item.display_name)


class RecycleBinService:

    def __init__(self, db, holds: Optional[HoldRegistry] = None):
        self.db = db
        self.repo = RecycleBinRepository(db)
        self.holds = holds or hold_registry
        self.audit = AuditService(db)

    def list_items(self) -> List[RecycleBinItem]:
        return self.repo.find_latest()

    def _restore_write(self, batch, item: RecycleBinItem) -> None:
        target = self.db.collection(item.target_collection).document(item.id)
        batch.set(target, item.restored_payload())
        batch.delete(self.repo.document(item.id))

    def restore(self, item_id: str, confirm_name: str, actor: Optional[dict] = None) -> RecycleBinItem:
        """
        Put the document back under its original id and collection

        Raises:
            DocumentNotFoundException: Unknown bin entry
            ConfirmationMismatchException: Typed name differs
        """
        item = self.repo.get(item_id)
        _check_confirmation(item, confirm_name)

        commit_in_chunks(self.db, [item], self._restore_write)
        logger.info(f"Restored {item_id} to {item.target_collection}")

        self.audit.log_event(
            AuditAction.RESTORE, item.target_collection, item_id, item.display_name,
            context={
                "page": RECYCLE_BIN_PAGE,
                "source": "recycle-bin:restore",
                "collection": item.target_collection,
            },
            actor=actor,
        )
        return item

    def permanent_delete(self, item_id: str, confirm_name: str, actor: Optional[dict] = None) -> RecycleBinItem:
        item = self.repo.get(item_id)
        _check_confirmation(item, confirm_name)

        self.repo.delete(item_id)
        self.audit.log_event(
            AuditAction.DELETE, item.target_collection, item_id, item.display_name,
            context={
                "page": RECYCLE_BIN_PAGE,
                "source": "recycle-bin:permanent-delete",
                "collection": RECYCLE_BIN,
            },
            actor=actor,
        )
        return item

    def bulk_restore(self, item_ids: List[str], actor: Optional[dict] = None) -> int:
        """Restore the selected items in chunks of BATCH_CHUNK_SIZE; unknown ids are ignored"""
        items = self.repo.find_by_ids(item_ids)
        if not items:
            return 0

        restored = commit_in_chunks(self.db, items, self._restore_write)
        self.audit.log_event(
            AuditAction.RESTORE, "products", None, f"{restored} items",
            context={
                "page": RECYCLE_BIN_PAGE,
                "source": "recycle-bin:bulk-restore",
                "collection": RECYCLE_BIN,
                "bulk": True,
            },
            metadata={"ids": [i.id for i in items]},
            actor=actor,
        )
        return restored

    def begin_bulk_delete_hold(self):
        return self.holds.begin(BULK_DELETE_ACTION)

    def release_hold(self, hold_id: str) -> None:
        self.holds.release(hold_id)

    def bulk_permanent_delete(self, item_ids: List[str], hold_id: str, actor: Optional[dict] = None) -> int:
        """
        Permanently delete the selected items

        Raises:
            HoldNotCompletedException: The long-press was not held long enough
        """
        self.holds.consume(hold_id, BULK_DELETE_ACTION)

        items = self.repo.find_by_ids(item_ids)
        if not items:
            return 0

        deleted = commit_in_chunks(
            self.db, items, lambda batch, item: batch.delete(self.repo.document(item.id))
        )
        self.audit.log_event(
            AuditAction.DELETE, "products", None, f"{deleted} items",
            context={
                "page": RECYCLE_BIN_PAGE,
                "source": BULK_DELETE_ACTION,
                "collection": RECYCLE_BIN,
                "bulk": True,
            },
            metadata={"ids": [i.id for i in items]},
            actor=actor,
        )
        return deleted
