"""
Recycle Bin Repository

Soft-deleted documents, keyed by the id they had in their original
collection.

Author: TM3
Date: 2026-02-10
"""
from typing import List

from app.core.database import RECYCLE_BIN
from app.domain.recycle_bin import RecycleBinItem
from app.repositories.base_repository import FirestoreRepository


class RecycleBinRepository(FirestoreRepository):

    collection_name = RECYCLE_BIN
    model = RecycleBinItem

    def find_latest(self) -> List[RecycleBinItem]:
        """Most recently deleted first"""
        return self.find_all(order_by="deletedAt", descending=True)
