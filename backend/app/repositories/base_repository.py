"""
Firestore Repository - Generic Data Access for one collection

Handles reads/writes of a single Firestore collection and returns domain
models built from the snapshots.

Author: TM3
Date: 2026-02-10
"""
import logging
from typing import Any, Dict, List, Optional, Type

from app.core.database import DESCENDING, ASCENDING, FieldFilter
from app.core.exceptions import DocumentNotFoundException
from app.domain.document import CMSDocument

logger = logging.getLogger(__name__)


class FirestoreRepository:
    """
    Repository for one Firestore collection

    Subclasses set `collection_name` and `model`; generic collections can be
    used directly: FirestoreRepository(db, "blogs", Blog)
    """

    collection_name: str = ""
    model: Type[CMSDocument] = CMSDocument

    def __init__(self, db, collection_name: Optional[str] = None, model: Optional[Type[CMSDocument]] = None):
        self.db = db
        if collection_name:
            self.collection_name = collection_name
        if model is not None:
            self.model = model

    @property
    def collection(self):
        return self.db.collection(self.collection_name)

    def document(self, doc_id: str):
        return self.collection.document(doc_id)

    def _map_snapshot(self, snapshot) -> CMSDocument:
        """Helper method to map a document snapshot to the domain model"""
        return self.model.from_document(snapshot.id, snapshot.to_dict())

    def find_all(
        self,
        order_by: Optional[str] = None,
        descending: bool = True,
        limit: Optional[int] = None
    ) -> List[CMSDocument]:
        """
        List documents of the collection

        Args:
            order_by: Field to order by (documents without it are left out by Firestore)
            descending: Newest first when ordering by a timestamp
            limit: Max documents returned

        Returns:
            List of domain models
        """
        query = self.collection
        if order_by:
            query = query.order_by(order_by, direction=DESCENDING if descending else ASCENDING)
        if limit:
            query = query.limit(limit)
        return [self._map_snapshot(snap) for snap in query.stream()]

    def find_where(self, field: str, op: str, value: Any) -> List[CMSDocument]:
        """Documents matching a single field filter"""
        query = self.collection.where(filter=FieldFilter(field, op, value))
        return [self._map_snapshot(snap) for snap in query.stream()]

    def find_by_id(self, doc_id: str) -> Optional[CMSDocument]:
        """
        Find document by id

        Returns:
            Domain model or None if not found
        """
        snapshot = self.document(doc_id).get()
        if not snapshot.exists:
            return None
        return self._map_snapshot(snapshot)

    def get(self, doc_id: str) -> CMSDocument:
        """Find document by id or raise DocumentNotFoundException"""
        found = self.find_by_id(doc_id)
        if found is None:
            raise DocumentNotFoundException(self.collection_name, doc_id)
        return found

    def find_by_ids(self, doc_ids: List[str]) -> List[CMSDocument]:
        """Existing documents among doc_ids (unknown ids are ignored)"""
        found = []
        for doc_id in doc_ids:
            item = self.find_by_id(doc_id)
            if item is not None:
                found.append(item)
        return found

    def create(self, data: Dict[str, Any]) -> str:
        """Add a document with an auto id and return the id"""
        _, ref = self.collection.add(data)
        logger.info(f"Created {self.collection_name}/{ref.id}")
        return ref.id

    def set(self, doc_id: str, data: Dict[str, Any], merge: bool = False) -> None:
        self.document(doc_id).set(data, merge=merge)

    def update(self, doc_id: str, data: Dict[str, Any]) -> None:
        """Partial update of an existing document"""
        ref = self.document(doc_id)
        if not ref.get().exists:
            raise DocumentNotFoundException(self.collection_name, doc_id)
        ref.update(data)
        logger.info(f"Updated {self.collection_name}/{doc_id}")

    def delete(self, doc_id: str) -> None:
        self.document(doc_id).delete()
        logger.info(f"Deleted {self.collection_name}/{doc_id}")
