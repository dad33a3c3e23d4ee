"""
Product Service
All Products table: search, filters, suggestions, soft delete and bulk
website assignment

Author: TM3
Date: 2026-02-10
"""
import logging
from typing import Dict, List, Optional

from app.core.database import PRODUCTS, RECYCLE_BIN, SERVER_TIMESTAMP, ArrayUnion, commit_in_chunks
from app.core.exceptions import ValidationFailedException
from app.domain.audit import AuditAction
from app.domain.product import Product
from app.repositories.product_repository import ProductRepository
from app.repositories.recycle_bin_repository import RecycleBinRepository
from app.services.audit_service import AuditService
from app.services.listing import (
    Page, filter_columns, paginate, search_documents, sort_documents,
)

logger = logging.getLogger(__name__)

PRODUCT_PAGE_SIZE = 10
MAX_SUGGESTIONS = 7
PRODUCTS_PAGE = "/admin/products/all"

GLOBAL_SEARCH_FIELDS = (
    "itemDescription",
    "name",
    "ecoItemCode",
    "litItemCode",
    "itemCode",
    "categories",
)


def query_products(
    products: List[Product],
    search: str = "",
    column_filters: Optional[Dict[str, str]] = None,
    sort_by: Optional[str] = None,
    descending: bool = False,
    page: int = 1,
    page_size: int = PRODUCT_PAGE_SIZE,
) -> Page:
    """Global search, then column filters, then sort, then paginate"""
    rows = search_documents(products, search, GLOBAL_SEARCH_FIELDS)
    rows = filter_columns(rows, column_filters)
    rows = sort_documents(rows, sort_by, descending)
    return paginate(rows, page, page_size)


def suggestions(products: List[Product], query: str) -> List[Product]:
    """First 7 global-search matches; nothing for a blank query"""
    if not (query or "").strip():
        return []
    return search_documents(products, query, GLOBAL_SEARCH_FIELDS)[:MAX_SUGGESTIONS]


class ProductService:

    def __init__(self, db):
        self.db = db
        self.repo = ProductRepository(db)
        self.bin_repo = RecycleBinRepository(db)
        self.audit = AuditService(db)

    def list_products(self) -> List[Product]:
        """Products on any managed website, newest first"""
        return self.repo.find_on_websites()

    def _soft_delete_write(self, actor: Optional[dict]):
        def write(batch, product: Product):
            payload = product.to_firestore()
            payload.update({
                "originalCollection": PRODUCTS,
                "originPage": PRODUCTS_PAGE,
                "deletedAt": SERVER_TIMESTAMP,
                "deletedBy": actor or {},
            })
            batch.set(self.bin_repo.document(product.id), payload)
            batch.delete(self.repo.document(product.id))
        return write

    def soft_delete(self, product_id: str, actor: Optional[dict] = None) -> Product:
        """
        Move one product into the recycle bin (same id), in a single batch
        """
        product = self.repo.get(product_id)
        commit_in_chunks(self.db, [product], self._soft_delete_write(actor))
        logger.info(f"Moved product {product_id} to recycle bin")
        self.audit.log_event(
            AuditAction.DELETE, "product", product_id, product.display_name,
            context={"page": PRODUCTS_PAGE, "source": "all-products:delete", "collection": PRODUCTS},
            metadata={"movedTo": RECYCLE_BIN},
            actor=actor,
        )
        return product

    def bulk_soft_delete(self, product_ids: List[str], actor: Optional[dict] = None) -> int:
        """Move many products into the recycle bin; unknown ids are ignored"""
        products = self.repo.find_by_ids(product_ids)
        moved = commit_in_chunks(self.db, products, self._soft_delete_write(actor))
        if moved:
            self.audit.log_event(
                AuditAction.DELETE, "product", None, f"{moved} items",
                context={
                    "page": PRODUCTS_PAGE, "source": "all-products:bulk-delete",
                    "collection": PRODUCTS, "bulk": True,
                },
                metadata={"ids": [p.id for p in products], "movedTo": RECYCLE_BIN},
                actor=actor,
            )
        return moved

    def bulk_assign_websites(self, product_ids: List[str], websites: List[str], actor: Optional[dict] = None) -> int:
        """
        Add websites to many products; existing assignments are kept

        Both `websites` and `website` arrays get the union.
        """
        websites = [w for w in (websites or []) if w]
        if not websites:
            raise ValidationFailedException("Select at least one website.", field="websites")

        products = self.repo.find_by_ids(product_ids)

        def write(batch, product: Product):
            batch.update(self.repo.document(product.id), {
                "websites": ArrayUnion(websites),
                "website": ArrayUnion(websites),
                "updatedAt": SERVER_TIMESTAMP,
            })

        updated = commit_in_chunks(self.db, products, write)
        if updated:
            self.audit.log_event(
                AuditAction.UPDATE, "product", None, f"{updated} items",
                context={
                    "page": PRODUCTS_PAGE, "source": "all-products:assign-websites",
                    "collection": PRODUCTS, "bulk": True,
                },
                metadata={"ids": [p.id for p in products], "websites": websites},
                actor=actor,
            )
        return updated
