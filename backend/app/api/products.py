"""
Products API Endpoints
All Products table: search, column filters, suggestions, soft delete and
bulk website assignment

Author: TM3
Date: 2026-02-10
"""
import json
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from app.core.auth import TokenUser, get_current_user
from app.core.database import get_firestore
from app.core.exceptions import CMSException
from app.domain.catalog import MANAGED_PRODUCT_WEBSITES
from app.services import product_service
from app.services.listing import pagination_window
from app.services.product_service import ProductService

logger = logging.getLogger(__name__)

router = APIRouter()


class BulkIdsRequest(BaseModel):
    ids: List[str] = Field(..., min_length=1)


class AssignWebsitesRequest(BaseModel):
    ids: List[str] = Field(..., min_length=1)
    websites: List[str]


def _parse_filters(raw: Optional[str]) -> dict:
    if not raw:
        return {}
    try:
        filters = json.loads(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail="filters must be a JSON object")
    if not isinstance(filters, dict):
        raise HTTPException(status_code=400, detail="filters must be a JSON object")
    return {str(k): str(v) for k, v in filters.items()}


@router.get("/")
async def get_products(
    search: Optional[str] = Query(None, description="Search description, name, item codes, categories"),
    filters: Optional[str] = Query(None, description='Column filters as JSON, e.g. {"brand": "lit"}'),
    sort_by: Optional[str] = Query(None, description="Column to sort by"),
    descending: bool = Query(False),
    page: int = Query(1, ge=1),
    db=Depends(get_firestore)
):
    """
    Get products on the managed websites

    Search and filters are case-insensitive substring matches.
    """
    try:
        products = ProductService(db).list_products()
        result = product_service.query_products(
            products,
            search=search or "",
            column_filters=_parse_filters(filters),
            sort_by=sort_by,
            descending=descending,
            page=page,
        )

        return {
            "status": "success",
            "total": result.total_items,
            "count": len(result.items),
            "websites": list(MANAGED_PRODUCT_WEBSITES),
            "pagination": dict(result.to_dict(), window=pagination_window(result.page, result.total_pages)),
            "data": [p.to_dict() for p in result.items]
        }

    except (HTTPException, CMSException):
        raise
    except Exception as e:
        logger.error(f"Error fetching products: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching products: {str(e)}")


@router.get("/suggestions")
async def get_suggestions(
    q: str = Query("", description="Search text"),
    db=Depends(get_firestore)
):
    """Up to 7 search suggestions"""
    try:
        matches = product_service.suggestions(ProductService(db).list_products(), q)
        return {
            "status": "success",
            "count": len(matches),
            "data": [
                {"id": p.id, "name": p.display_name, "itemCode": p.itemCode or p.ecoItemCode or p.litItemCode}
                for p in matches
            ]
        }
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error fetching suggestions: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching suggestions: {str(e)}")


@router.delete("/{product_id}")
async def delete_product(
    product_id: str,
    db=Depends(get_firestore),
    user: TokenUser = Depends(get_current_user)
):
    """Move a product to the recycle bin"""
    try:
        product = ProductService(db).soft_delete(product_id, actor=user.to_actor())
        return {"status": "success", "data": {"id": product.id, "name": product.display_name}}
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error deleting product {product_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error deleting product: {str(e)}")


@router.post("/bulk/delete")
async def bulk_delete_products(
    body: BulkIdsRequest,
    db=Depends(get_firestore),
    user: TokenUser = Depends(get_current_user)
):
    try:
        moved = ProductService(db).bulk_soft_delete(body.ids, actor=user.to_actor())
        return {"status": "success", "data": {"moved": moved}}
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error bulk deleting products: {e}")
        raise HTTPException(status_code=500, detail=f"Error deleting products: {str(e)}")


@router.post("/bulk/assign-websites")
async def bulk_assign_websites(
    body: AssignWebsitesRequest,
    db=Depends(get_firestore),
    user: TokenUser = Depends(get_current_user)
):
    """Add websites to the selected products (existing ones are kept)"""
    try:
        updated = ProductService(db).bulk_assign_websites(body.ids, body.websites, actor=user.to_actor())
        return {"status": "success", "data": {"updated": updated}}
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error assigning websites: {e}")
        raise HTTPException(status_code=500, detail=f"Error assigning websites: {str(e)}")
