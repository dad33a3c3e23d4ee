"""
Conexión a Firestore (firebase-admin)

Este módulo centraliza el acceso a la base de datos documental:
- Inicialización única de la app de firebase-admin
- Cliente de Firestore como dependencia de FastAPI
- Nombres de colecciones compartidas por todas las páginas del CMS
- Escrituras en lote (batch) divididas en bloques

Author: TM3
Updated: 2026-02-10
"""
import logging
from typing import Callable, Iterable, List, TypeVar

import firebase_admin
from firebase_admin import credentials, firestore

from .config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ============================================================================
# Collection names
# ============================================================================

PRODUCTS = "products"
BLOGS = "blogs"
FAQ_SETTINGS = "faq_settings"
HOME_POPUPS = "home_popups"
PROJECTS = "projects"
RECYCLE_BIN = "recycle_bin"
AUDIT_LOGS = "cms_audit_logs"
ACTIVITY_LOGS = "cmsactivity_logs"
CATEGORIES = "categoriesmaintenance"
BRANDS = "brand_name"
APPLICATIONS = "applications"
SPECS = "specs"
PRODUCT_FAMILIES = "productfamilies"
CUSTOM_SECTIONS = "custom_sections"
SPEC_ITEMS = "specItems"

# Firestore sentinels and query helpers, re-exported so services never import firebase_admin
SERVER_TIMESTAMP = firestore.SERVER_TIMESTAMP
ArrayUnion = firestore.ArrayUnion
FieldFilter = firestore.FieldFilter
ASCENDING = firestore.Query.ASCENDING
DESCENDING = firestore.Query.DESCENDING


# ============================================================================
# firebase-admin initialization
# ============================================================================

def init_firebase_app() -> firebase_admin.App:
    """
    Initialize the default firebase-admin app once per process

    Uses FIREBASE_CREDENTIALS_FILE (service account JSON) when configured,
    application default credentials otherwise.
    """
    if firebase_admin._apps:
        return firebase_admin.get_app()

    options = {}
    if settings.FIREBASE_PROJECT_ID:
        options["projectId"] = settings.FIREBASE_PROJECT_ID

    if settings.FIREBASE_CREDENTIALS_FILE:
        logger.info(f"Initializing Firebase with service account {settings.FIREBASE_CREDENTIALS_FILE}")
        cred = credentials.Certificate(settings.FIREBASE_CREDENTIALS_FILE)
    else:
        logger.info("Initializing Firebase with application default credentials")
        cred = credentials.ApplicationDefault()

    return firebase_admin.initialize_app(cred, options or None)


_client = None


def get_firestore():
    """
    FastAPI dependency para obtener el cliente de Firestore

    Usage:
        @router.get("/items")
        def read_items(db = Depends(get_firestore)):
            ...
    """
    global _client
    if _client is None:
        init_firebase_app()
        _client = firestore.client()
    return _client


# ============================================================================
# Batched writes
# ============================================================================

def chunked(items: Iterable[T], size: int) -> List[List[T]]:
    """Split items into lists of at most `size` elements"""
    items = list(items)
    if size < 1:
        raise ValueError("chunk size must be >= 1")
    return [items[i:i + size] for i in range(0, len(items), size)]


def commit_in_chunks(db, items: Iterable[T], write: Callable, chunk_size: int = None) -> int:
    """
    Apply `write(batch, item)` to every item, committing one batch per chunk

    Firestore caps a batch at 500 writes; a soft delete or restore uses two
    writes per item, so chunks default to settings.BATCH_CHUNK_SIZE (200).

    Returns:
        Number of items written
    """
    size = chunk_size or settings.BATCH_CHUNK_SIZE
    written = 0
    for chunk in chunked(items, size):
        batch = db.batch()
        for item in chunk:
            write(batch, item)
        batch.commit()
        written += len(chunk)
        logger.debug(f"Committed batch of {len(chunk)} items ({written} total)")
    return written
