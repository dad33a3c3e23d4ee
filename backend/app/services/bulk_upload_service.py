"""
Bulk Upload Service
Imports products from a CSV or Excel spreadsheet

Purpose:
- Read the 12 fixed product columns (pandas, openpyxl engine for .xlsx)
- Skip duplicates (same name already on one of the row's websites)
- Keep brand / category / application / spec master lists in sync
- Import images by URL (Google Drive share links supported)
- Run as a cancellable background job

Author: TM3
Date: 2026-02-10
"""
import io
import logging
from typing import Dict, List, Optional

import pandas as pd

from app.core.database import APPLICATIONS, BRANDS, CATEGORIES, PRODUCTS, SPECS, SERVER_TIMESTAMP
from app.core.exceptions import SpreadsheetParseException, UploadCancelledException
from app.domain.audit import AuditAction
from app.domain.product import Product
from app.repositories.master_data_repository import MasterDataRepository
from app.repositories.product_repository import ProductRepository
from app.services.audit_service import AuditService
from app.services.job_registry import JobStatus, UploadJob
from app.services.spec_sheet_parser import cell_text
from app.services.storage_service import CloudinaryStorage

logger = logging.getLogger(__name__)

BULK_COLUMNS = [
    "name",
    "shortDescription",
    "itemCode",
    "regularPrice",
    "salePrice",
    "website",
    "category",
    "brand",
    "applications",
    "mainImage",
    "galleryImages",
    "technicalSpecs",
]


# ============================================================================
# Spreadsheet reading
# ============================================================================

def _read_csv(content: bytes) -> List[Dict[str, str]]:
    frame = pd.read_csv(io.BytesIO(content), dtype=str, keep_default_na=False, skip_blank_lines=True)
    frame.columns = [str(c).strip() for c in frame.columns]
    rows = []
    for record in frame.to_dict(orient="records"):
        rows.append({col: cell_text(record.get(col)) for col in BULK_COLUMNS})
    return rows


def _read_xlsx(content: bytes) -> List[Dict[str, str]]:
    """First worksheet, header row ignored, columns in BULK_COLUMNS order"""
    frame = pd.read_excel(io.BytesIO(content), sheet_name=0, header=None, dtype=object, engine="openpyxl")
    rows = []
    for values in frame.iloc[1:].itertuples(index=False, name=None):
        values = list(values) + [None] * (len(BULK_COLUMNS) - len(values))
        row = {col: cell_text(values[i]) for i, col in enumerate(BULK_COLUMNS)}
        if any(row.values()):
            rows.append(row)
    return rows


def read_rows(content: bytes, filename: str) -> List[Dict[str, str]]:
    """
    Parse an uploaded spreadsheet into row dicts

    Raises:
        SpreadsheetParseException: Unsupported extension or unreadable file
    """
    lower = (filename or "").lower()
    try:
        if lower.endswith(".csv"):
            return _read_csv(content)
        if lower.endswith(".xlsx"):
            return _read_xlsx(content)
    except Exception as e:
        raise SpreadsheetParseException(filename, str(e))
    raise SpreadsheetParseException(filename, "only .csv and .xlsx files are supported")


# ============================================================================
# Row helpers
# ============================================================================

def split_list(value: str) -> List[str]:
    """ "a | b||c" -> ["a", "b", "c"] """
    return [part.strip() for part in (value or "").split("|") if part.strip()]


def parse_specs(value: str) -> List[Dict[str, str]]:
    """ "Wattage: 10W|Color: Warm" -> [{"name": "Wattage", "value": "10W"}, ...] """
    specs = []
    for part in (value or "").split("|"):
        if ":" not in part:
            continue
        name, spec_value = part.split(":", 1)
        name, spec_value = name.strip(), spec_value.strip()
        if name and spec_value:
            specs.append({"name": name, "value": spec_value})
    return specs


def to_number(value) -> float:
    """Number(x) || 0"""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if number != number:  # NaN
        return 0
    return int(number) if number.is_integer() else number


def is_duplicate(existing: List[Product], name: str, websites: List[str]) -> bool:
    """Same name (case-insensitive) already published on one of the websites"""
    needle = name.lower()
    for product in existing:
        if (product.name or "").lower() != needle:
            continue
        if any(w in product.website_list for w in websites):
            return True
    return False


class BulkUploadService:

    def __init__(self, db, storage: CloudinaryStorage):
        self.products = ProductRepository(db)
        self.brands = MasterDataRepository(db, BRANDS, "title")
        self.categories = MasterDataRepository(db, CATEGORIES, "name")
        self.applications = MasterDataRepository(db, APPLICATIONS, "title")
        self.specs = MasterDataRepository(db, SPECS, "name")
        self.storage = storage
        self.audit = AuditService(db)

    def _sync_master(self, repo: MasterDataRepository, value: str, websites: List[str], job: UploadJob) -> None:
        if not value or not websites:
            return
        job.check_cancelled()
        repo.upsert_with_websites(value, websites)

    def import_row(self, row: Dict[str, str], existing: List[Product], job: UploadJob) -> Optional[str]:
        """
        Import one spreadsheet row

        Returns:
            New product id, or None when the row was skipped as a duplicate
        """
        websites = split_list(row.get("website"))
        applications = split_list(row.get("applications"))

        if is_duplicate(existing, row["name"], websites):
            return None

        self._sync_master(self.brands, row.get("brand"), websites, job)
        self._sync_master(self.categories, row.get("category"), websites, job)
        for application in applications:
            self._sync_master(self.applications, application, websites, job)

        specs = parse_specs(row.get("technicalSpecs"))
        for spec in specs:
            self._sync_master(self.specs, spec["name"], websites, job)

        job.check_cancelled()
        main_image = self.storage.upload_remote(row.get("mainImage", ""))

        gallery = []
        for url in split_list(row.get("galleryImages")):
            job.check_cancelled()
            uploaded = self.storage.upload_remote(url)
            if uploaded:
                gallery.append(uploaded)

        job.check_cancelled()
        return self.products.create({
            "name": row["name"],
            "shortDescription": row.get("shortDescription") or "",
            "itemCode": row.get("itemCode") or "",
            "regularPrice": to_number(row.get("regularPrice")),
            "salePrice": to_number(row.get("salePrice")),
            "website": websites,
            "websites": websites,
            "category": row.get("category") or "",
            "brand": row.get("brand") or "",
            "applications": applications,
            "mainImage": main_image,
            "galleryImages": gallery,
            "technicalSpecs": specs,
            "createdAt": SERVER_TIMESTAMP,
            "updatedAt": SERVER_TIMESTAMP,
        })

    def run(self, rows: List[Dict[str, str]], job: UploadJob, actor: Optional[dict] = None) -> UploadJob:
        """
        Background job body: import rows in order until done or cancelled
        """
        job.status = JobStatus.RUNNING
        job.total = len(rows)
        created_ids = []

        try:
            existing = self.products.find_all()
            for row in rows:
                job.check_cancelled()
                if not row.get("name"):
                    continue

                product_id = self.import_row(row, existing, job)
                job.current += 1
                if product_id is None:
                    job.skipped += 1
                else:
                    job.created += 1
                    created_ids.append(product_id)

            job.finish(JobStatus.COMPLETED)
            logger.info(f"Bulk upload {job.id} complete: {job.created} created, {job.skipped} skipped")
        except UploadCancelledException:
            job.finish(JobStatus.CANCELLED, "Upload Cancelled")
            logger.info(f"Bulk upload {job.id} cancelled after {job.created} products")
        except Exception as e:
            job.finish(JobStatus.FAILED, str(e) or "Bulk Upload Failed")
            logger.error(f"Bulk upload {job.id} failed: {e}")

        if created_ids:
            self.audit.log_event(
                AuditAction.CREATE, "product", None, f"{len(created_ids)} items",
                context={
                    "page": "/admin/products/all",
                    "source": "bulk-uploader",
                    "collection": PRODUCTS,
                    "bulk": True,
                },
                metadata={"ids": created_ids},
                actor=actor,
            )
        return job
