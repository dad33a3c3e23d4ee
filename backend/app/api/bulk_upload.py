"""
Bulk Upload API Endpoints
Product import from CSV / Excel and the LIT spec-sheet parser

Author: TM3
Date: 2026-02-10
"""
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, File, HTTPException, UploadFile

from app.core.auth import TokenUser, get_current_user
from app.core.database import get_firestore
from app.core.exceptions import CMSException
from app.services import spec_sheet_parser
from app.services.bulk_upload_service import BULK_COLUMNS, BulkUploadService, read_rows
from app.services.job_registry import job_registry
from app.services.storage_service import CloudinaryStorage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/template")
async def get_template_columns():
    """Columns the bulk uploader understands"""
    return {"status": "success", "data": {"columns": BULK_COLUMNS}}


@router.post("/")
async def start_bulk_upload(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(...),
    db=Depends(get_firestore),
    storage: CloudinaryStorage = Depends(get_storage),
    user: TokenUser = Depends(get_current_user)
):
    """
    Import products from a .csv or .xlsx file

    Rows are read now; the import runs in the background. Poll
    /jobs/{job_id} for progress.
    """
    try:
        contents = await file.read()
        rows = read_rows(contents, file.filename or "")
        if not rows:
            raise HTTPException(status_code=400, detail="File has no product rows")

        job = job_registry.create("products", total=len(rows))
        background_tasks.add_task(BulkUploadService(db, storage).run, rows, job, user.to_actor())

        logger.info(f"Bulk upload {job.id} queued from {file.filename} ({len(rows)} rows)")
        return {"status": "success", "data": job.to_dict()}

    except (HTTPException, CMSException):
        raise
    except Exception as e:
        logger.error(f"Error starting bulk upload: {e}")
        raise HTTPException(status_code=500, detail=f"Error starting bulk upload: {str(e)}")


@router.get("/jobs/{job_id}")
async def get_job(job_id: str):
    return {"status": "success", "data": job_registry.get(job_id).to_dict()}


@router.post("/jobs/{job_id}/cancel")
async def cancel_job(job_id: str):
    """Stop the import before the next row"""
    return {"status": "success", "data": job_registry.cancel(job_id).to_dict()}


@router.post("/spec-sheet")
async def parse_spec_sheet(
    file: UploadFile = File(...),
    db=Depends(get_firestore)
):
    """
    Parse a LIT spec workbook (one product per row, one family per sheet)

    Products whose item code already exists are flagged, not dropped.
    """
    try:
        contents = await file.read()
        result = spec_sheet_parser.parse_spec_workbook(contents)
        existing = spec_sheet_parser.existing_item_codes(db)
        for product in result["products"]:
            product["exists"] = product.get("itemCode") in existing

        return {"status": "success", "data": result}

    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error parsing spec sheet: {e}")
        raise HTTPException(status_code=500, detail=f"Error parsing spec sheet: {str(e)}")
