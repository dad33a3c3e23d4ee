"""
Projects API Endpoints
Project manager CRUD and the bulk upload wizard

Bulk flow:
1. POST /bulk/plan      - filenames -> drafts + manual bucket
2. POST /bulk/assign    - place one manual file
3. POST /bulk           - files + final plan -> background job
4. GET  /bulk/jobs/{id} - poll progress (POST .../cancel to stop)

Author: TM3
Date: 2026-02-10
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, HTTPException, UploadFile
from pydantic import BaseModel

from app.api.uploads import parse_form_json, to_uploaded_file, to_uploaded_files
from app.core.auth import TokenUser, get_current_user
from app.core.database import get_firestore
from app.core.exceptions import CMSException
from app.domain.catalog import ProjectCategory, Website
from app.domain.content import ProjectDraft
from app.services import project_bulk_service
from app.services.job_registry import job_registry
from app.services.project_bulk_service import BulkProjectPlan
from app.services.project_service import ProjectService
from app.services.storage_service import CloudinaryStorage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter()


class PlanRequest(BaseModel):
    filenames: List[str]


class AssignRequest(BaseModel):
    plan: BulkProjectPlan
    filename: str
    title: str
    category: Optional[ProjectCategory] = None
    kind: str = project_bulk_service.BACKGROUND


@router.get("/")
async def get_projects(
    db=Depends(get_firestore),
    storage: CloudinaryStorage = Depends(get_storage)
):
    try:
        projects = ProjectService(db, storage).list_projects()
        return {
            "status": "success",
            "count": len(projects),
            "categories": [c.value for c in ProjectCategory],
            "data": [project.to_dict() for project in projects]
        }
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error fetching projects: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching projects: {str(e)}")


@router.post("/")
async def create_project(
    draft: str = Form(..., description="ProjectDraft as JSON"),
    image: Optional[UploadFile] = File(None),
    logo: Optional[UploadFile] = File(None),
    db=Depends(get_firestore),
    storage: CloudinaryStorage = Depends(get_storage),
    user: TokenUser = Depends(get_current_user)
):
    try:
        project_id = ProjectService(db, storage).save_project(
            parse_form_json(draft, ProjectDraft),
            image_file=await to_uploaded_file(image),
            logo_file=await to_uploaded_file(logo),
            actor=user.to_actor(),
        )
        return {"status": "success", "data": {"id": project_id}}
    except (HTTPException, CMSException):
        raise
    except Exception as e:
        logger.error(f"Error creating project: {e}")
        raise HTTPException(status_code=500, detail=f"Error creating project: {str(e)}")


@router.put("/{project_id}")
async def update_project(
    project_id: str,
    draft: str = Form(..., description="ProjectDraft as JSON"),
    image: Optional[UploadFile] = File(None),
    logo: Optional[UploadFile] = File(None),
    db=Depends(get_firestore),
    storage: CloudinaryStorage = Depends(get_storage),
    user: TokenUser = Depends(get_current_user)
):
    try:
        ProjectService(db, storage).save_project(
            parse_form_json(draft, ProjectDraft),
            editing_id=project_id,
            image_file=await to_uploaded_file(image),
            logo_file=await to_uploaded_file(logo),
            actor=user.to_actor(),
        )
        return {"status": "success", "data": {"id": project_id}}
    except (HTTPException, CMSException):
        raise
    except Exception as e:
        logger.error(f"Error updating project {project_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating project: {str(e)}")


@router.delete("/{project_id}")
async def delete_project(
    project_id: str,
    db=Depends(get_firestore),
    storage: CloudinaryStorage = Depends(get_storage),
    user: TokenUser = Depends(get_current_user)
):
    try:
        ProjectService(db, storage).delete_project(project_id, actor=user.to_actor())
        return {"status": "success", "data": {"id": project_id}}
    except CMSException:
        raise
    except Exception as e:
        logger.error(f"Error deleting project {project_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error deleting project: {str(e)}")


# ============================================================================
# Bulk upload wizard
# ============================================================================

@router.post("/bulk/plan")
async def plan_bulk_upload(body: PlanRequest):
    """Step 1: group filenames into drafts"""
    result = project_bulk_service.plan(body.filenames)
    return {
        "status": "success",
        "data": result.model_dump(mode="json")
    }


@router.post("/bulk/assign")
async def assign_bulk_file(body: AssignRequest):
    """Step 2: place one manual-bucket file"""
    result = project_bulk_service.assign(body.plan, body.filename, body.title, body.category, body.kind)
    return {
        "status": "success",
        "data": result.model_dump(mode="json")
    }


@router.post("/bulk")
async def start_bulk_upload(
    background_tasks: BackgroundTasks,
    plan: str = Form(..., description="BulkProjectPlan as JSON"),
    files: List[UploadFile] = File(...),
    website: str = Form(Website.DISRUPTIVE.value),
    db=Depends(get_firestore),
    storage: CloudinaryStorage = Depends(get_storage),
    user: TokenUser = Depends(get_current_user)
):
    """
    Step 3: create the planned projects in the background

    Returns the job id to poll.
    """
    try:
        final_plan = parse_form_json(plan, BulkProjectPlan)
        uploaded = {f.filename: f for f in await to_uploaded_files(files)}

        job = job_registry.create("projects", total=len(final_plan.drafts))
        background_tasks.add_task(
            project_bulk_service.commit,
            ProjectService(db, storage),
            final_plan,
            uploaded,
            job,
            website,
            user.to_actor(),
        )

        return {"status": "success", "data": job.to_dict()}
    except (HTTPException, CMSException):
        raise
    except Exception as e:
        logger.error(f"Error starting project bulk upload: {e}")
        raise HTTPException(status_code=500, detail=f"Error starting bulk upload: {str(e)}")


@router.get("/bulk/jobs/{job_id}")
async def get_bulk_job(job_id: str):
    return {"status": "success", "data": job_registry.get(job_id).to_dict()}


@router.post("/bulk/jobs/{job_id}/cancel")
async def cancel_bulk_job(job_id: str):
    return {"status": "success", "data": job_registry.cancel(job_id).to_dict()}
