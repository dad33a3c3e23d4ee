"""
Project Service
Portfolio projects (background image + optional client logo) per website
"""
import logging
from typing import List, Optional

from app.core.database import PROJECTS, SERVER_TIMESTAMP
from app.core.exceptions import ValidationFailedException
from app.domain.audit import AuditAction
from app.domain.content import Project, ProjectDraft
from app.repositories.base_repository import FirestoreRepository
from app.services.audit_service import AuditService
from app.services.storage_service import CloudinaryStorage, UploadedFile

logger = logging.getLogger(__name__)

PROJECT_CONTEXT = {"page": "/content/projects", "source": "project-manager", "collection": PROJECTS}


class ProjectService:

    def __init__(self, db, storage: CloudinaryStorage):
        self.repo = FirestoreRepository(db, PROJECTS, Project)
        self.storage = storage
        self.audit = AuditService(db)

    def list_projects(self) -> List[Project]:
        return self.repo.find_all(order_by="createdAt", descending=True)

    def save_project(
        self,
        draft: ProjectDraft,
        editing_id: Optional[str] = None,
        image_file: Optional[UploadedFile] = None,
        logo_file: Optional[UploadedFile] = None,
        actor: Optional[dict] = None,
        source: str = "project-manager",
    ) -> str:
        """
        Create or update a project

        Raises:
            ValidationFailedException: Missing name or background image
        """
        if not draft.title.strip():
            raise ValidationFailedException("Project name is required", field="title")
        if not (image_file or draft.imageUrl):
            raise ValidationFailedException("Background image is required", field="imageUrl")

        image_url = self.storage.upload(image_file, folder="projects") if image_file else draft.imageUrl
        logo_url = self.storage.upload(logo_file, folder="projects") if logo_file else (draft.logoUrl or "")

        payload = {
            "title": draft.title.strip(),
            "description": draft.description,
            "category": draft.category.value,
            "website": draft.website,
            "imageUrl": image_url,
            "logoUrl": logo_url,
            "updatedAt": SERVER_TIMESTAMP,
        }
        context = dict(PROJECT_CONTEXT, source=source)

        if editing_id:
            self.repo.update(editing_id, payload)
            self.audit.log_event(AuditAction.UPDATE, "project", editing_id, draft.title, context=context, actor=actor)
            return editing_id

        payload["createdAt"] = SERVER_TIMESTAMP
        project_id = self.repo.create(payload)
        self.audit.log_event(AuditAction.CREATE, "project", project_id, draft.title, context=context, actor=actor)
        return project_id

    def delete_project(self, project_id: str, actor: Optional[dict] = None) -> None:
        project = self.repo.get(project_id)
        self.repo.delete(project_id)
        self.audit.log_event(AuditAction.DELETE, "project", project_id, project.title, context=PROJECT_CONTEXT, actor=actor)
