"""
Project Bulk Upload Service
Three-step wizard that turns a folder of images into projects

Steps:
1. plan()   - read category / title / logo hints from each filename
2. assign() - the admin places files the parser could not place
3. commit() - upload images and create one project per complete draft

Filename conventions (segments separated by " - ", "__" or "|"):
    "Industrial - Acme Plant.jpg"        background, category Industrial
    "Acme Plant - logo.png"              logo for project "Acme Plant"
    "Industrial__Acme Plant__logo.png"   logo, category prefix ignored
    "acme plant_logo.png"                logo (suffix form)

Author: TM3
Date: 2026-02-10
"""
import logging
import re
from pathlib import PurePath
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from app.core.exceptions import UploadCancelledException, ValidationFailedException
from app.domain.catalog import ProjectCategory, Website
from app.domain.content import ProjectDraft
from app.services.job_registry import JobStatus, UploadJob
from app.services.project_service import ProjectService
from app.services.storage_service import UploadedFile

logger = logging.getLogger(__name__)

SEGMENT_DELIMITER = re.compile(r"\s+-\s+|__|\|")
LOGO_SUFFIX = re.compile(r"[_-]logo$", re.IGNORECASE)
IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp", ".gif", ".svg", ".avif"}

BACKGROUND = "background"
LOGO = "logo"


class ParsedFilename(BaseModel):
    filename: str
    kind: str = BACKGROUND
    title: str = ""
    category: Optional[ProjectCategory] = None
    is_image: bool = True


class BulkProjectDraft(BaseModel):
    title: str
    category: Optional[ProjectCategory] = None
    background: Optional[str] = None
    logo: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.title and self.category and self.background)


class ManualItem(BaseModel):
    filename: str
    reason: str
    kind: str = BACKGROUND
    suggested_title: str = ""


class BulkProjectPlan(BaseModel):
    drafts: List[BulkProjectDraft] = Field(default_factory=list)
    manual: List[ManualItem] = Field(default_factory=list)


def title_key(title: str) -> str:
    """Case-insensitive, whitespace-collapsed title for matching"""
    return " ".join((title or "").split()).lower()


def parse_filename(filename: str) -> ParsedFilename:
    """Read kind / category / title hints from one filename"""
    path = PurePath(filename)
    is_image = path.suffix.lower() in IMAGE_EXTENSIONS
    segments = [s.strip() for s in SEGMENT_DELIMITER.split(path.stem) if s.strip()]

    kind = BACKGROUND
    if any(s.lower() == LOGO for s in segments):
        kind = LOGO
        segments = [s for s in segments if s.lower() != LOGO]
    elif segments and LOGO_SUFFIX.search(segments[-1]):
        kind = LOGO
        segments[-1] = LOGO_SUFFIX.sub("", segments[-1]).strip()
        segments = [s for s in segments if s]

    category = None
    if len(segments) >= 2:
        category = ProjectCategory.match(segments[0])
        if category is not None:
            segments = segments[1:]

    return ParsedFilename(
        filename=filename,
        kind=kind,
        title=" ".join(segments),
        category=category,
        is_image=is_image,
    )


def _find_draft(plan: BulkProjectPlan, title: str) -> Optional[BulkProjectDraft]:
    key = title_key(title)
    for draft in plan.drafts:
        if title_key(draft.title) == key:
            return draft
    return None


def plan(filenames: List[str]) -> BulkProjectPlan:
    """
    Step 1: group files into project drafts

    Backgrounds are placed first so logos can attach to them regardless of
    file order. Anything ambiguous goes to the manual bucket.
    """
    result = BulkProjectPlan()
    parsed = [parse_filename(name) for name in filenames]

    for item in parsed:
        if item.kind != BACKGROUND:
            continue
        if not item.is_image:
            result.manual.append(ManualItem(filename=item.filename, reason="Not an image file"))
            continue
        if not item.title:
            result.manual.append(ManualItem(filename=item.filename, reason="No project name in filename"))
            continue
        if _find_draft(result, item.title) is not None:
            result.manual.append(ManualItem(
                filename=item.filename, reason="Duplicate background for this project",
                suggested_title=item.title,
            ))
            continue

        result.drafts.append(BulkProjectDraft(
            title=item.title, category=item.category, background=item.filename,
        ))
        if item.category is None:
            result.manual.append(ManualItem(
                filename=item.filename, reason="Unknown category", suggested_title=item.title,
            ))

    for item in parsed:
        if item.kind != LOGO:
            continue
        if not item.is_image:
            result.manual.append(ManualItem(filename=item.filename, reason="Not an image file", kind=LOGO))
            continue
        draft = _find_draft(result, item.title) if item.title else None
        if draft is None or draft.logo is not None:
            result.manual.append(ManualItem(
                filename=item.filename, reason="No matching project for logo", kind=LOGO,
                suggested_title=item.title,
            ))
            continue
        draft.logo = item.filename

    logger.info(f"Planned {len(result.drafts)} projects, {len(result.manual)} files need manual assignment")
    return result


def assign(
    current: BulkProjectPlan,
    filename: str,
    title: str,
    category: Optional[ProjectCategory] = None,
    kind: str = BACKGROUND,
) -> BulkProjectPlan:
    """
    Step 2: place one manual-bucket file into a draft (created when missing)
    """
    item = next((m for m in current.manual if m.filename == filename), None)
    if item is None:
        raise ValidationFailedException(f"{filename} is not waiting for assignment", field="filename")
    if not (title or "").strip():
        raise ValidationFailedException("Project name is required", field="title")
    if kind not in (BACKGROUND, LOGO):
        raise ValidationFailedException(f"Unknown file kind: {kind}", field="kind")

    updated = current.model_copy(deep=True)

    # An uncategorized background is already a draft under its parsed title
    if kind == BACKGROUND:
        for draft in updated.drafts:
            if draft.background == filename:
                draft.background = None

    draft = _find_draft(updated, title)
    if draft is None:
        draft = BulkProjectDraft(title=" ".join(title.split()))
        updated.drafts.append(draft)

    if kind == BACKGROUND:
        draft.background = filename
    else:
        draft.logo = filename
    if category is not None:
        draft.category = category

    updated.drafts = [d for d in updated.drafts if d.background or d.logo]
    updated.manual = [m for m in updated.manual if m.filename != filename]
    return updated


def commit(
    service: ProjectService,
    current: BulkProjectPlan,
    files: Dict[str, UploadedFile],
    job: UploadJob,
    website: str = Website.DISRUPTIVE.value,
    actor: Optional[dict] = None,
) -> UploadJob:
    """
    Step 3: create the projects, reporting progress through the job

    Incomplete drafts (no category or no background) are skipped.
    """
    job.status = JobStatus.RUNNING
    job.total = len(current.drafts)

    try:
        for draft in current.drafts:
            job.check_cancelled()
            job.current += 1

            background = files.get(draft.background) if draft.background else None
            if not draft.is_complete or background is None:
                job.skipped += 1
                job.messages.append(f"Skipped {draft.title or '(untitled)'}: missing category or background")
                continue

            logo = files.get(draft.logo) if draft.logo else None
            service.save_project(
                ProjectDraft(title=draft.title, category=draft.category, website=website),
                image_file=background,
                logo_file=logo,
                actor=actor,
                source="projects-bulk-upload",
            )
            job.created += 1

        job.finish(JobStatus.COMPLETED)
    except UploadCancelledException:
        logger.info(f"Project bulk upload {job.id} cancelled after {job.created} projects")
        job.finish(JobStatus.CANCELLED, "Upload Cancelled")
    except Exception as e:
        logger.error(f"Project bulk upload {job.id} failed: {e}")
        job.finish(JobStatus.FAILED, str(e))

    return job
