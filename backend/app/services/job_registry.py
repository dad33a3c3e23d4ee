"""
Upload Job Registry
In-memory progress tracking for background bulk uploads

Jobs are created by the API, run through FastAPI BackgroundTasks and polled
by the dashboard. Cancelling sets a flag that the running loop checks before
each row / project and before image uploads.

Author: TM3
Date: 2026-02-10
"""
import logging
import threading
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from app.core.exceptions import DocumentNotFoundException, UploadCancelledException

logger = logging.getLogger(__name__)

# finished jobs are kept this long for polling, then dropped
JOB_TTL = timedelta(hours=1)


class JobStatus:
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass
class UploadJob:
    """Progress of one bulk upload"""
    id: str
    kind: str
    status: str = JobStatus.PENDING
    current: int = 0
    total: int = 0
    created: int = 0
    skipped: int = 0
    error: Optional[str] = None
    messages: List[str] = field(default_factory=list)
    cancel_requested: bool = False
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None

    def check_cancelled(self) -> None:
        """Raise UploadCancelledException once cancel was requested"""
        if self.cancel_requested:
            raise UploadCancelledException(self.id)

    def finish(self, status: str, error: Optional[str] = None) -> None:
        self.status = status
        self.error = error
        self.finished_at = datetime.now(timezone.utc)

    def to_dict(self) -> dict:
        data = asdict(self)
        data.pop("cancel_requested")
        return data


class JobRegistry:
    """Thread-safe registry of upload jobs (process local)"""

    def __init__(self, ttl: timedelta = JOB_TTL):
        self.ttl = ttl
        self._jobs: Dict[str, UploadJob] = {}
        self._lock = threading.Lock()

    def _prune(self) -> None:
        cutoff = datetime.now(timezone.utc) - self.ttl
        expired = [
            job_id for job_id, job in self._jobs.items()
            if job.finished_at is not None and job.finished_at < cutoff
        ]
        for job_id in expired:
            del self._jobs[job_id]
        if expired:
            logger.info(f"Dropped {len(expired)} finished jobs")

    def create(self, kind: str, total: int = 0) -> UploadJob:
        job = UploadJob(id=uuid.uuid4().hex, kind=kind, total=total)
        with self._lock:
            self._prune()
            self._jobs[job.id] = job
        logger.info(f"Created {kind} job {job.id} ({total} items)")
        return job

    def get(self, job_id: str) -> UploadJob:
        with self._lock:
            job = self._jobs.get(job_id)
        if job is None:
            raise DocumentNotFoundException("upload_jobs", job_id)
        return job

    def cancel(self, job_id: str) -> UploadJob:
        job = self.get(job_id)
        if job.status in (JobStatus.PENDING, JobStatus.RUNNING):
            job.cancel_requested = True
            logger.info(f"Cancel requested for job {job_id}")
        return job


job_registry = JobRegistry()
