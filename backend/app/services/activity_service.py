"""
Activity Service
Page-view trail of the admin dashboard (cmsactivity_logs)
"""
import logging
from typing import Optional

from app.core.database import ACTIVITY_LOGS, SERVER_TIMESTAMP
from app.repositories.base_repository import FirestoreRepository

logger = logging.getLogger(__name__)


class ActivityService:

    def __init__(self, db):
        self.repo = FirestoreRepository(db, ACTIVITY_LOGS)

    def log_page_view(
        self,
        page: str,
        user_agent: Optional[str] = None,
        user_email: Optional[str] = None
    ) -> Optional[str]:
        """Record a page view; failures are only logged"""
        try:
            return self.repo.create({
                "page": page,
                "timestamp": SERVER_TIMESTAMP,
                "userAgent": user_agent or "",
                "userEmail": user_email or "",
            })
        except Exception as e:
            logger.error(f"Error logging page view for {page}: {e}")
            return None
