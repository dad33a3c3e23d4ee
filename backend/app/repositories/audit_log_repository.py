"""
Audit Log Repository

Reads and appends entries of cms_audit_logs.

Author: TM3
Date: 2026-02-10
"""
from typing import Any, Dict, List

from app.core.config import settings
from app.core.database import AUDIT_LOGS
from app.domain.audit import AuditLog
from app.repositories.base_repository import FirestoreRepository


class AuditLogRepository(FirestoreRepository):

    collection_name = AUDIT_LOGS
    model = AuditLog

    def find_recent(self, limit: int = None) -> List[AuditLog]:
        """Newest entries first, capped at AUDIT_LOG_FETCH_LIMIT"""
        return self.find_all(
            order_by="timestamp",
            descending=True,
            limit=limit or settings.AUDIT_LOG_FETCH_LIMIT
        )

    def append(self, entry: Dict[str, Any]) -> str:
        return self.create(entry)
