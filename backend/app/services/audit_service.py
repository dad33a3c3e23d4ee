"""
Audit Service
Writes audit events for every CMS mutation and backs the Audit Logs viewer

Purpose:
- Append create/update/delete/restore events to cms_audit_logs
- Filter / search / count the newest 500 events for the viewer
- Display helpers (relative time, Manila timestamp, actor initials)

Author: TM3
Date: 2026-02-10
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional, Union

from dateutil import tz

from app.core.database import SERVER_TIMESTAMP
from app.domain.audit import AuditAction, AuditActor, AuditContext, AuditLog
from app.repositories.audit_log_repository import AuditLogRepository
from app.services.listing import matches_text

logger = logging.getLogger(__name__)

AUDIT_PAGE_SIZE = 15
DISPLAY_TIMEZONE = tz.gettz("Asia/Manila")
DATE_RANGES = ("all", "today", "week", "month")


def _as_utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditService:
    """
    Service for the audit trail

    Logging is best-effort: a failed write is logged and never breaks the
    operation that triggered it.
    """

    def __init__(self, db):
        self.repo = AuditLogRepository(db)

    def log_event(
        self,
        action: Union[AuditAction, str],
        entity_type: str,
        entity_id: Optional[str],
        entity_name: Optional[str],
        context: Optional[Union[AuditContext, Dict[str, Any]]] = None,
        metadata: Optional[Dict[str, Any]] = None,
        actor: Optional[Union[AuditActor, Dict[str, Any]]] = None,
    ) -> Optional[str]:
        """
        Append one audit event

        Returns:
            New audit log id, or None when the write failed
        """
        if isinstance(context, AuditContext):
            context = context.model_dump()
        if isinstance(actor, AuditActor):
            actor = actor.model_dump()

        entry = {
            "action": AuditAction(action).value,
            "entityType": entity_type,
            "entityId": entity_id,
            "entityName": entity_name,
            "context": context or {},
            "metadata": metadata or {},
            "actor": actor or {},
            "timestamp": SERVER_TIMESTAMP,
        }
        try:
            return self.repo.append(entry)
        except Exception as e:
            logger.warning(f"Failed to write audit event {entry['action']} {entity_type}/{entity_id}: {e}")
            return None

    def list_logs(self) -> List[AuditLog]:
        """Newest first, limited to AUDIT_LOG_FETCH_LIMIT"""
        return self.repo.find_recent()


# ============================================================================
# Viewer helpers (pure)
# ============================================================================

def is_within_date_range(ts: Optional[datetime], date_range: str, now: Optional[datetime] = None) -> bool:
    """
    today = same calendar date in Manila time, week/month = last 7/30 days.
    Entries without timestamp (still pending server time) always pass.
    """
    if date_range == "all" or ts is None:
        return True
    now = _as_utc(now or _utcnow())
    ts = _as_utc(ts)
    if date_range == "today":
        return ts.astimezone(DISPLAY_TIMEZONE).date() == now.astimezone(DISPLAY_TIMEZONE).date()
    if date_range == "week":
        return ts >= now - timedelta(days=7)
    if date_range == "month":
        return ts >= now - timedelta(days=30)
    return True


def _matches_search(log: AuditLog, query: str) -> bool:
    values = [
        log.entityName,
        log.entityId,
        log.actor.name,
        log.actor.email,
        log.actor.role,
        log.context.page,
        log.entityType,
    ]
    return any(matches_text(v, query) for v in values)


def filter_logs(
    logs: Iterable[AuditLog],
    action: str = "all",
    entity_type: str = "all",
    date_range: str = "all",
    search: str = "",
    now: Optional[datetime] = None,
) -> List[AuditLog]:
    """Apply the viewer's filters; "all" disables a filter"""
    result = []
    query = (search or "").strip()
    for log in logs:
        if action != "all" and log.action != action:
            continue
        if entity_type != "all" and log.entityType != entity_type:
            continue
        if not is_within_date_range(log.timestamp, date_range, now):
            continue
        if query and not _matches_search(log, query):
            continue
        result.append(log)
    return result


def stats(logs: Iterable[AuditLog]) -> Dict[str, int]:
    """Total plus count per action"""
    counts = {"total": 0, "creates": 0, "updates": 0, "deletes": 0, "restores": 0}
    for log in logs:
        counts["total"] += 1
        key = f"{log.action}s"
        if key in counts and key != "total":
            counts[key] += 1
    return counts


def entity_types(logs: Iterable[AuditLog]) -> List[str]:
    """Distinct entity types, first-seen order"""
    seen = []
    for log in logs:
        if log.entityType and log.entityType not in seen:
            seen.append(log.entityType)
    return seen


def time_ago(ts: Optional[datetime], now: Optional[datetime] = None) -> str:
    if ts is None:
        return "—"
    diff = (_as_utc(now or _utcnow()) - _as_utc(ts)).total_seconds()
    minutes = int(diff // 60)
    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    return f"{hours // 24}d ago"


def format_timestamp(ts: Optional[datetime]) -> str:
    """e.g. "Mar 5, 2026, 02:15 PM" in Manila time"""
    if ts is None:
        return "—"
    local = _as_utc(ts).astimezone(DISPLAY_TIMEZONE)
    return f"{local.strftime('%b')} {local.day}, {local.year}, {local.strftime('%I:%M %p')}"


def initials(name: Optional[str]) -> str:
    if not name:
        return "?"
    letters = [part[0] for part in name.split(" ") if part]
    return "".join(letters[:2]).upper()


def serialize_log(log: AuditLog, now: Optional[datetime] = None) -> dict:
    """Audit log plus the values the viewer displays"""
    data = log.to_dict()
    data["time_ago"] = time_ago(log.timestamp, now)
    data["formatted_timestamp"] = format_timestamp(log.timestamp)
    data["actor_initials"] = initials(log.actor.name)
    return data
