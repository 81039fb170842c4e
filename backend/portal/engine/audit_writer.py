"""Audit Writer - Append-only admin action records"""
from typing import Any, Dict, List, Optional

from ..domain.models import AdminLog
from ..domain.enums import AdminAuditAction
from ..repositories.data_store import DataStore
from ..repositories.admin_log_repo import AdminLogRepository
from ..utils.idgen import generate_admin_log_id
from ..utils.time import utc_now
from ..utils.logger import get_logger, get_correlation_id

logger = get_logger(__name__)


class AuditWriter:
    """
    Write admin log entries (append-only)

    Every admin decision produces an entry. Writing is best-effort: the
    decision it describes has already been committed, so a failed write is
    logged and reported as None.
    """

    def __init__(self, store: Optional[DataStore] = None):
        self.repo = AdminLogRepository(store)

    def write_event(
        self,
        admin_id: str,
        action: AdminAuditAction,
        target_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> Optional[AdminLog]:
        """Write a single admin log entry"""
        try:
            entry = AdminLog(
                log_id=generate_admin_log_id(),
                admin_id=admin_id,
                action=action,
                target_id=target_id,
                details=details or {},
                timestamp=utc_now(),
                correlation_id=get_correlation_id()
            )
            return self.repo.create_entry(entry)
        except Exception as e:
            logger.error(
                f"Failed to write admin log {action.value} for {target_id}: {e}",
                extra={"actor_id": admin_id, "action": action.value}
            )
            return None

    def write_approve(
        self,
        admin_id: str,
        application_id: str,
        document_number: Optional[str],
        warnings: List[str]
    ) -> Optional[AdminLog]:
        return self.write_event(
            admin_id,
            AdminAuditAction.APPROVE_APPLICATION,
            target_id=application_id,
            details={"document_number": document_number, "warnings": warnings}
        )

    def write_reject(
        self,
        admin_id: str,
        application_id: str,
        reason: str
    ) -> Optional[AdminLog]:
        return self.write_event(
            admin_id,
            AdminAuditAction.REJECT_APPLICATION,
            target_id=application_id,
            details={"reason": reason}
        )

    def write_upload_decision(
        self,
        admin_id: str,
        upload_id: str,
        application_id: str,
        verified: bool,
        reason: Optional[str] = None
    ) -> Optional[AdminLog]:
        action = AdminAuditAction.VERIFY_UPLOAD if verified else AdminAuditAction.REJECT_UPLOAD
        details: Dict[str, Any] = {"application_id": application_id}
        if reason:
            details["reason"] = reason
        return self.write_event(admin_id, action, target_id=upload_id, details=details)

    def write_printed(
        self,
        admin_id: str,
        queue_ids: List[str],
        bulk: bool = False
    ) -> Optional[AdminLog]:
        if bulk:
            return self.write_event(
                admin_id,
                AdminAuditAction.MARK_PRINTED_BULK,
                details={"queue_ids": queue_ids, "count": len(queue_ids)}
            )
        return self.write_event(
            admin_id,
            AdminAuditAction.MARK_PRINTED,
            target_id=queue_ids[0] if queue_ids else None
        )
