"""
Print Queue Projector - Approved documents awaiting physical printing

Items are created by approval and only ever move pending_print -> printed.
Time in queue, priority and printability are derived on every read and
never stored.
"""
from datetime import datetime, timedelta
from typing import Callable, List, Optional
from pymongo import ASCENDING, DESCENDING

from ..domain.models import (
    Application, Document, PrintQueueItem, PrintQueueView, PrintQueueFilters,
    PrintQueueStats, BulkPrintResult, ChangeEvent
)
from ..domain.enums import PrintStatus, PriorityLevel, NotificationSeverity
from ..domain.errors import (
    DomainError, AlreadyPrintedError, PrintQueueItemNotFoundError, ValidationError
)
from ..repositories.data_store import DataStore, get_data_store
from ..repositories.print_queue_repo import PrintQueueRepository
from ..services.notification_service import NotificationService
from .audit_writer import AuditWriter
from ..utils.idgen import generate_queue_id
from ..utils.time import utc_now, ensure_utc, hours_since
from ..utils.logger import get_logger

logger = get_logger(__name__)

SORT_FIELDS = {"approval_date", "holder_full_name", "service_type", "office_location", "print_status"}


def compute_time_in_queue(approval_date: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Human-readable time since approval, floored to whole units"""
    if approval_date is None:
        return "Unknown"

    hours = int(hours_since(approval_date, now))
    days = hours // 24
    if days > 0:
        return f"{days} day{'s' if days > 1 else ''}"
    if hours > 0:
        return f"{hours} hour{'s' if hours > 1 else ''}"
    return "Less than 1 hour"


def compute_priority(approval_date: Optional[datetime], now: Optional[datetime] = None) -> PriorityLevel:
    """urgent after 48h in queue, high after 24h, else normal"""
    if approval_date is None:
        return PriorityLevel.NORMAL

    elapsed = hours_since(approval_date, now)
    if elapsed > 48:
        return PriorityLevel.URGENT
    if elapsed > 24:
        return PriorityLevel.HIGH
    return PriorityLevel.NORMAL


class PrintQueueProjector:
    """Print desk operations over the print_queue table"""

    def __init__(self, store: Optional[DataStore] = None):
        self.store = store or get_data_store()
        self.repo = PrintQueueRepository(self.store)
        self.notifications = NotificationService(self.store)
        self.audit_writer = AuditWriter(self.store)

    # =========================================================================
    # Enqueue (called by approval)
    # =========================================================================

    def enqueue(
        self,
        application: Application,
        document: Document,
        holder_full_name: str,
        service_type: str,
        approval_date: Optional[datetime] = None
    ) -> PrintQueueItem:
        """Snapshot an approved application into the queue (one item per application)"""
        existing = self.repo.get_by_application(application.application_id)
        if existing:
            return existing

        item = PrintQueueItem(
            queue_id=generate_queue_id(),
            application_id=application.application_id,
            holder_id=application.holder_id,
            holder_full_name=holder_full_name,
            service_type=service_type,
            approval_date=approval_date or utc_now(),
            office_location=application.office_location,
            document_id=document.document_id,
            document_number=document.document_number
        )
        return self.repo.create_item(item)

    # =========================================================================
    # Reads
    # =========================================================================

    def to_view(self, item: PrintQueueItem, now: Optional[datetime] = None) -> PrintQueueView:
        """Attach the derived fields to a stored item"""
        return PrintQueueView(
            **item.model_dump(),
            time_in_queue=compute_time_in_queue(item.approval_date, now),
            priority_level=compute_priority(item.approval_date, now),
            can_print=item.print_status == PrintStatus.PENDING_PRINT
        )

    def get_item(self, queue_id: str, now: Optional[datetime] = None) -> PrintQueueView:
        item = self.repo.get_item(queue_id)
        if not item:
            raise PrintQueueItemNotFoundError(
                f"Print queue item {queue_id} not found",
                details={"queue_id": queue_id}
            )
        return self.to_view(item, now)

    def list_queue(
        self,
        filters: Optional[PrintQueueFilters] = None,
        sort_field: str = "approval_date",
        sort_order: str = "asc",
        now: Optional[datetime] = None
    ) -> List[PrintQueueView]:
        """Filtered, sorted queue with derived fields recomputed for ``now``"""
        if sort_field not in SORT_FIELDS:
            raise ValidationError(
                f"Cannot sort print queue by {sort_field}",
                details={"allowed": sorted(SORT_FIELDS)}
            )
        filters = filters or PrintQueueFilters()

        query = {}
        if filters.status:
            query["print_status"] = PrintStatus(filters.status).value
        if filters.service_type:
            query["service_type"] = filters.service_type
        if filters.office_location:
            query["office_location"] = filters.office_location

        direction = ASCENDING if sort_order == "asc" else DESCENDING
        items = self.repo.list_items(query, order=[(sort_field, direction)])

        if filters.date_from:
            date_from = ensure_utc(filters.date_from)
            items = [i for i in items if ensure_utc(i.approval_date) >= date_from]
        if filters.date_to:
            date_to = ensure_utc(filters.date_to)
            items = [i for i in items if ensure_utc(i.approval_date) <= date_to]
        if filters.search_term:
            term = filters.search_term.strip().lower()
            items = [
                i for i in items
                if term in i.holder_full_name.lower() or term in i.application_id.lower()
            ]

        return [self.to_view(item, now) for item in items]

    def get_stats(self, now: Optional[datetime] = None) -> PrintQueueStats:
        """Pending and printed counts, overall and per service / office"""
        now = ensure_utc(now or utc_now())
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        week_ago = now - timedelta(days=7)

        stats = PrintQueueStats()
        processing_minutes: List[float] = []

        for item in self.repo.list_items():
            by_service = stats.by_service_type.setdefault(
                item.service_type, {"pending": 0, "printed_today": 0}
            )
            by_office = stats.by_office.setdefault(
                item.office_location, {"pending": 0, "printed_today": 0}
            )

            if item.print_status == PrintStatus.PENDING_PRINT:
                stats.total_pending += 1
                by_service["pending"] += 1
                by_office["pending"] += 1
                if compute_priority(item.approval_date, now) == PriorityLevel.URGENT:
                    stats.urgent_pending += 1
                continue

            if item.printed_at is None:
                continue
            printed_at = ensure_utc(item.printed_at)
            if printed_at >= start_of_day:
                stats.total_printed_today += 1
                by_service["printed_today"] += 1
                by_office["printed_today"] += 1
            if printed_at >= week_ago:
                stats.total_printed_this_week += 1
            processing_minutes.append(
                (printed_at - ensure_utc(item.approval_date)).total_seconds() / 60
            )

        if processing_minutes:
            stats.average_processing_minutes = round(
                sum(processing_minutes) / len(processing_minutes), 1
            )
        return stats

    # =========================================================================
    # Transitions
    # =========================================================================

    def mark_printed(self, queue_id: str, operator_id: str) -> PrintQueueItem:
        """
        Mark one item printed and notify the holder.

        Raises AlreadyPrintedError without touching the stored item when it
        was printed before, including by a concurrent operator.
        """
        item = self._mark_printed(queue_id, operator_id)
        self.audit_writer.write_printed(operator_id, [queue_id])
        return item

    def mark_printed_bulk(self, queue_ids: List[str], operator_id: str) -> BulkPrintResult:
        """Attempt every id independently and report per-item outcomes"""
        result = BulkPrintResult()
        for queue_id in dict.fromkeys(queue_ids):
            try:
                self._mark_printed(queue_id, operator_id)
                result.printed_ids.append(queue_id)
            except DomainError as e:
                result.failed[queue_id] = e.error_code
            except Exception as e:
                logger.error(
                    f"Bulk print failed for {queue_id}: {e}",
                    extra={"queue_id": queue_id, "actor_id": operator_id}
                )
                result.failed[queue_id] = "STORE_ERROR"

        logger.info(
            f"Bulk print: {result.printed_count} printed, {result.failed_count} failed",
            extra={"actor_id": operator_id}
        )
        if result.printed_ids:
            self.audit_writer.write_printed(operator_id, result.printed_ids, bulk=True)
        return result

    def on_change(self, callback: Callable[[ChangeEvent], None]) -> Callable[[], None]:
        """Subscribe to print queue changes; returns an unsubscribe function"""
        return self.store.on_change(PrintQueueRepository.TABLE, callback)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _mark_printed(self, queue_id: str, operator_id: str) -> PrintQueueItem:
        item = self.repo.get_item(queue_id)
        if not item:
            raise PrintQueueItemNotFoundError(
                f"Print queue item {queue_id} not found",
                details={"queue_id": queue_id}
            )

        if not self.repo.mark_printed_if_pending(queue_id, operator_id, utc_now()):
            current = self.repo.get_item(queue_id) or item
            raise AlreadyPrintedError(
                f"Print queue item {queue_id} was already printed",
                details={
                    "queue_id": queue_id,
                    "printed_by": current.printed_by,
                    "printed_at": current.printed_at.isoformat() if current.printed_at else None
                }
            )

        logger.info(
            f"Marked printed: {queue_id}",
            extra={"queue_id": queue_id, "application_id": item.application_id, "actor_id": operator_id}
        )
        self.notifications.send(
            item.holder_id,
            "Document Ready for Collection",
            f"Your {item.service_type} document is ready for collection at "
            f"{item.office_location}. Please bring your national ID for verification.",
            NotificationSeverity.INFO,
            application_id=item.application_id
        )
        return self.repo.get_item(queue_id)
