"""Report service: generates key history reports and keeps the report log."""

import logging

from src.core import schema
from src.core.config import settings
from src.core.db_client import InMemoryDatabase
from src.core.errors import RecordNotFoundError
from src.core.logging import span
from src.domain.report import GeneratedReport
from src.models.service_models import KeyHistoryReport, ReportInfo
from src.services.analytics_service import Analytics
from src.services.ledger_service import CheckoutLedger


logger = logging.getLogger(__name__)


class ReportLog:
    """Append-only log of generated reports.

    A report's payload is a snapshot taken at generation time; later changes
    to keys or history do not alter it.
    """

    def __init__(self, db: InMemoryDatabase, *, ledger: CheckoutLedger, analytics: Analytics) -> None:
        self._db = db
        self._ledger = ledger
        self._analytics = analytics

    def add_generated_report(self, *, name: str, data: bytes, generated_at: str | None = None) -> GeneratedReport:
        """Store an already rendered report."""
        with span("report_log.add_generated_report"):
            record = self._db.create_record(
                collection=schema.REPORTS,
                data={"name": name, "generated_at": generated_at or self._db.now(), "data": data},
            )
            logger.info("Stored report %s (%d bytes)", record["id"], len(data))
            return GeneratedReport.model_validate(record)

    def generate_key_history_report(self, *, name: str | None = None, staff_id: str | None = None) -> GeneratedReport:
        """Render the key history (newest first) with dashboard counts and store it.

        Args:
            name: Report name; defaults to the configured prefix plus a timestamp
            staff_id: Limit the history to one staff member

        Returns:
            The stored report
        """
        with span("report_log.generate_key_history_report"):
            generated_at = self._db.now()
            title = name or f"{settings.report_name_prefix} {generated_at}"
            content = KeyHistoryReport(
                title=title,
                generated_at=generated_at,
                staff_id=staff_id,
                summary=self._analytics.get_dashboard_summary(),
                entries=self._ledger.recent(staff_id=staff_id),
            )
            return self.add_generated_report(
                name=title, data=content.model_dump_json().encode("utf-8"), generated_at=generated_at
            )

    def list_reports(self) -> list[ReportInfo]:
        """Report metadata in generation order."""
        return [
            ReportInfo(id=r["id"], name=r["name"], generated_at=r["generated_at"], size_bytes=len(r["data"]))
            for r in self._db.list_records(collection=schema.REPORTS)
        ]

    def get_report(self, report_id: str) -> GeneratedReport:
        """Fetch a report with its payload.

        Raises:
            RecordNotFoundError: If the report does not exist
        """
        record = self._db.get_record(collection=schema.REPORTS, record_id=report_id)
        if record is None:
            raise RecordNotFoundError(schema.REPORTS, report_id)
        return GeneratedReport.model_validate(record)
