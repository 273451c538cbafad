"""Scan log reporting: time-window filter joined with user profiles."""

import asyncio
from typing import Any

import structlog
from google.cloud.firestore import AsyncClient

from app.config import settings
from app.core.exceptions import BadRequestException
from app.core.time_window import (
    ScanTimestampError,
    day_bounds,
    get_timezone,
    in_range,
    normalize,
)
from app.core.upstream import call_upstream
from app.models.scans import SCAN_COLLECTIONS, SCAN_TIMESTAMP_FIELDS, ScanSource
from app.services.profile_service import ProfileService

logger = structlog.get_logger(__name__)


class ReportService:
    """Service for building scan reports over a date range."""

    def __init__(self, db: AsyncClient, concurrency: int | None = None):
        """
        Initialize service.

        Args:
            db: Firestore client
            concurrency: Profile lookups allowed in flight per report
        """
        self.db = db
        self.profiles = ProfileService(db)
        self.concurrency = concurrency or settings.report_concurrency

    @staticmethod
    def parse_source(report_type: str | None) -> ScanSource:
        """
        Validate the report type.

        Raises:
            BadRequestException: If the type is not qrcode or rfid
        """
        try:
            return ScanSource(report_type)
        except ValueError:
            raise BadRequestException("Invalid type") from None

    async def get_scan_report(
        self,
        report_type: str | None,
        start_date: str | None,
        end_date: str | None,
    ) -> list[dict[str, Any]]:
        """
        Build the scan report for an inclusive day range.

        The whole collection is read and filtered in memory; surviving rows
        are enriched with the scanning user's name and photo. Rows keep the
        collection's order. Rows whose timestamp cannot be read are skipped
        with a warning.

        Args:
            report_type: "qrcode" or "rfid"
            start_date: First day, YYYY-MM-DD
            end_date: Last day, YYYY-MM-DD

        Returns:
            Enriched rows

        Raises:
            BadRequestException: If the type or dates are invalid
        """
        source = self.parse_source(report_type)
        tz = get_timezone()
        start, end = day_bounds(start_date, end_date, tz)

        collection = SCAN_COLLECTIONS[source]
        timestamp_field = SCAN_TIMESTAMP_FIELDS[source]

        snapshots = await call_upstream(
            f"{collection}.get",
            self.db.collection(collection).get(),
        )

        matching: list[tuple[str, dict[str, Any]]] = []
        skipped = 0
        for snapshot in snapshots:
            doc = snapshot.to_dict() or {}
            try:
                instant = normalize(source, doc.get(timestamp_field), tz)
            except ScanTimestampError as e:
                skipped += 1
                logger.warning(
                    "scan_row_skipped",
                    collection=collection,
                    doc_id=snapshot.id,
                    error=str(e),
                )
                continue
            if in_range(instant, start, end):
                matching.append((snapshot.id, doc))

        rows = await self._enrich(matching)

        logger.info(
            "scan_report_built",
            source=source.value,
            scanned=len(snapshots),
            matched=len(rows),
            skipped=skipped,
        )
        return rows

    async def _enrich(self, matching: list[tuple[str, dict[str, Any]]]) -> list[dict[str, Any]]:
        """Attach profile fields to each row, at most `concurrency` lookups at a time."""
        semaphore = asyncio.Semaphore(self.concurrency)

        async def enrich_row(doc_id: str, doc: dict[str, Any]) -> dict[str, Any]:
            async with semaphore:
                profile = await self.profiles.get_profile_summary(doc.get("userId"))
            return {"id": doc_id, **doc, **profile.model_dump()}

        # gather keeps input order
        return list(await asyncio.gather(*(enrich_row(doc_id, doc) for doc_id, doc in matching)))
