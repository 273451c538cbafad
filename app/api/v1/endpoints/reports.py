"""Scan report endpoints."""

from fastapi import APIRouter, Query, status

from app.dependencies import ReportServiceDep
from app.schemas.reports import ScanReportResponse

router = APIRouter()


@router.get(
    "/data",
    response_model=ScanReportResponse,
    status_code=status.HTTP_200_OK,
    summary="Scan log report for a date range",
)
async def get_scan_report(
    service: ReportServiceDep,
    type: str | None = Query(None, description="Scan log: qrcode or rfid"),
    startDate: str | None = Query(None, description="First day, YYYY-MM-DD"),
    endDate: str | None = Query(None, description="Last day, YYYY-MM-DD"),
) -> ScanReportResponse:
    """
    Return scans between startDate and endDate (inclusive) with the
    scanning user's name and photo attached.

    Raises:
        BadRequestException: If the type or dates are invalid
    """
    rows = await service.get_scan_report(type, startDate, endDate)
    return ScanReportResponse(data=rows)
