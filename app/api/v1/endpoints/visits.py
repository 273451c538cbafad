"""Visit workflow endpoints."""

from fastapi import APIRouter, status
from fastapi.responses import PlainTextResponse

from app.dependencies import VisitServiceDep
from app.schemas.visits import VisitApproveRequest, VisitSubmitRequest

router = APIRouter()


@router.post(
    "/submit-visit",
    response_class=PlainTextResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a visit request",
)
async def submit_visit(data: VisitSubmitRequest, service: VisitServiceDep) -> PlainTextResponse:
    """
    Store a visit request and notify the homeowner.

    The new visit request id is returned in the X-Visit-Request-Id header.
    """
    visit_request_id = await service.submit_visit(data)
    return PlainTextResponse(
        "Visit submitted, notification sent, and visit request stored.",
        status_code=status.HTTP_201_CREATED,
        headers={"X-Visit-Request-Id": visit_request_id},
    )


@router.post(
    "/approve-visit",
    response_class=PlainTextResponse,
    status_code=status.HTTP_200_OK,
    summary="Approve a visit request",
)
async def approve_visit(data: VisitApproveRequest, service: VisitServiceDep) -> PlainTextResponse:
    """Approve a visit request, issue the visitor's token and notify the visitor."""
    result = await service.approve_visit(data)
    if result.already_approved:
        return PlainTextResponse("Visit already approved.")
    return PlainTextResponse("Visit approved, QR code generated, and notification sent.")
