"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends
from google.cloud.firestore import AsyncClient

from app.config import settings
from app.core.firebase import get_firestore_client
from app.core.token_codec import TokenCodec
from app.services.account_service import AccountService
from app.services.report_service import ReportService
from app.services.visit_service import VisitService


def get_token_codec() -> TokenCodec:
    """Token codec bound to the configured secret."""
    secret = settings.secret_key.get_secret_value() if settings.secret_key else None
    return TokenCodec(secret)


# Type aliases for dependency injection
FirestoreClient = Annotated[AsyncClient, Depends(get_firestore_client)]
TokenCodecDep = Annotated[TokenCodec, Depends(get_token_codec)]


def get_visit_service(db: FirestoreClient, token_codec: TokenCodecDep) -> VisitService:
    """Visit workflow service."""
    return VisitService(db, token_codec)


def get_report_service(db: FirestoreClient) -> ReportService:
    """Scan report service."""
    return ReportService(db)


def get_account_service(db: FirestoreClient) -> AccountService:
    """Account provisioning service."""
    return AccountService(db)


VisitServiceDep = Annotated[VisitService, Depends(get_visit_service)]
ReportServiceDep = Annotated[ReportService, Depends(get_report_service)]
AccountServiceDep = Annotated[AccountService, Depends(get_account_service)]
