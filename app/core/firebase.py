"""Firebase Admin SDK initialization and utilities."""

import json
import os

import firebase_admin
from firebase_admin import credentials, firestore_async
from google.cloud.firestore import AsyncClient
from structlog import get_logger

logger = get_logger(__name__)

_firebase_app: firebase_admin.App | None = None
_firestore_client: AsyncClient | None = None


def initialize_firebase(
    firebase_credentials_path: str | None = None,
    firebase_config_json: str | None = None,
    project_id: str | None = None,
) -> None:
    """
    Initialize Firebase Admin SDK.

    Args:
        firebase_credentials_path: Optional path to service account JSON file.
        firebase_config_json: Optional raw JSON string of service account.
        project_id: Optional project scope for Auth and Firestore.

    Looks for Firebase credentials in order:
    1. firebase_config_json parameter
    2. firebase_credentials_path parameter
    3. Default application credentials
    """
    global _firebase_app

    if _firebase_app is not None:
        logger.info("firebase_already_initialized")
        return

    options = {"projectId": project_id} if project_id else None

    try:
        cred = None

        # 1. Try raw JSON string (hosted deployments)
        if firebase_config_json:
            logger.info("firebase_credentials_from_json")
            cred = credentials.Certificate(json.loads(firebase_config_json))

        # 2. Fallback to file path (local dev)
        elif firebase_credentials_path and os.path.exists(firebase_credentials_path):
            logger.info("firebase_credentials_from_file", path=firebase_credentials_path)
            cred = credentials.Certificate(firebase_credentials_path)

        if cred:
            _firebase_app = firebase_admin.initialize_app(cred, options)
        else:
            # Last resort: Try default credentials
            _firebase_app = firebase_admin.initialize_app(options=options)
            logger.info("firebase_default_credentials")

    except Exception as e:
        logger.error("firebase_initialization_error", error=str(e))
        raise


def get_firebase_app() -> firebase_admin.App:
    """
    Get the Firebase app instance.

    Raises:
        RuntimeError: If Firebase is not initialized
    """
    if _firebase_app is None:
        raise RuntimeError("Firebase not initialized. Call initialize_firebase() first.")
    return _firebase_app


def get_firestore_client() -> AsyncClient:
    """Get the shared async Firestore client, creating it on first use."""
    global _firestore_client

    if _firestore_client is None:
        _firestore_client = firestore_async.client(get_firebase_app())
    return _firestore_client
