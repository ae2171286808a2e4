"""
Firebase Admin SDK initialization.
"""

from typing import Optional

import firebase_admin
from firebase_admin import credentials

from studio_booking.core.logging import get_logger

logger = get_logger(__name__)


def init_firebase(project_id: str, credentials_file: Optional[str] = None) -> firebase_admin.App:
    """Return the default Firebase app, initializing it on first use."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    if credentials_file:
        cred = credentials.Certificate(credentials_file)
        source = "service_account"
    else:
        cred = credentials.ApplicationDefault()
        source = "application_default"

    app = firebase_admin.initialize_app(cred, {"projectId": project_id})
    logger.info("firebase_initialized", project_id=project_id, credentials=source)
    return app
