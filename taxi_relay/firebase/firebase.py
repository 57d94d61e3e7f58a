import json
import logging
import os
from typing import Optional

from firebase_admin import credentials

from ..config import Settings

logger = logging.getLogger(__name__)


def load_service_account(settings: Settings) -> credentials.Certificate:
    """
    Load the Firebase service account used for FCM token exchange.

    FIREBASE_SECRET (the service account JSON, possibly JSON-encoded twice)
    takes precedence over FIREBASE_CREDENTIALS_FILE.

    Raises:
        ValueError: If neither source is configured or the JSON is invalid
    """
    cert_json = settings.firebase_secret
    if cert_json:
        cert_dict = json.loads(cert_json)
        if isinstance(cert_dict, str):
            cert_dict = json.loads(cert_dict)
        cred = credentials.Certificate(cert_dict)
        logger.info(f"Loaded service account {cred.service_account_email} from FIREBASE_SECRET")
        return cred

    path = settings.firebase_credentials_file
    if not os.path.exists(path):
        raise ValueError(
            f"No Firebase service account configured: set FIREBASE_SECRET or place the key at {path}"
        )
    cred = credentials.Certificate(path)
    logger.info(f"Loaded service account {cred.service_account_email} from {path}")
    return cred


def resolve_project_id(settings: Settings, cred: credentials.Certificate) -> str:
    project_id: Optional[str] = settings.fcm_project_id or cred.project_id
    if not project_id:
        raise ValueError("Service account has no project_id; set FCM_PROJECT_ID")
    return project_id
