"""Service-key authentication helper for Airflow DAGs.

Scheduled jobs call backend endpoints guarded by the ``X-Service-Key``
header instead of a user token.
"""

import logging
import os

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

load_dotenv("/opt/airflow/backend/.env")

BACKEND_URL = os.getenv("BACKEND_URL", "http://host.docker.internal:8000")


def get_service_headers() -> dict[str, str]:
    """Headers that authenticate the scheduler against the backend."""
    service_key = os.getenv("SERVICE_API_KEY", "")
    if not service_key:
        raise ValueError(
            "SERVICE_API_KEY not set. Please configure it in /opt/airflow/backend/.env"
        )
    return {"X-Service-Key": service_key}
