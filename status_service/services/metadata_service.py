import logging
import requests
from status_service.config import (
    METADATA_HEADERS,
    METADATA_TIMEOUT_SECONDS,
    METADATA_URL,
    NOT_AVAILABLE,
    UNAVAILABLE,
    is_hosted,
)

logger = logging.getLogger("StatusService")


def resolve_service_identity(timeout: float = METADATA_TIMEOUT_SECONDS) -> str:
    """
    Ask the metadata server which service account this revision runs as.

    Outside Cloud Run there is no metadata server, so the lookup is skipped.
    A failed lookup is not fatal: the status document reports UNAVAILABLE
    instead, and the call is not retried.
    """
    if not is_hosted():
        return NOT_AVAILABLE

    try:
        res = requests.get(METADATA_URL, headers=METADATA_HEADERS, timeout=timeout)
        res.raise_for_status()
    except requests.RequestException as e:
        logger.warning(f"Service account lookup failed: {e}")
        return UNAVAILABLE

    identity = res.text.strip()
    logger.info(f"Running as service account {identity}")
    return identity
