"""
Hand-off of new submissions to the external CV analysis workflow.

The workflow engine fetches the CV by object key, scores it against the
position and posts the result back to
/api/hr/applications/{id}/process-result.
"""

import logging
import httpx
from recruitflow.core.config import settings

logger = logging.getLogger(__name__)


async def notify_new_application(application_id: int, cv_file_object_key: str) -> bool:
    """
    POST the new application to ANALYSIS_WEBHOOK_URL.

    Best effort: the submission is already stored, so failures are logged
    and reported as False.
    """
    if not settings.ANALYSIS_WEBHOOK_URL:
        logger.debug("ANALYSIS_WEBHOOK_URL not set, skipping analysis hand-off")
        return False

    payload = {
        "applicationId": application_id,
        "cvFileObjectKey": cv_file_object_key,
    }

    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.post(settings.ANALYSIS_WEBHOOK_URL, json=payload)
            response.raise_for_status()
        logger.info(f"Application {application_id} sent for analysis")
        return True
    except httpx.HTTPError as e:
        logger.error(f"Analysis hand-off failed for application {application_id}: {e}")
        return False
