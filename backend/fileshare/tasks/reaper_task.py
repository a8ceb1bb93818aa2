"""
Expiry Sweep Task

Celery beat task that physically removes expired grants and share links.
Authorization does not depend on it; it only keeps storage tidy.
"""

import logging
from typing import Any, Dict

from celery import shared_task

from fileshare.application.reaper_service import ExpiryReaper
from fileshare.config.celery_config import PURGE_TASK_NAME

logger = logging.getLogger(__name__)


@shared_task(bind=True, name=PURGE_TASK_NAME)
def purge_expired_shares(self) -> Dict[str, Any]:
    """
    Periodic sweep that deletes expired grants and links.

    Runs on the beat schedule configured by REAPER_INTERVAL_SECONDS and
    resolves the reaper from the container attached to the Celery app.
    """
    try:
        reaper = self.app.container.resolve(ExpiryReaper)
    except Exception as e:
        error_msg = f"Expiry sweep could not start: {e}"
        logger.error(error_msg, exc_info=True)
        return {"grants_purged": 0, "links_purged": 0, "errors": [error_msg]}

    return run_expiry_sweep(reaper)


def run_expiry_sweep(reaper: ExpiryReaper) -> Dict[str, Any]:
    """
    Run one sweep and collect statistics.

    Never raises; failures are reported in the returned stats.

    Returns:
        dict: Sweep statistics with counts and errors
    """
    logger.info("Starting expiry sweep")

    stats: Dict[str, Any] = {
        "grants_purged": 0,
        "links_purged": 0,
        "errors": [],
    }

    try:
        report = reaper.sweep()
        stats["grants_purged"] = report.grants_purged
        stats["links_purged"] = report.links_purged
    except Exception as e:
        error_msg = f"Expiry sweep failed: {e}"
        stats["errors"].append(error_msg)
        logger.error(error_msg, exc_info=True)
        return stats

    logger.info(
        f"Expiry sweep completed - Grants: {stats['grants_purged']}, "
        f"Links: {stats['links_purged']}"
    )
    return stats
