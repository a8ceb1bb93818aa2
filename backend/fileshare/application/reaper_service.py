"""
Expiry Reaper

Application service that physically removes expired grants and share
links. Authorization never depends on it: the ledger filters expired rows
at read time whether or not a sweep has run.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fileshare.domain.events import ExpiredSharesPurgedEvent
from fileshare.domain.sharing import GrantLedger

from .event_publisher import EventPublisher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReapReport:
    """Counts from one sweep."""
    sweep_id: str
    grants_purged: int
    links_purged: int

    @property
    def total(self) -> int:
        return self.grants_purged + self.links_purged

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sweep_id": self.sweep_id,
            "grants_purged": self.grants_purged,
            "links_purged": self.links_purged,
        }


class ExpiryReaper:
    """Periodic storage-hygiene sweep over the grant ledger."""

    def __init__(self, ledger: GrantLedger, event_publisher: Optional[EventPublisher] = None):
        self.ledger = ledger
        self.event_publisher = event_publisher

    def sweep(self) -> ReapReport:
        """
        Delete every expired grant and link row.

        Returns:
            ReapReport with purge counts

        Raises:
            StorageFailureError: If the ledger storage fails mid-sweep
        """
        sweep_id = uuid.uuid4().hex
        grants_purged, links_purged = self.ledger.purge_expired()
        report = ReapReport(sweep_id, grants_purged, links_purged)

        logger.info(
            f"Expiry sweep {sweep_id} purged {grants_purged} grants and {links_purged} links"
        )

        if self.event_publisher is not None:
            self.event_publisher.publish(ExpiredSharesPurgedEvent(
                aggregate_id=sweep_id,
                occurred_at=self.ledger.now(),
                grants_purged=grants_purged,
                links_purged=links_purged,
            ))
        return report
