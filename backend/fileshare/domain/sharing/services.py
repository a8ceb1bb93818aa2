"""
Sharing Services

GrantLedger is the domain service behind user grants and share links.
It layers the read-time expiry filter and the one-grant-per-pair invariant
on top of a ShareRepository.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from ..clock import Clock, utc_now
from ..errors import StorageFailureError
from .entities import Grant, ShareLink
from .repositories import ShareRepository
from .value_objects import ShareToken

logger = logging.getLogger(__name__)

# Attempts before giving up on allocating an unused token
MAX_TOKEN_ATTEMPTS = 5


class GrantLedger:
    """
    Domain service for user grants and share links.

    Every read filters out expired rows at the moment of the call. Physical
    purge (purge_expired) is storage hygiene and is never required for
    correct authorization answers.

    Callers must verify ownership before invoking mutating operations;
    the ledger records whatever it is told.
    """

    def __init__(self, share_repository: ShareRepository, clock: Optional[Clock] = None):
        """
        Initialize GrantLedger with repository.

        Args:
            share_repository: Repository for grant and link rows
            clock: Callable returning the current UTC time
        """
        self.share_repo = share_repository
        self._clock = clock or utc_now

    def now(self) -> datetime:
        return self._clock()

    # ------------------------------------------------------------------
    # Grants
    # ------------------------------------------------------------------

    def upsert_grant(
        self,
        object_id: str,
        grantee_id: str,
        owner_id: str,
        expires_at: Optional[datetime] = None,
    ) -> Grant:
        """
        Create or replace the grant for (object_id, grantee_id).

        The read-modify-write runs under the repository's pair lock, so
        concurrent re-grants of one pair resolve last-writer-wins while
        grants for other grantees proceed independently.

        Args:
            object_id: Object being shared
            grantee_id: Identity receiving access
            owner_id: Owner issuing the grant
            expires_at: Optional absolute expiry

        Returns:
            The grant now in effect
        """
        with self.share_repo.grant_lock(object_id, grantee_id):
            existing = self.share_repo.get_grant(object_id, grantee_id)
            grant = Grant.create(
                object_id, grantee_id, owner_id, expires_at=expires_at, now=self.now()
            )
            self.share_repo.save_grant(grant)

        if existing is not None:
            logger.debug(
                f"Replaced grant on {object_id} for {grantee_id} "
                f"(expires_at {existing.expires_at} -> {expires_at})"
            )
        return grant

    def find_grant(self, object_id: str, grantee_id: str) -> Optional[Grant]:
        """
        Retrieve the active grant for a pair.

        Returns:
            Grant if present and not expired, None otherwise
        """
        grant = self.share_repo.get_grant(object_id, grantee_id)
        if grant is None or grant.is_expired(self.now()):
            return None
        return grant

    def list_grants_for_object(self, object_id: str) -> List[Grant]:
        """List active grants on an object."""
        now = self.now()
        return [g for g in self.share_repo.list_grants_for_object(object_id) if not g.is_expired(now)]

    def list_grants_for_grantee(self, grantee_id: str) -> List[Grant]:
        """List active grants naming an identity as grantee."""
        now = self.now()
        return [g for g in self.share_repo.list_grants_for_grantee(grantee_id) if not g.is_expired(now)]

    def revoke_grant(self, object_id: str, grantee_id: str) -> bool:
        """
        Delete a grant. Revoking an absent grant is not an error.

        Returns:
            True if a row was removed
        """
        with self.share_repo.grant_lock(object_id, grantee_id):
            return self.share_repo.delete_grant(object_id, grantee_id)

    # ------------------------------------------------------------------
    # Share links
    # ------------------------------------------------------------------

    def create_link(
        self, object_id: str, owner_id: str, expires_at: Optional[datetime] = None
    ) -> ShareLink:
        """
        Create a share link with a freshly generated token.

        Args:
            object_id: Object being shared
            owner_id: Owner issuing the link
            expires_at: Optional absolute expiry

        Returns:
            The new ShareLink

        Raises:
            StorageFailureError: If no unused token could be stored
        """
        for _ in range(MAX_TOKEN_ATTEMPTS):
            token = ShareToken.generate()
            link = ShareLink.create(
                str(token), object_id, owner_id, expires_at=expires_at, now=self.now()
            )
            if self.share_repo.save_link(link):
                return link
            logger.warning("Share token collision, regenerating")

        raise StorageFailureError("Could not allocate a unique share token")

    def find_link(self, token: str) -> Optional[ShareLink]:
        """
        Retrieve an active link by token.

        Returns:
            ShareLink if present and not expired, None otherwise
        """
        link = self.share_repo.get_link(token)
        if link is None or link.is_expired(self.now()):
            return None
        return link

    def list_links_for_object(self, object_id: str) -> List[ShareLink]:
        """List active links on an object."""
        now = self.now()
        return [link for link in self.share_repo.list_links_for_object(object_id) if not link.is_expired(now)]

    def revoke_link(self, token: str) -> bool:
        """Delete a link. Revoking an absent link is not an error."""
        return self.share_repo.delete_link(token)

    def record_link_access(self, token: str) -> int:
        """Bump a link's access counter (best-effort)."""
        return self.share_repo.increment_link_access(token)

    # ------------------------------------------------------------------
    # Cascade and hygiene
    # ------------------------------------------------------------------

    def delete_all_for_object(self, object_id: str) -> Tuple[int, int]:
        """
        Purge every grant and link tied to an object.

        Only used while cascading an object deletion.

        Returns:
            Tuple of (grants_removed, links_removed)
        """
        return self.share_repo.delete_all_for_object(object_id)

    def purge_expired(self) -> Tuple[int, int]:
        """
        Physically delete expired grants and links.

        Each grant is re-checked under its pair lock so a grant refreshed
        between listing and deletion survives.

        Returns:
            Tuple of (grants_purged, links_purged)
        """
        now = self.now()
        grants_purged = 0
        links_purged = 0

        for grant in self.share_repo.list_all_grants():
            if not grant.is_expired(now):
                continue
            with self.share_repo.grant_lock(grant.object_id, grant.grantee_id):
                current = self.share_repo.get_grant(grant.object_id, grant.grantee_id)
                if current is not None and current.is_expired(now):
                    if self.share_repo.delete_grant(grant.object_id, grant.grantee_id):
                        grants_purged += 1

        for link in self.share_repo.list_all_links():
            if link.is_expired(now) and self.share_repo.delete_link(link.token):
                links_purged += 1

        return grants_purged, links_purged
