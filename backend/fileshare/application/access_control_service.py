"""
Access Control Engine

Application service answering "may identity X do O to object Y" and
orchestrating the multi-step object lifecycle (upload, cascading delete)
across the metadata catalog, the grant ledger and the blob store.

Every public operation returns an OperationResult. Domain errors raised by
the private implementations are converted in exactly one place (_run), so
callers never need per-operation exception handling.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, Callable, Dict, List, Optional, Sequence, Tuple

from fileshare.domain.blobs import BlobStore
from fileshare.domain.catalog import ObjectCatalog, ObjectId, StoredObject
from fileshare.domain.clock import Clock, expiry_from_ttl
from fileshare.domain.errors import (
    DomainError,
    ErrorCategory,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    StorageFailureError,
)
from fileshare.domain.events import (
    BlobCleanupFailedEvent,
    DomainEvent,
    GrantCreatedEvent,
    GrantRevokedEvent,
    ObjectDeletedEvent,
    ObjectUploadedEvent,
    ShareLinkAccessedEvent,
    ShareLinkCreatedEvent,
    ShareLinkRevokedEvent,
)
from fileshare.domain.sharing import Grant, GrantLedger, ShareLink, ShareToken
from fileshare.domain.users import UserDirectory, UserInfo

from .event_publisher import EventPublisher
from .operation_result import OperationResult
from .upload_policy import UploadPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObjectDownload:
    """An authorized read: the object's metadata plus an open content stream."""
    stored_object: StoredObject
    stream: BinaryIO


@dataclass(frozen=True)
class AccessibleObjects:
    """
    Objects an identity can see.

    Attributes:
        owned: Objects the identity uploaded
        shared: Objects reachable through an active grant
        owners: Display info for the owners of the listed objects
    """
    owned: List[StoredObject]
    shared: List[StoredObject]
    owners: Dict[str, UserInfo]


@dataclass(frozen=True)
class ObjectShares:
    """Active grants and links on one object."""
    grants: List[Grant]
    links: List[ShareLink]


@dataclass(frozen=True)
class LinkInfo:
    """What a share link points at, shown before the holder downloads."""
    stored_object: StoredObject
    owner: Optional[UserInfo]
    created_at: datetime
    expires_at: Optional[datetime]
    access_count: int


class AccessControlEngine:
    """
    Central decision and orchestration point for stored objects.

    All collaborators are injected; the engine keeps no mutable state of its
    own and is safe to share between request threads.
    """

    def __init__(
        self,
        catalog: ObjectCatalog,
        ledger: GrantLedger,
        blob_store: BlobStore,
        user_directory: UserDirectory,
        event_publisher: Optional[EventPublisher] = None,
        upload_policy: Optional[UploadPolicy] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize the engine with its collaborators.

        Args:
            catalog: Metadata catalog
            ledger: Grant ledger
            blob_store: Blob backend
            user_directory: Resolves grantee ids and owner display info
            event_publisher: Optional publisher for audit events
            upload_policy: Upload limits (defaults to UploadPolicy())
            clock: Time source (defaults to the ledger's clock)
        """
        self.catalog = catalog
        self.ledger = ledger
        self.blob_store = blob_store
        self.user_directory = user_directory
        self.event_publisher = event_publisher
        self.upload_policy = upload_policy or UploadPolicy()
        self._clock = clock or ledger.now

    # ------------------------------------------------------------------
    # Authorization predicate
    # ------------------------------------------------------------------

    def can_access(self, identity: Optional[str], stored_object: StoredObject) -> bool:
        """
        Owner/grant authorization rule.

        Link possession is checked separately by access_via_link and is
        intentionally not part of this predicate.
        """
        if not identity:
            return False
        if stored_object.is_owned_by(identity):
            return True
        return self.ledger.find_grant(stored_object.object_id, identity) is not None

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def upload(
        self,
        identity: str,
        name: str,
        content_type: str,
        stream: BinaryIO,
        size: int,
    ) -> OperationResult[StoredObject]:
        """Store content and create its catalog record (blob first)."""
        return self._run("upload", self._upload, identity, name, content_type, stream, size)

    def list_accessible(self, identity: str) -> OperationResult[AccessibleObjects]:
        """List owned objects and objects shared through active grants."""
        return self._run("list_accessible", self._list_accessible, identity)

    def download(self, identity: str, object_id: str) -> OperationResult[ObjectDownload]:
        """Open an object for reading if the identity owns it or holds a grant."""
        return self._run("download", self._download, identity, object_id)

    def create_share_link(
        self, identity: str, object_id: str, ttl_seconds: Optional[float] = None
    ) -> OperationResult[ShareLink]:
        """Issue a share link (owner only)."""
        return self._run("create_share_link", self._create_share_link, identity, object_id, ttl_seconds)

    def access_via_link(self, identity: str, token: str) -> OperationResult[ObjectDownload]:
        """Open an object through a share link token."""
        return self._run("access_via_link", self._access_via_link, identity, token)

    def link_info(self, identity: str, token: str) -> OperationResult[LinkInfo]:
        """Describe what a share link points at without reading content."""
        return self._run("link_info", self._link_info, identity, token)

    def grant_to_users(
        self,
        identity: str,
        object_id: str,
        grantee_ids: Sequence[str],
        ttl_seconds: Optional[float] = None,
    ) -> OperationResult[List[Grant]]:
        """Grant access to known users (owner only), skipping unknown ids."""
        return self._run(
            "grant_to_users", self._grant_to_users, identity, object_id, grantee_ids, ttl_seconds
        )

    def revoke_user_access(
        self, identity: str, object_id: str, grantee_id: str
    ) -> OperationResult[None]:
        """Revoke a user's grant (owner only, idempotent)."""
        return self._run("revoke_user_access", self._revoke_user_access, identity, object_id, grantee_id)

    def revoke_link(self, identity: str, token: str) -> OperationResult[None]:
        """Revoke a share link (link owner only)."""
        return self._run("revoke_link", self._revoke_link, identity, token)

    def list_shares(self, identity: str, object_id: str) -> OperationResult[ObjectShares]:
        """List active grants and links on an object (owner only)."""
        return self._run("list_shares", self._list_shares, identity, object_id)

    def delete_object(self, identity: str, object_id: str) -> OperationResult[None]:
        """Delete an object and cascade to its blob, grants and links (owner only)."""
        return self._run("delete_object", self._delete_object, identity, object_id)

    # ------------------------------------------------------------------
    # Implementations
    # ------------------------------------------------------------------

    def _upload(
        self, identity: str, name: str, content_type: str, stream: BinaryIO, size: int
    ) -> StoredObject:
        owner_id = self._require_identity(identity)
        self.upload_policy.validate(name, content_type, size)
        reader = self.upload_policy.limit_stream(stream)

        try:
            blob_id = self.blob_store.put(reader)
        except DomainError:
            raise
        except Exception as e:
            raise StorageFailureError(f"Blob write failed: {e}", e) from e

        if reader.bytes_read != size:
            self._discard_blob(blob_id, aggregate_id=blob_id)
            raise InvalidInputError(
                f"Declared size {size} does not match uploaded content ({reader.bytes_read} bytes)"
            )

        try:
            stored_object = self.catalog.create(owner_id, name.strip(), content_type, size, blob_id)
        except Exception as e:
            # Never leave a catalog record without its blob
            self._discard_blob(blob_id, aggregate_id=blob_id)
            raise StorageFailureError(f"Catalog write failed after blob write: {e}", e) from e

        self._publish(ObjectUploadedEvent(
            aggregate_id=stored_object.object_id,
            occurred_at=self._clock(),
            owner_id=owner_id,
            size=size,
        ))
        return stored_object

    def _list_accessible(self, identity: str) -> AccessibleObjects:
        identity = self._require_identity(identity)
        owned = self.catalog.list_owned_by(identity)

        shared: List[StoredObject] = []
        seen = set()
        for grant in self.ledger.list_grants_for_grantee(identity):
            if grant.object_id in seen:
                continue
            seen.add(grant.object_id)
            stored_object = self.catalog.get(grant.object_id)
            if stored_object is None:
                logger.debug(f"Skipping stale grant on missing object {grant.object_id}")
                continue
            if stored_object.is_owned_by(identity):
                continue
            shared.append(stored_object)

        owners: Dict[str, UserInfo] = {}
        for owner_id in {obj.owner_id for obj in owned + shared}:
            info = self.user_directory.get(owner_id)
            if info is not None:
                owners[owner_id] = info

        return AccessibleObjects(owned=owned, shared=shared, owners=owners)

    def _download(self, identity: str, object_id: str) -> ObjectDownload:
        identity = self._require_identity(identity)
        stored_object = self._load_object(object_id)
        if not self.can_access(identity, stored_object):
            raise ForbiddenError(f"Access denied to object {object_id}")
        return ObjectDownload(stored_object, self._open_blob(stored_object))

    def _create_share_link(
        self, identity: str, object_id: str, ttl_seconds: Optional[float]
    ) -> ShareLink:
        identity = self._require_identity(identity)
        self._validate_ttl(ttl_seconds)
        stored_object = self._load_object(object_id)
        self._require_owner(identity, stored_object, "create share links for")

        expires_at = expiry_from_ttl(ttl_seconds, self._clock())
        link = self.ledger.create_link(stored_object.object_id, identity, expires_at)

        self._publish(ShareLinkCreatedEvent(
            aggregate_id=link.object_id,
            occurred_at=link.created_at,
            object_id=link.object_id,
            owner_id=identity,
            expires_at=expires_at,
        ))
        return link

    def _access_via_link(self, identity: str, token: str) -> ObjectDownload:
        identity, link, stored_object = self._resolve_link(identity, token)
        stream = self._open_blob(stored_object)

        try:
            access_count = self.ledger.record_link_access(link.token)
        except Exception as e:
            # The counter is best-effort; a failed bump never blocks the read
            logger.warning(f"Could not record share link access: {e}")
            access_count = link.access_count

        self._publish(ShareLinkAccessedEvent(
            aggregate_id=stored_object.object_id,
            occurred_at=self._clock(),
            identity=identity,
            owner_id=link.owner_id,
            access_count=access_count,
        ))
        return ObjectDownload(stored_object, stream)

    def _link_info(self, identity: str, token: str) -> LinkInfo:
        _, link, stored_object = self._resolve_link(identity, token)
        return LinkInfo(
            stored_object=stored_object,
            owner=self.user_directory.get(stored_object.owner_id),
            created_at=link.created_at,
            expires_at=link.expires_at,
            access_count=link.access_count,
        )

    def _grant_to_users(
        self,
        identity: str,
        object_id: str,
        grantee_ids: Sequence[str],
        ttl_seconds: Optional[float],
    ) -> List[Grant]:
        identity = self._require_identity(identity)
        if isinstance(grantee_ids, str) or not isinstance(grantee_ids, (list, tuple)) or not grantee_ids:
            raise InvalidInputError("grantee_ids must be a non-empty list of user ids")
        self._validate_ttl(ttl_seconds)

        stored_object = self._load_object(object_id)
        self._require_owner(identity, stored_object, "share")

        expires_at = expiry_from_ttl(ttl_seconds, self._clock())
        granted: List[Grant] = []
        seen = set()
        for grantee_id in grantee_ids:
            if not isinstance(grantee_id, str) or not grantee_id.strip():
                continue
            if grantee_id in seen or grantee_id == stored_object.owner_id:
                continue
            seen.add(grantee_id)
            if not self.user_directory.exists(grantee_id):
                logger.debug(f"Skipping unknown grantee {grantee_id}")
                continue

            grant = self.ledger.upsert_grant(
                stored_object.object_id, grantee_id, identity, expires_at
            )
            granted.append(grant)
            self._publish(GrantCreatedEvent(
                aggregate_id=stored_object.object_id,
                occurred_at=grant.created_at,
                owner_id=identity,
                grantee_id=grantee_id,
                expires_at=expires_at,
            ))

        return granted

    def _revoke_user_access(self, identity: str, object_id: str, grantee_id: str) -> None:
        identity = self._require_identity(identity)
        if not isinstance(grantee_id, str) or not grantee_id.strip():
            raise InvalidInputError("grantee_id is required")
        stored_object = self._load_object(object_id)
        self._require_owner(identity, stored_object, "revoke access to")

        existed = self.ledger.revoke_grant(stored_object.object_id, grantee_id)
        self._publish(GrantRevokedEvent(
            aggregate_id=stored_object.object_id,
            occurred_at=self._clock(),
            owner_id=identity,
            grantee_id=grantee_id,
            existed=existed,
        ))

    def _revoke_link(self, identity: str, token: str) -> None:
        identity = self._require_identity(identity)
        token = str(ShareToken(token))
        link = self.ledger.find_link(token)
        if link is None:
            raise NotFoundError("Share link not found or expired")
        if link.owner_id != identity:
            raise ForbiddenError("Only the link owner can revoke a share link")

        self.ledger.revoke_link(token)
        self._publish(ShareLinkRevokedEvent(
            aggregate_id=link.object_id,
            occurred_at=self._clock(),
            object_id=link.object_id,
            owner_id=identity,
        ))

    def _list_shares(self, identity: str, object_id: str) -> ObjectShares:
        identity = self._require_identity(identity)
        stored_object = self._load_object(object_id)
        self._require_owner(identity, stored_object, "list shares of")
        return ObjectShares(
            grants=self.ledger.list_grants_for_object(stored_object.object_id),
            links=self.ledger.list_links_for_object(stored_object.object_id),
        )

    def _delete_object(self, identity: str, object_id: str) -> None:
        identity = self._require_identity(identity)
        stored_object = self._load_object(object_id)
        self._require_owner(identity, stored_object, "delete")

        # Order matters: blob, then grants/links, then the catalog record
        self._discard_blob(stored_object.blob_id, aggregate_id=stored_object.object_id)
        grants_removed, links_removed = self.ledger.delete_all_for_object(stored_object.object_id)
        self.catalog.delete(stored_object.object_id)

        self._publish(ObjectDeletedEvent(
            aggregate_id=stored_object.object_id,
            occurred_at=self._clock(),
            owner_id=identity,
            grants_removed=grants_removed,
            links_removed=links_removed,
        ))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _run(self, operation: str, func: Callable, *args) -> OperationResult:
        try:
            return OperationResult.ok(func(*args))
        except DomainError as e:
            if e.category is ErrorCategory.STORAGE_FAILURE:
                logger.error(f"{operation} failed: {e}", exc_info=e.original_error is not None)
            elif e.category is ErrorCategory.FORBIDDEN:
                logger.info(f"{operation} denied: {e}")
            else:
                logger.debug(f"{operation} rejected ({e.category.value}): {e}")
            return OperationResult.from_error(e)
        except Exception as e:
            logger.error(f"{operation} failed unexpectedly: {e}", exc_info=True)
            return OperationResult.fail(ErrorCategory.STORAGE_FAILURE, str(e))

    @staticmethod
    def _require_identity(identity: Optional[str]) -> str:
        if not isinstance(identity, str) or not identity.strip():
            raise ForbiddenError("An authenticated identity is required")
        return identity

    @staticmethod
    def _require_owner(identity: str, stored_object: StoredObject, action: str) -> None:
        if not stored_object.is_owned_by(identity):
            raise ForbiddenError(f"Only the owner can {action} object {stored_object.object_id}")

    def _validate_ttl(self, ttl_seconds: Optional[float]) -> None:
        if ttl_seconds is None:
            return
        if isinstance(ttl_seconds, bool) or not isinstance(ttl_seconds, (int, float)):
            raise InvalidInputError(f"ttl_seconds must be a number, got {ttl_seconds!r}")
        if not math.isfinite(ttl_seconds):
            raise InvalidInputError("ttl_seconds must be finite")
        try:
            expiry_from_ttl(ttl_seconds, self._clock())
        except (OverflowError, ValueError) as e:
            raise InvalidInputError(f"ttl_seconds is out of range: {ttl_seconds!r}", e) from e

    def _load_object(self, object_id: str) -> StoredObject:
        object_id = str(ObjectId(object_id))
        stored_object = self.catalog.get(object_id)
        if stored_object is None:
            raise NotFoundError(f"Object not found: {object_id}")
        return stored_object

    def _resolve_link(self, identity: str, token: str) -> Tuple[str, ShareLink, StoredObject]:
        # Identity before token: anonymous callers get Forbidden for any token
        identity = self._require_identity(identity)
        token = str(ShareToken(token))
        link = self.ledger.find_link(token)
        if link is None:
            raise NotFoundError("Share link not found or expired")
        stored_object = self.catalog.get(link.object_id)
        if stored_object is None:
            raise NotFoundError(f"Object not found: {link.object_id}")
        return identity, link, stored_object

    def _open_blob(self, stored_object: StoredObject) -> BinaryIO:
        stream = self.blob_store.get(stored_object.blob_id)
        if stream is None:
            logger.error(
                f"Object {stored_object.object_id} references missing blob {stored_object.blob_id}"
            )
            raise NotFoundError(f"Content not found for object {stored_object.object_id}")
        return stream

    def _discard_blob(self, blob_id: str, aggregate_id: str) -> None:
        """Delete a blob, logging instead of failing when the store refuses."""
        try:
            if self.blob_store.delete(blob_id):
                return
            reason = "blob store reported failure"
        except Exception as e:
            reason = str(e)

        logger.warning(f"Leaving orphaned blob {blob_id} for {aggregate_id}: {reason}")
        self._publish(BlobCleanupFailedEvent(
            aggregate_id=aggregate_id,
            occurred_at=self._clock(),
            blob_id=blob_id,
            reason=reason,
        ))

    def _publish(self, event: DomainEvent) -> None:
        if self.event_publisher is not None:
            self.event_publisher.publish(event)
