"""
Property-based tests for the access-control engine.

Each example builds a fresh engine over in-memory collaborators so runs do
not share state.
"""

import io
from datetime import datetime, timezone

from hypothesis import given
from hypothesis import strategies as st

from fileshare.application import AccessControlEngine, UploadPolicy
from fileshare.application.event_publisher import EventPublisher
from fileshare.domain.sharing import GrantLedger
from fileshare.domain.users import UserInfo

from tests.fixtures.mock_repositories import (
    InMemoryBlobStore,
    InMemoryObjectCatalog,
    InMemoryShareRepository,
    InMemoryUserDirectory,
    MutableClock,
)
from tests.property.strategies import (
    USER_IDS,
    contents,
    grantee_batches,
    identities,
    positive_ttls,
    stranger_ids,
    ttls,
)

START = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def build_engine():
    clock = MutableClock(START)
    directory = InMemoryUserDirectory()
    for user_id in USER_IDS:
        directory.register(UserInfo(user_id, f"{user_id}@example.com"))
    share_repository = InMemoryShareRepository()
    blob_store = InMemoryBlobStore()
    engine = AccessControlEngine(
        catalog=InMemoryObjectCatalog(),
        ledger=GrantLedger(share_repository, clock=clock),
        blob_store=blob_store,
        user_directory=directory,
        event_publisher=EventPublisher(),
        upload_policy=UploadPolicy.permissive(),
        clock=clock,
    )
    return engine, clock, share_repository, blob_store


def upload(engine, owner, content=b"payload"):
    return engine.upload(owner, "file.bin", "application/octet-stream", io.BytesIO(content), len(content)).unwrap()


@given(owner=identities(), content=contents())
def test_owner_can_always_access(owner, content):
    engine, _, _, _ = build_engine()
    stored = upload(engine, owner, content)

    assert engine.can_access(owner, stored)
    assert engine.download(owner, stored.object_id).unwrap().stream.read() == content


@given(owner=identities(), stranger=stranger_ids())
def test_stranger_without_grant_is_forbidden(owner, stranger):
    engine, _, _, _ = build_engine()
    stored = upload(engine, owner)
    engine.create_share_link(owner, stored.object_id)

    assert engine.download(stranger, stored.object_id).is_forbidden


@given(first_ttl=ttls(), second_ttl=ttls())
def test_double_grant_leaves_one_row_with_second_expiry(first_ttl, second_ttl):
    engine, clock, share_repository, _ = build_engine()
    stored = upload(engine, "alice")

    engine.grant_to_users("alice", stored.object_id, ["bob"], ttl_seconds=first_ttl).unwrap()
    second = engine.grant_to_users("alice", stored.object_id, ["bob"], ttl_seconds=second_ttl).unwrap()[0]

    rows = share_repository.list_grants_for_object(stored.object_id)
    assert len(rows) == 1
    assert rows[0].expires_at == second.expires_at


@given(ttl=positive_ttls(), extra=st.integers(min_value=0, max_value=3600))
def test_expired_shares_are_invisible_before_purge(ttl, extra):
    engine, clock, share_repository, _ = build_engine()
    stored = upload(engine, "alice")
    engine.grant_to_users("alice", stored.object_id, ["bob"], ttl_seconds=ttl)
    link = engine.create_share_link("alice", stored.object_id, ttl_seconds=ttl).unwrap()

    clock.advance(ttl + extra)

    assert engine.download("bob", stored.object_id).is_forbidden
    assert engine.access_via_link("carol", link.token).is_not_found
    shares = engine.list_shares("alice", stored.object_id).unwrap()
    assert shares.grants == [] and shares.links == []
    # Rows are still stored until the reaper runs
    assert share_repository.list_all_grants() and share_repository.list_all_links()


@given(batch=grantee_batches(), use_link=st.booleans())
def test_delete_leaves_nothing_behind(batch, use_link):
    engine, _, share_repository, blob_store = build_engine()
    stored = upload(engine, "alice")
    engine.grant_to_users("alice", stored.object_id, batch)
    if use_link:
        engine.create_share_link("alice", stored.object_id)

    assert engine.delete_object("alice", stored.object_id).success

    assert share_repository.list_grants_for_object(stored.object_id) == []
    assert share_repository.list_links_for_object(stored.object_id) == []
    assert not blob_store.exists(stored.blob_id)
    assert engine.download("alice", stored.object_id).is_not_found


@given(content=contents(), holder=st.one_of(identities(), stranger_ids()))
def test_link_returns_original_bytes(content, holder):
    engine, _, _, _ = build_engine()
    stored = upload(engine, "alice", content)
    link = engine.create_share_link("alice", stored.object_id).unwrap()

    assert engine.access_via_link(holder, link.token).unwrap().stream.read() == content


@given(batch=grantee_batches())
def test_grants_only_reach_known_non_owner_users(batch):
    engine, _, _, _ = build_engine()
    stored = upload(engine, "alice")

    granted = engine.grant_to_users("alice", stored.object_id, batch).unwrap()

    expected = {g for g in batch if g in USER_IDS and g != "alice"}
    assert {g.grantee_id for g in granted} == expected
    assert len(granted) == len(expected)
