"""Unit tests for the code/link store."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest

from errors import InvalidOrExpiredCode, NotFound
from api.files.dto.file import FileMeta


def _meta(key: str = "blob.bin", **overrides) -> FileMeta:
    data = dict(
        original_name="report.pdf",
        storage_key=key,
        byte_size=1234,
        mime_type="application/pdf",
        uploaded_by="admin",
    )
    data.update(overrides)
    return FileMeta(**data)


def test_create_file_sets_retention_window(store, clock):
    file = store.files.create(_meta(), retention_days=7)

    assert file.created_at == clock()
    assert file.expires_at == clock() + timedelta(days=7)
    assert file.expires_at > file.created_at
    assert store.files.get(file.id) == file


def test_create_file_rejects_non_positive_retention(store):
    with pytest.raises(ValueError):
        store.files.create(_meta(), retention_days=0)


def test_list_active_is_newest_first_and_skips_expired(store, clock):
    old = store.files.create(_meta("a"), retention_days=1)
    clock.advance(hours=1)
    newer = store.files.create(_meta("b"), retention_days=7)
    clock.advance(hours=1)
    newest = store.files.create(_meta("c"), retention_days=7)

    assert [f.id for f in store.files.list_active()] == [newest.id, newer.id, old.id]

    clock.advance(days=1)
    assert [f.id for f in store.files.list_active()] == [newest.id, newer.id]


def test_upload_code_defaults(store, clock):
    code = store.codes.create()

    assert len(code.code) == 10
    assert code.max_uses == 1
    assert code.current_uses == 0
    assert code.max_file_size_mb == 500
    assert code.expires_at == clock() + timedelta(hours=24)


def test_validate_upload_code_requires_consumable_code(store, clock):
    code = store.codes.create(max_uses=1, expires_in_hours=1)

    assert store.codes.validate(code.code).id == code.id
    assert store.codes.validate("nope") is None

    store.codes.increment_use(code.id)
    assert store.codes.validate(code.code) is None


def test_validate_upload_code_expires(store, clock):
    code = store.codes.create(max_uses=5, expires_in_hours=1)
    clock.advance(hours=1)

    assert store.codes.validate(code.code) is None


def test_consume_never_exceeds_max_uses(store):
    code = store.codes.create(max_uses=2)

    assert store.codes.consume(code.id) is True
    assert store.codes.consume(code.id) is True
    assert store.codes.consume(code.id) is False
    assert store.codes.get(code.id).current_uses == 2


def test_concurrent_consume_takes_exactly_the_budget(store):
    code = store.codes.create(max_uses=3)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: store.codes.consume(code.id), range(20)))

    assert results.count(True) == 3
    assert store.codes.get(code.id).current_uses == 3


def test_get_file_by_download_code_round_trip(store):
    file = store.files.create(_meta(), retention_days=7)
    link = store.links.create(file.id)

    found_file, found_link = store.links.get_file_by_code(link.code)

    assert found_file == file
    assert found_link.id == link.id
    assert found_link.is_unlimited


def test_create_link_for_missing_file(store):
    with pytest.raises(NotFound):
        store.links.create("missing")


def test_limited_link_stops_resolving_when_exhausted(store):
    file = store.files.create(_meta())
    link = store.links.create(file.id, max_downloads=2)

    assert store.links.consume(link.id)
    assert store.links.get_file_by_code(link.code) is not None
    assert store.links.consume(link.id)

    assert store.links.get_file_by_code(link.code) is None
    assert store.links.consume(link.id) is False
    assert store.links.get(link.id).current_downloads == 2


def test_unlimited_link_counts_without_bound(store):
    file = store.files.create(_meta())
    link = store.links.create(file.id)

    for _ in range(50):
        assert store.links.consume(link.id)

    assert store.links.get_file_by_code(link.code) is not None
    assert store.links.get(link.id).current_downloads == 50


def test_link_expiry_and_file_expiry_both_gate_resolution(store, clock):
    file = store.files.create(_meta(), retention_days=2)
    short = store.links.create(file.id, expires_in_hours=1)
    unlimited = store.links.create(file.id)

    clock.advance(hours=1)
    assert store.links.get_file_by_code(short.code) is None
    assert store.links.get_file_by_code(unlimited.code) is not None

    clock.advance(days=2)
    assert store.links.get_file_by_code(unlimited.code) is None
    assert store.links.consume(unlimited.id) is False


def test_delete_expired_returns_each_key_once(store, clock):
    file = store.files.create(_meta("expiring.bin"), retention_days=7)
    link = store.links.create(file.id)
    keeper = store.files.create(_meta("keeper.bin"), retention_days=30)

    assert store.files.delete_expired() == []

    clock.advance(days=7)
    assert store.files.delete_expired() == ["expiring.bin"]
    assert store.files.delete_expired() == []

    assert store.files.get(file.id) is None
    assert store.links.get(link.id) is None
    assert store.links.get_file_by_code(link.code) is None
    assert store.files.get(keeper.id) is not None


def test_delete_file_cascades_links(store):
    file = store.files.create(_meta())
    link = store.links.create(file.id, max_downloads=3)

    assert store.files.delete(file.id) is True
    assert store.files.delete(file.id) is False
    assert store.links.get(link.id) is None


def test_admin_link_is_first_unlimited_link(store, clock):
    file = store.files.create(_meta())
    store.links.create(file.id, max_downloads=2)
    clock.advance(minutes=1)
    unlimited = store.links.create(file.id)

    assert store.links.get_admin_link(file.id).id == unlimited.id
    assert len(store.links.list_for_file(file.id)) == 2


def test_record_upload_consumes_code_and_creates_unlimited_link(store):
    code = store.codes.create(max_uses=1)

    file, link = store.uploads.record(
        _meta(uploaded_by="public"), upload_code_id=code.id
    )

    assert file.upload_code_id == code.id
    assert link.file_id == file.id
    assert link.is_unlimited
    assert store.codes.get(code.id).current_uses == 1

    with pytest.raises(InvalidOrExpiredCode):
        store.uploads.record(_meta("other", uploaded_by="public"), upload_code_id=code.id)
    assert len(store.files.list_active()) == 1


def test_purge_stale_keeps_codes_that_files_refer_to(store, clock):
    used = store.codes.create(max_uses=1)
    store.uploads.record(_meta(uploaded_by="public"), upload_code_id=used.id)
    expired = store.codes.create(expires_in_hours=1)
    fresh = store.codes.create(expires_in_hours=48)

    clock.advance(hours=2)

    assert store.codes.purge_stale() == 1
    assert store.codes.get(expired.id) is None
    assert store.codes.get(used.id) is not None
    assert store.codes.get(fresh.id) is not None


def test_purge_inactive_links(store, clock):
    file = store.files.create(_meta(), retention_days=30)
    exhausted = store.links.create(file.id, max_downloads=1)
    store.links.consume(exhausted.id)
    expiring = store.links.create(file.id, expires_in_hours=1)
    unlimited = store.links.create(file.id)

    clock.advance(hours=1)

    assert store.links.purge_inactive() == 2
    assert store.links.get(exhausted.id) is None
    assert store.links.get(expiring.id) is None
    assert store.links.get(unlimited.id) is not None


def test_panel_upsert_is_unique_per_channel(store):
    first = store.panels.upsert("guild", "channel", "m1")
    second = store.panels.upsert("guild", "channel", "m2")
    store.panels.upsert("guild", "other", "m3")

    assert second.id == first.id
    assert store.panels.get_by_channel("guild", "channel").message_id == "m2"
    assert len(store.panels.list_all()) == 2


def test_store_requires_open(clock):
    from store import Store

    closed = Store("sqlite+pysqlite:///:memory:", clock=clock)
    with pytest.raises(RuntimeError):
        closed.files.list_active()


def test_increment_download_is_unconditional(store):
    file = store.files.create(_meta())
    link = store.links.create(file.id, max_downloads=1)

    store.links.increment_download(link.id)
    store.links.increment_download(link.id)

    assert store.links.get(link.id).current_downloads == 2
    assert store.links.get_file_by_code(link.code) is None
