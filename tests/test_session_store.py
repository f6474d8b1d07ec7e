import time

from cloud_kitchen.infrastructure.session_store import SessionRevocationStore


def test_memory_store_remembers_revocations():
    store = SessionRevocationStore(None)
    assert not store.redis_available

    store.revoke("abc", 60)

    assert store.is_revoked("abc")
    assert not store.is_revoked("other")


def test_revocations_expire(monkeypatch):
    store = SessionRevocationStore(None)
    store.revoke("abc", 60)

    later = time.time() + 120
    monkeypatch.setattr(time, "time", lambda: later)

    assert not store.is_revoked("abc")
    assert "abc" not in store._memory_store


def test_unreachable_redis_falls_back_to_memory():
    # Nothing listens on port 1
    store = SessionRevocationStore("redis://127.0.0.1:1/0")
    assert not store.redis_available

    store.revoke("abc", 60)
    assert store.is_revoked("abc")


def test_expired_revocations_are_pruned_on_write(monkeypatch):
    store = SessionRevocationStore(None)
    store.revoke("old-1", 60)
    store.revoke("old-2", 60)

    later = time.time() + 120
    monkeypatch.setattr(time, "time", lambda: later)
    store.revoke("fresh", 60)

    assert set(store._memory_store) == {"fresh"}
