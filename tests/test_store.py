import threading

from nonceguard.sessions import Session
from nonceguard.store import SessionNonceStore


def test_get_returns_none_before_creation():
    store = SessionNonceStore()
    assert store.get(Session("s1")) is None
    assert store.get(None) is None


def test_get_or_create_reuses_instance():
    store = SessionNonceStore(capacity=3, attribute="cache")
    session = Session("s1")
    first = store.get_or_create(session)
    second = store.get_or_create(session)
    assert first is second
    assert first.capacity == 3
    assert store.get(session) is first
    assert session.get_attribute("cache") is first


def test_concurrent_creation_yields_single_cache():
    store = SessionNonceStore()
    session = Session("s1")
    barrier = threading.Barrier(8)
    results = []

    def worker() -> None:
        barrier.wait()
        results.append(store.get_or_create(session))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len({id(cache) for cache in results}) == 1
