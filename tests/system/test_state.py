import threading

import pytest

from src.system.state import InterfaceState, InterfaceStateStore


def test_merge_keeps_other_field():
    """Teste para merge: cada campo é atualizado sem apagar o outro."""
    store = InterfaceStateStore()
    assert store.merge("r2__management1", "oper", "UP") == InterfaceState(admin=None, oper="UP")
    assert store.merge("r2__management1", "admin", "DOWN") == InterfaceState(admin="DOWN", oper="UP")
    assert store.snapshot("r2__management1") == InterfaceState(admin="DOWN", oper="UP")


def test_snapshot_is_a_copy():
    store = InterfaceStateStore()
    store.merge("e", "oper", "UP")
    snap = store.snapshot("e")
    snap.oper = "DOWN"
    assert store.snapshot("e").oper == "UP"
    assert store.snapshot("missing") is None


def test_unknown_field():
    with pytest.raises(ValueError):
        InterfaceStateStore().merge("e", "speed", "10G")


def test_concurrent_merges_do_not_lose_updates():
    """Merges concorrentes em campos diferentes preservam ambos os valores."""
    store = InterfaceStateStore()
    endpoints = [f"dev__if{i}" for i in range(50)]

    def _set(field, value):
        for ep in endpoints:
            store.merge(ep, field, value)

    threads = [threading.Thread(target=_set, args=("admin", "UP")), threading.Thread(target=_set, args=("oper", "DOWN"))]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(store) == 50
    assert sorted(store.endpoints()) == sorted(endpoints)
    assert all(store.snapshot(ep) == InterfaceState("UP", "DOWN") for ep in endpoints)
