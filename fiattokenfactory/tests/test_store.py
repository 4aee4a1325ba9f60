from __future__ import annotations

import pytest

from fiattokenfactory.store import KV, MemoryKV, Prefix, SQLiteKV, open_store


@pytest.fixture(params=["memory", "sqlite"])
def kv(request, tmp_path) -> KV:
    if request.param == "memory":
        store = MemoryKV()
    else:
        store = SQLiteKV(tmp_path / "kv.db")
    yield store
    store.close()


def test_basic_crud(kv):
    assert kv.get(b"a") is None
    kv.put(b"a", b"1")
    assert kv.get(b"a") == b"1"
    assert kv.has(b"a")
    kv.put(b"a", b"2")
    assert kv.get(b"a") == b"2"
    kv.delete(b"a")
    assert not kv.has(b"a")
    kv.delete(b"a")  # deleting a missing key is fine


def test_prefix_iteration_is_ordered_and_bounded(kv):
    p = Prefix(b"ftf/minters")
    q = Prefix(b"ftf/minter_controllers")
    for part in (b"\x03", b"\x01", b"\x02\x00"):
        kv.put(p.key(part), part)
    kv.put(q.key(b"\x01"), b"other")

    got = list(kv.iter_prefix(p.raw))
    assert [v for _, v in got] == [b"\x01", b"\x03", b"\x02\x00"]
    assert [p.strip(k) for k, _ in got] == [b"\x01", b"\x03", b"\x02\x00"]


def test_batch_commits_atomically(kv):
    with kv.batch() as b:
        b.put(b"x", b"1")
        b.put(b"y", b"2")
        b.delete(b"x")
    assert kv.get(b"x") is None
    assert kv.get(b"y") == b"2"


def test_batch_rolls_back_on_error(kv):
    kv.put(b"keep", b"1")
    with pytest.raises(RuntimeError):
        with kv.batch() as b:
            b.put(b"new", b"1")
            b.delete(b"keep")
            raise RuntimeError("boom")
    assert kv.get(b"new") is None
    assert kv.get(b"keep") == b"1"


def test_sqlite_batch_guards(tmp_path):
    store = SQLiteKV(tmp_path / "kv.db")
    b = store.batch()
    with pytest.raises(RuntimeError):
        b.put(b"k", b"v")
    with b:
        b.put(b"k", b"v")
        with pytest.raises(RuntimeError):
            b.__enter__()
    assert store.get(b"k") == b"v"
    assert len(store) == 1
    store.close()

    with pytest.raises(FileNotFoundError):
        SQLiteKV(tmp_path / "missing.db", create=False)


def test_prefix_helpers():
    p = Prefix("ftf/owner/")
    assert p.raw == b"ftf/owner/"
    assert p.key() == p.raw
    with pytest.raises(ValueError):
        Prefix(b"")
    with pytest.raises(ValueError):
        p.strip(b"elsewhere")


def test_open_store_uris(tmp_path):
    assert isinstance(open_store("memory://"), MemoryKV)
    assert isinstance(open_store("sqlite:///:memory:"), SQLiteKV)
    db = tmp_path / "a.db"
    s = open_store(f"sqlite:///{db}")
    s.put(b"k", b"v")
    s.close()
    assert open_store(str(db)).get(b"k") == b"v"
    with pytest.raises(ValueError):
        open_store("redis://localhost")
    with pytest.raises(FileNotFoundError):
        open_store(str(tmp_path / "missing.db"), create=False)
