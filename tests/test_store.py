# File: tests/test_store.py
# -*- coding: utf-8 -*-
import os
import time
from pathlib import Path

import pytest

from check_twemproxy.errors import StoreError
from check_twemproxy.models import Snapshot
from check_twemproxy.store import SnapshotStore

PAYLOAD = {
    "service": "nutcracker",
    "uptime": 10,
    "c1": {
        "client_connections": 2,
        "s1": {"server_connections": 0, "requests": 100, "server_timedout": 5, "responses": 100},
    },
}


@pytest.fixture()
def store(tmp_path: Path) -> SnapshotStore:
    return SnapshotStore(tmp_path / "state", max_age=300)


def test_missing_file_loads_none(store):
    assert store.load("proxy01") is None


def test_save_then_load_round_trip(store):
    snap = Snapshot.from_payload(PAYLOAD)
    store.save("proxy01", snap)
    loaded = store.load("proxy01")
    assert loaded == snap
    # raw document, scalar metadata included, is what gets persisted
    assert loaded.to_payload() == PAYLOAD


def test_constructed_snapshot_round_trip(store):
    snap = Snapshot(clusters={"c1": {"s1": {"server_connections": 1, "requests": 2, "server_timedout": 3}}})
    store.save("proxy01", snap)
    assert store.load("proxy01") == snap


def test_stale_file_is_ignored(store):
    path = store.save("proxy01", Snapshot.from_payload(PAYLOAD))
    old = time.time() - 301
    os.utime(path, (old, old))
    assert store.load("proxy01") is None


def test_file_inside_window_is_used(store):
    path = store.save("proxy01", Snapshot.from_payload(PAYLOAD))
    recent = time.time() - 250
    os.utime(path, (recent, recent))
    assert store.load("proxy01") is not None


def test_explicit_now(store):
    path = store.save("proxy01", Snapshot.from_payload(PAYLOAD))
    mtime = path.stat().st_mtime
    assert store.load("proxy01", now=mtime + 299) is not None
    assert store.load("proxy01", now=mtime + 302) is None


def test_corrupt_file_raises(store):
    path = store.path_for("proxy01")
    path.parent.mkdir(parents=True)
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(StoreError):
        store.load("proxy01")


def test_wrong_shape_raises(store):
    path = store.path_for("proxy01")
    path.parent.mkdir(parents=True)
    path.write_text('{"c1": {"s1": {"requests": 1}}}', encoding="utf-8")
    with pytest.raises(StoreError):
        store.load("proxy01")


def test_save_truncates_previous_content(store):
    store.save("proxy01", Snapshot.from_payload(PAYLOAD))
    small = {"c1": {"s1": {"server_connections": 1, "requests": 1, "server_timedout": 0}}}
    path = store.save("proxy01", Snapshot.from_payload(small))
    assert path.read_text(encoding="utf-8") == '{"c1": {"s1": {"server_connections": 1, "requests": 1, "server_timedout": 0}}}'


def test_save_into_unwritable_location_raises(tmp_path: Path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    store = SnapshotStore(blocker / "state")
    with pytest.raises(StoreError):
        store.save("proxy01", Snapshot.from_payload(PAYLOAD))


@pytest.mark.parametrize("host", ["proxy01", "10.0.0.1", "cache-1.example.com"])
def test_plain_hosts_map_verbatim(store, host):
    assert store.path_for(host).name == f"twemproxy-{host}"


@pytest.mark.parametrize("host", ["../../etc/passwd", "..", "fe80::1%eth0", "a/b"])
def test_unsafe_hosts_stay_inside_state_dir(store, host):
    path = store.path_for(host)
    assert path.parent == store.state_dir
    assert path.name.startswith("twemproxy-")
    assert "/" not in path.name


def test_sanitised_hosts_do_not_collide(store):
    assert store.path_for("a/b") != store.path_for("a_b")
    assert store.path_for("a/b") != store.path_for("a:b")
