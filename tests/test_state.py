import dataclasses
import threading
import uuid
from datetime import timedelta

import pytest

from clickbus.logging_utils import format_entry, iso_z, sanitize_entry
from clickbus.state import PodIdentity, PodState


def test_identity_is_canonical_uuid():
    ident = PodIdentity()
    assert str(uuid.UUID(ident.guid)) == ident.guid
    assert ident.start_time.endswith("Z")


def test_identity_is_immutable():
    ident = PodIdentity()
    with pytest.raises(dataclasses.FrozenInstanceError):
        ident.guid = "other"


def test_uptime_seconds():
    ident = PodIdentity()
    assert ident.uptime_seconds(ident.started_at + timedelta(seconds=42, milliseconds=900)) == 42


def test_record_numbers_and_formats_entries():
    pod = PodState("pod-a")
    first = pod.record("tile_click", "one")
    second = pod.record("session_start", "two")
    assert first.request_number == 1
    assert second.request_number == 2
    assert first.entry == format_entry(first.server_timestamp, "pod-a", pod.guid, "tile_click", "one", 1)
    assert pod.snapshot().entries == [first.entry, second.entry]


def test_capacity_drops_oldest():
    pod = PodState("pod-a", capacity=3)
    for i in range(5):
        pod.record("a", str(i))
    snap = pod.snapshot()
    assert snap.requests == 5
    assert len(snap.entries) == 3
    assert [e.rsplit("Req#: ", 1)[1] for e in snap.entries] == ["3", "4", "5"]


def test_concurrent_records_lose_nothing():
    pod = PodState("pod-a")

    def worker():
        for _ in range(250):
            pod.record("a", "b")

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    snap = pod.snapshot()
    assert snap.requests == 2000
    assert len(snap.entries) == 100
    assert snap.entries[-1].endswith("Req#: 2000")


def test_iso_z_millis():
    ident = PodIdentity()
    ts = iso_z(ident.started_at.replace(microsecond=123456))
    assert ts.endswith(".123Z")


def test_sanitize_entry():
    assert sanitize_entry("a | b | c") == "a  - b  - c"
