"""Tests for the hash-chained event log."""

from __future__ import annotations

import json
import sqlite3

import pytest

from lifework.claims.store import RegistryDB
from lifework.config import RegistryConfig
from lifework.contract import CallContext, LifeAndWork
from lifework.events.log import (
    GENESIS_PREV_HASH,
    append_event,
    compute_event_hash,
    export_events_jsonl,
    get_event_tip,
    get_events,
    verify_events,
)


@pytest.fixture
def db(tmp_path):
    return RegistryDB(tmp_path / "events.db")


def _append(db, n, event_type="ClaimEndorsed"):
    with db.transaction() as conn:
        return [append_event(conn, event_type, {"n": i}) for i in range(n)]


class TestComputeEventHash:
    def test_deterministic(self):
        ts = "2026-02-15T00:00:00+00:00"
        assert compute_event_hash({"a": 1}, "0" * 64, ts) == compute_event_hash({"a": 1}, "0" * 64, ts)

    def test_key_order_irrelevant(self):
        ts = "2026-02-15T00:00:00+00:00"
        h1 = compute_event_hash({"b": 2, "a": 1}, "0" * 64, ts)
        h2 = compute_event_hash({"a": 1, "b": 2}, "0" * 64, ts)
        assert h1 == h2

    def test_prev_hash_matters(self):
        ts = "2026-02-15T00:00:00+00:00"
        assert compute_event_hash({"a": 1}, "a" * 64, ts) != compute_event_hash({"a": 1}, "b" * 64, ts)


class TestAppend:
    def test_genesis_event(self, db):
        (event,) = _append(db, 1)
        assert event.seq == 1
        assert event.prev_hash == GENESIS_PREV_HASH
        assert len(event.event_hash) == 64
        assert event.event_id

    def test_linkage(self, db):
        e1, e2, e3 = _append(db, 3)
        assert e2.prev_hash == e1.event_hash
        assert e3.prev_hash == e2.event_hash

    def test_rollback_discards_events(self, db):
        _append(db, 2)
        with pytest.raises(RuntimeError):
            with db.transaction() as conn:
                append_event(conn, "ClaimEndorsed", {"n": 99})
                raise RuntimeError("abort")
        with db.reader() as conn:
            assert len(get_events(conn)) == 2

    def test_tip(self, db):
        with db.reader() as conn:
            assert get_event_tip(conn) is None
        events = _append(db, 3)
        with db.reader() as conn:
            assert get_event_tip(conn).event_hash == events[-1].event_hash

    def test_filters(self, db):
        _append(db, 2, "ClaimEndorsed")
        _append(db, 1, "RewardPaid")
        with db.reader() as conn:
            assert len(get_events(conn, event_type="RewardPaid")) == 1
            assert [e.seq for e in get_events(conn, since_seq=1)] == [2, 3]
            assert len(get_events(conn, limit=2)) == 2


class TestVerify:
    def test_empty(self, db):
        with db.reader() as conn:
            result = verify_events(conn)
        assert result.valid is True
        assert result.total_events == 0

    def test_valid_log(self, db):
        _append(db, 10)
        with db.reader() as conn:
            result = verify_events(conn)
        assert result.valid is True
        assert "10 events" in result.message

    def test_tampered_payload_detected(self, db):
        _append(db, 5)
        conn = sqlite3.connect(db.db_path)
        conn.execute("UPDATE events SET payload = ? WHERE seq = 2", (json.dumps({"n": 999}),))
        conn.commit()
        conn.close()

        with db.reader() as conn:
            result = verify_events(conn)
        assert result.valid is False
        assert result.first_break_seq == 2
        assert "Hash mismatch" in result.message

    def test_broken_link_detected(self, db):
        _append(db, 5)
        conn = sqlite3.connect(db.db_path)
        row = conn.execute("SELECT timestamp, payload FROM events WHERE seq = 4").fetchone()
        # Rehash so only the linkage is wrong
        new_hash = compute_event_hash(json.loads(row[1]), "0" * 64, row[0])
        conn.execute(
            "UPDATE events SET prev_hash = ?, event_hash = ? WHERE seq = 4",
            ("0" * 64, new_hash),
        )
        conn.commit()
        conn.close()

        with db.reader() as conn:
            result = verify_events(conn)
        assert result.valid is False
        assert result.first_break_seq == 4
        assert "Chain break" in result.message


class TestRegistryEvents:
    def test_claim_events_are_category_tagged(self, tmp_path):
        registry = LifeAndWork(RegistryConfig(db_path=tmp_path / "lifework.db"))
        alice = CallContext("alice")
        registry.submit_claim(alice, "work_history", b"a", b"")
        registry.submit_claim(alice, "education", b"b", b"")
        registry.submit_claim(alice, "expertise", b"c", b"")
        fp = registry.submit_claim(alice, "good_deed", b"d", b"")
        registry.submit_ip_claim(alice, b"e", b"", "11" * 32)

        types = [e.event_type for e in registry.events()]
        assert types == [
            "ClaimMadeWorkHistory",
            "ClaimMadeEducation",
            "ClaimMadeExpertise",
            "ClaimMadeGoodDeed",
            "ClaimMadeIntellectualProperty",
        ]
        good_deed = registry.events(event_type="ClaimMadeGoodDeed")[0]
        assert good_deed.payload == {"claimant": "alice", "content": b"d".hex(), "fingerprint": fp}
        assert registry.verify_events().valid is True

    def test_export_jsonl(self, tmp_path):
        registry = LifeAndWork(RegistryConfig(db_path=tmp_path / "lifework.db"))
        registry.submit_claim(CallContext("alice"), "expertise", b"Rust", b"")
        registry.submit_claim(CallContext("bob"), "expertise", b"Go", b"")

        out = tmp_path / "export" / "events.jsonl"
        assert registry.export_events(out) == 2
        lines = out.read_text().strip().splitlines()
        assert [json.loads(line)["seq"] for line in lines] == [1, 2]

    def test_export_empty(self, db, tmp_path):
        with db.reader() as conn:
            assert export_events_jsonl(conn, tmp_path / "none.jsonl") == 0
