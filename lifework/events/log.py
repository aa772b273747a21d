"""Registry event log — append-only, hash-chained, SQLite-backed.

Each event's hash depends on the previous event's hash, so any edit to a
stored event breaks verification from that point on. Events are written
on the message's own connection and therefore vanish with it on rollback.

Storage: `events` table in the registry database.
"""

from __future__ import annotations

import hashlib
import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel
from uuid_extensions import uuid7

GENESIS_PREV_HASH = "0" * 64


class RegistryEvent(BaseModel):
    """A single event in the log."""

    seq: int = 0
    event_id: str = ""
    event_hash: str = ""
    prev_hash: str = ""
    timestamp: str = ""
    event_type: str = ""  # ClaimMade<Category> | ClaimEndorsed | RewardPaid
    payload: dict[str, Any] = {}


class EventVerifyResult(BaseModel):
    valid: bool
    total_events: int
    verified_events: int
    first_break_seq: int | None = None
    message: str = ""


def compute_event_hash(payload: dict[str, Any], prev_hash: str, timestamp: str) -> str:
    """SHA-256(canonical_json(payload) + prev_hash + timestamp)."""
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=True)
    preimage = canonical + prev_hash + timestamp
    return hashlib.sha256(preimage.encode("utf-8")).hexdigest()


def _row_to_event(row: tuple) -> RegistryEvent:
    return RegistryEvent(
        seq=row[0],
        event_id=row[1],
        event_hash=row[2],
        prev_hash=row[3],
        timestamp=row[4],
        event_type=row[5],
        payload=json.loads(row[6]),
    )


_SELECT = "SELECT seq, event_id, event_hash, prev_hash, timestamp, event_type, payload FROM events"


def append_event(
    conn: sqlite3.Connection,
    event_type: str,
    payload: dict[str, Any],
) -> RegistryEvent:
    """Append an event linked to the current tip. Does not commit."""
    tip_row = conn.execute(
        "SELECT event_hash FROM events ORDER BY seq DESC LIMIT 1"
    ).fetchone()
    prev_hash = tip_row[0] if tip_row else GENESIS_PREV_HASH

    timestamp = datetime.now(timezone.utc).isoformat()
    event_hash = compute_event_hash(payload, prev_hash, timestamp)
    event_id = str(uuid7())

    cur = conn.execute(
        "INSERT INTO events (event_id, event_hash, prev_hash, timestamp, event_type, payload) "
        "VALUES (?, ?, ?, ?, ?, ?)",
        (event_id, event_hash, prev_hash, timestamp, event_type,
         json.dumps(payload, sort_keys=True)),
    )

    return RegistryEvent(
        seq=cur.lastrowid,
        event_id=event_id,
        event_hash=event_hash,
        prev_hash=prev_hash,
        timestamp=timestamp,
        event_type=event_type,
        payload=payload,
    )


def get_events(
    conn: sqlite3.Connection,
    *,
    since_seq: int = 0,
    event_type: str | None = None,
    limit: int | None = None,
) -> list[RegistryEvent]:
    """Events with seq > since_seq, oldest first."""
    clauses = ["seq > ?"]
    params: list[Any] = [since_seq]
    if event_type:
        clauses.append("event_type = ?")
        params.append(event_type)

    sql = f"{_SELECT} WHERE {' AND '.join(clauses)} ORDER BY seq ASC"
    if limit is not None:
        sql += " LIMIT ?"
        params.append(limit)

    return [_row_to_event(r) for r in conn.execute(sql, params).fetchall()]


def get_event_tip(conn: sqlite3.Connection) -> RegistryEvent | None:
    row = conn.execute(f"{_SELECT} ORDER BY seq DESC LIMIT 1").fetchone()
    if row is None:
        return None
    return _row_to_event(row)


def verify_events(conn: sqlite3.Connection) -> EventVerifyResult:
    """Recompute every hash and check prev_hash links from genesis."""
    rows = conn.execute(
        "SELECT seq, event_hash, prev_hash, timestamp, payload FROM events ORDER BY seq ASC"
    ).fetchall()

    total = len(rows)
    if total == 0:
        return EventVerifyResult(
            valid=True, total_events=0, verified_events=0, message="Empty event log",
        )

    expected_prev = GENESIS_PREV_HASH
    for i, (seq, stored_hash, stored_prev, timestamp, payload_json) in enumerate(rows):
        if stored_prev != expected_prev:
            return EventVerifyResult(
                valid=False, total_events=total, verified_events=i,
                first_break_seq=seq,
                message=f"Chain break at seq {seq}: expected prev={expected_prev[:16]}... stored prev={stored_prev[:16]}...",
            )

        computed = compute_event_hash(json.loads(payload_json), stored_prev, timestamp)
        if computed != stored_hash:
            return EventVerifyResult(
                valid=False, total_events=total, verified_events=i,
                first_break_seq=seq,
                message=f"Hash mismatch at seq {seq}: stored={stored_hash[:16]}... computed={computed[:16]}...",
            )
        expected_prev = stored_hash

    return EventVerifyResult(
        valid=True, total_events=total, verified_events=total,
        message=f"Event log verified: {total} events, integrity OK",
    )


def export_events_jsonl(conn: sqlite3.Connection, path: str | Path) -> int:
    """Write the full log as JSONL. Returns the number of events written."""
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)

    events = get_events(conn)
    with open(output, "w") as f:
        for event in events:
            f.write(event.model_dump_json() + "\n")
    return len(events)
