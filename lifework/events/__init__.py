"""Hash-chained event log for registry messages."""

from lifework.events.log import (
    GENESIS_PREV_HASH,
    EventVerifyResult,
    RegistryEvent,
    append_event,
    compute_event_hash,
    export_events_jsonl,
    get_event_tip,
    get_events,
    verify_events,
)

__all__ = [
    "GENESIS_PREV_HASH",
    "EventVerifyResult",
    "RegistryEvent",
    "append_event",
    "compute_event_hash",
    "export_events_jsonl",
    "get_event_tip",
    "get_events",
    "verify_events",
]
