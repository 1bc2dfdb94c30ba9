"""
Status timeline reconstruction for vision events.

A scope's status is a right-continuous step function of time: an event at `t`
with status `s` means the status became `s` at `t` and holds until the next
event for the same scope. Before the first event of a window the status is the
one of the latest event strictly before the window, or inactive.
"""
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Iterable, List

from factory_telemetry.core.alert_rule_config import VisionConfig

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def as_utc(value: datetime) -> datetime:
    # naive timestamps coming back from the store are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_epoch_ms(value: datetime) -> int:
    return (as_utc(value) - EPOCH) // timedelta(milliseconds=1)


def normalize_status(status) -> str:
    return VisionConfig.STATUS_ACTIVE if status == VisionConfig.STATUS_ACTIVE else VisionConfig.STATUS_INACTIVE


@dataclass(frozen=True)
class StatusTransition:
    timestamp: datetime
    status: str


@dataclass(frozen=True)
class UptimeSummary:
    active_ms: int
    total_ms: int
    percent_active: float


@dataclass
class StatusTimeline:
    """
    Ordered transitions of one scope plus the status in force before the first one.

    Transitions must be ascending by timestamp; the store returns them that way
    and the order is not re-checked here.
    """
    initial_status: str = VisionConfig.STATUS_INACTIVE
    transitions: List[StatusTransition] = field(default_factory=list)

    @classmethod
    def from_events(cls, events: Iterable, initial_status: str = VisionConfig.STATUS_INACTIVE) -> "StatusTimeline":
        """Build from records exposing `created_at` and `status`."""
        transitions = [
            StatusTransition(timestamp=as_utc(e.created_at), status=normalize_status(e.status))
            for e in events
        ]
        return cls(initial_status=normalize_status(initial_status), transitions=transitions)

    def overlap(self, window_start: datetime, window_end: datetime) -> UptimeSummary:
        return compute_uptime(self.transitions, window_start, window_end, self.initial_status)


def compute_uptime(events: Iterable[StatusTransition], window_start: datetime, window_end: datetime,
                   initial_status: str) -> UptimeSummary:
    """
    Single left-to-right sweep accumulating the time spent active inside the window.

    Each event closes the sub-interval opened by the previous one; only sub-intervals
    whose previous status was active count. The open tail after the last event runs
    to the window end.
    """
    from_ms = to_epoch_ms(window_start)
    to_ms = to_epoch_ms(window_end)

    last_ts = from_ms
    status = normalize_status(initial_status)
    active_ms = 0
    for event in events:
        ts = to_epoch_ms(event.timestamp)
        window_close = min(ts, to_ms)
        if window_close > last_ts and status == VisionConfig.STATUS_ACTIVE:
            active_ms += window_close - last_ts
        last_ts = max(last_ts, ts)
        status = normalize_status(event.status)
        if last_ts >= to_ms:
            break

    if to_ms > last_ts and status == VisionConfig.STATUS_ACTIVE:
        active_ms += to_ms - last_ts

    total_ms = max(0, to_ms - from_ms)
    # half-up to two decimals
    percent_active = math.floor(active_ms * 10000 / total_ms + 0.5) / 100 if total_ms > 0 else 0.0
    return UptimeSummary(active_ms=active_ms, total_ms=total_ms, percent_active=percent_active)
