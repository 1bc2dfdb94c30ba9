import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from factory_telemetry.core.alert_rule_config import VisionConfig
from factory_telemetry.schemas.visionSchemas import UptimeReport, VisionStatus
from factory_telemetry.services.uptime_calculator import StatusTimeline, as_utc

logger = logging.getLogger(__name__)


def resolve_scope(roi_id: Optional[str] = None, machine_id: Optional[str] = None,
                  camera_id: Optional[str] = None) -> Optional[Tuple[str, str]]:
    """First supplied key wins: roi, then machine, then camera."""
    if roi_id:
        return VisionConfig.SCOPE_ROI, roi_id
    if machine_id:
        return VisionConfig.SCOPE_MACHINE, machine_id
    if camera_id:
        return VisionConfig.SCOPE_CAMERA, camera_id
    return None


def resolve_window(start: Optional[datetime], end: Optional[datetime],
                   default_hours: float) -> Tuple[datetime, datetime]:
    end = as_utc(end) if end else datetime.now(timezone.utc)
    start = as_utc(start) if start else end - timedelta(hours=default_hours)
    return start, end


async def latest_status(log, scope: str, scope_id: str) -> VisionStatus:
    """
    Latest observation of a scope, inactive when there is none.

    Every field is set explicitly; the route drops unset ones, so `roi_id`
    only appears for machine and camera scopes.
    """
    last = await log.latest(scope, scope_id)
    fields = {
        "scope": scope,
        "id": scope_id,
        "status": (last.status if last else None) or VisionConfig.STATUS_INACTIVE,
        "confidence": (last.confidence if last else None) or 0,
        "updated_at": last.created_at if last else None,
    }
    if scope != VisionConfig.SCOPE_ROI:
        fields["roi_id"] = last.roi_id if last else None
    return VisionStatus(**fields)


async def uptime(log, scope: str, scope_id: str, start: datetime, end: datetime) -> UptimeReport:
    """
    Active time of a scope inside [start, end].

    The status entering the window comes from the latest event strictly before
    `start`; inactive when the scope has no history.
    """
    seed = await log.latest_before(scope, scope_id, start)
    events = await log.between(scope, scope_id, start, end)
    initial_status = seed.status if seed is not None else VisionConfig.STATUS_INACTIVE

    timeline = StatusTimeline.from_events(events, initial_status=initial_status)
    summary = timeline.overlap(start, end)
    logger.debug(
        f"Uptime {scope}={scope_id} {start.isoformat()}..{end.isoformat()}: "
        f"{len(events)} events, {summary.percent_active}% active"
    )
    return UptimeReport(
        scope=scope,
        id=scope_id,
        from_=start,
        to=end,
        active_ms=summary.active_ms,
        total_ms=summary.total_ms,
        percent_active=summary.percent_active,
    )
