from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from factory_telemetry.api.v1.deps import get_vision_event_log
from factory_telemetry.core.config import get_settings
from factory_telemetry.schemas.visionSchemas import UptimeReport, VisionEventCreate, VisionEventSchema, VisionStatus
from factory_telemetry.services import vision_analytics
from factory_telemetry.services.vision_event_log import VisionEventLog

router = APIRouter()


@router.get("/vision/status", response_model=VisionStatus, response_model_exclude_unset=True)
async def get_vision_status(
    machine_id: Optional[str] = Query(None, alias="machineId"),
    camera_id: Optional[str] = Query(None, alias="cameraId"),
    roi_id: Optional[str] = Query(None, alias="roiId"),
    log: VisionEventLog = Depends(get_vision_event_log),
):
    # Priority: roiId > machineId > cameraId
    scope = vision_analytics.resolve_scope(roi_id=roi_id, machine_id=machine_id, camera_id=camera_id)
    if scope is None:
        raise HTTPException(status_code=400, detail="machineId, cameraId or roiId is required")
    return await vision_analytics.latest_status(log, *scope)


@router.get("/vision/uptime", response_model=UptimeReport)
async def get_vision_uptime(
    machine_id: Optional[str] = Query(None, alias="machineId"),
    camera_id: Optional[str] = Query(None, alias="cameraId"),
    start: Optional[datetime] = Query(None, alias="from", description="window start, ISO 8601"),
    end: Optional[datetime] = Query(None, alias="to", description="window end, ISO 8601, defaults to now"),
    log: VisionEventLog = Depends(get_vision_event_log),
):
    scope = vision_analytics.resolve_scope(machine_id=machine_id, camera_id=camera_id)
    if scope is None:
        raise HTTPException(status_code=400, detail="machineId or cameraId is required")

    window_start, window_end = vision_analytics.resolve_window(
        start, end, get_settings().UPTIME_DEFAULT_WINDOW_HOURS
    )
    return await vision_analytics.uptime(log, scope[0], scope[1], window_start, window_end)


@router.post("/vision/mock-event", response_model=VisionEventSchema)
async def record_vision_event(event: VisionEventCreate, log: VisionEventLog = Depends(get_vision_event_log)):
    """Append an observation as the vision inference process would."""
    return await log.record(event)
