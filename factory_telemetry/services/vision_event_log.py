import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from factory_telemetry.core.alert_rule_config import IdPrefix, VisionConfig
from factory_telemetry.models.base import generate_id
from factory_telemetry.models.vision_event import VisionCameraEvent
from factory_telemetry.schemas.visionSchemas import VisionEventCreate
from factory_telemetry.services.uptime_calculator import as_utc

logger = logging.getLogger(__name__)

SCOPE_COLUMNS = {
    VisionConfig.SCOPE_ROI: VisionCameraEvent.roi_id,
    VisionConfig.SCOPE_MACHINE: VisionCameraEvent.machine_id,
    VisionConfig.SCOPE_CAMERA: VisionCameraEvent.camera_id,
}


class VisionEventLog:
    """
    Append-only log of vision observations. No updates, no deletes.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def record(self, event: VisionEventCreate) -> VisionCameraEvent:
        when = as_utc(event.created_at) if event.created_at else datetime.now(timezone.utc)
        row = VisionCameraEvent(
            id=event.id or generate_id(IdPrefix.VISION_EVENT),
            camera_id=event.camera_id,
            machine_id=event.machine_id,
            roi_id=event.roi_id,
            status=event.status,
            confidence=event.confidence,
            frame_time=when,
            created_at=when,
        )
        self.db.add(row)
        await self.db.commit()
        logger.debug(f"Vision event {row.id}: machine={row.machine_id} camera={row.camera_id} roi={row.roi_id} {row.status}")
        return row

    async def latest(self, scope: str, scope_id: str) -> Optional[VisionCameraEvent]:
        column = SCOPE_COLUMNS[scope]
        query = (
            select(VisionCameraEvent)
            .where(column == scope_id)
            .order_by(VisionCameraEvent.created_at.desc())
            .limit(1)
        )
        result = await self.db.execute(query)
        return result.scalars().first()

    async def latest_before(self, scope: str, scope_id: str, moment: datetime) -> Optional[VisionCameraEvent]:
        column = SCOPE_COLUMNS[scope]
        query = (
            select(VisionCameraEvent)
            .where(column == scope_id, VisionCameraEvent.created_at < moment)
            .order_by(VisionCameraEvent.created_at.desc())
            .limit(1)
        )
        result = await self.db.execute(query)
        return result.scalars().first()

    async def between(self, scope: str, scope_id: str, start: datetime, end: datetime) -> List[VisionCameraEvent]:
        """Events with start <= created_at <= end, ascending."""
        column = SCOPE_COLUMNS[scope]
        query = (
            select(VisionCameraEvent)
            .where(
                column == scope_id,
                VisionCameraEvent.created_at >= start,
                VisionCameraEvent.created_at <= end,
            )
            .order_by(VisionCameraEvent.created_at.asc())
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())
