from datetime import datetime
from typing import Any, Optional

from pydantic import Field, field_validator

from factory_telemetry.core.alert_rule_config import VisionConfig
from factory_telemetry.schemas.sensorSchemas import CamelModel


class VisionEventCreate(CamelModel):
    id: Optional[str] = None
    machine_id: str
    camera_id: Optional[str] = None
    roi_id: Optional[str] = None
    status: Optional[Any] = Field(default=None, validate_default=True)
    confidence: Optional[Any] = None
    created_at: Optional[datetime] = None

    @field_validator('id', 'machine_id', 'camera_id', 'roi_id', mode='before')
    @classmethod
    def strip_text(cls, v):
        if v is None:
            return v
        return str(v).strip()

    @field_validator('machine_id')
    @classmethod
    def require_machine(cls, v):
        if not v:
            raise ValueError("machineId is required")
        return v

    @field_validator('camera_id', 'roi_id', 'id')
    @classmethod
    def blank_to_none(cls, v):
        return v or None

    @field_validator('status')
    @classmethod
    def coerce_status(cls, v):
        # anything other than exactly "active" is recorded as inactive
        return VisionConfig.STATUS_ACTIVE if v == VisionConfig.STATUS_ACTIVE else VisionConfig.STATUS_INACTIVE

    @field_validator('confidence')
    @classmethod
    def numeric_confidence(cls, v):
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return None
        return float(v)


class VisionEventSchema(CamelModel):
    id: str
    machine_id: str
    camera_id: Optional[str] = None
    roi_id: Optional[str] = None
    status: str
    confidence: Optional[float] = None
    created_at: datetime


class VisionStatus(CamelModel):
    scope: str
    id: str
    roi_id: Optional[str] = None
    status: str = VisionConfig.STATUS_INACTIVE
    confidence: float = 0
    updated_at: Optional[datetime] = None


class UptimeReport(CamelModel):
    scope: str
    id: str
    from_: datetime = Field(alias="from")
    to: datetime
    active_ms: int
    total_ms: int
    percent_active: float
