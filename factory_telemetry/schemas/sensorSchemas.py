from datetime import datetime
from typing import Any, Dict, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from factory_telemetry.core.alert_rule_config import AlertRuleConfig


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class IdResponse(CamelModel):
    id: str


class OkResponse(CamelModel):
    ok: bool = True


# Sensors

class SensorCreate(CamelModel):
    id: Optional[str] = None
    name: str
    type: str
    protocol: str
    address: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class SensorSchema(CamelModel):
    id: str
    name: str
    type: str
    protocol: str
    address: Optional[str] = None
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("sensor_metadata", "metadata"),
    )
    created_at: Optional[datetime] = None

    @field_validator('metadata', mode='before')
    @classmethod
    def default_metadata(cls, v):
        return v or {}


# Bindings

class BindingCreate(CamelModel):
    id: Optional[str] = None
    sensor_id: str
    machine_id: str
    metric: str
    unit: Optional[str] = None
    scale: Optional[float] = None
    offset: Optional[float] = None


class BindingSchema(CamelModel):
    id: str
    sensor_id: str
    machine_id: str
    metric: str
    unit: Optional[str] = None
    scale: float = AlertRuleConfig.DEFAULT_SCALE
    offset: float = AlertRuleConfig.DEFAULT_OFFSET
    created_at: Optional[datetime] = None


# Rules

Operator = Literal["range", "gt", "lt", "eq"]
Priority = Literal["low", "medium", "high", "critical"]


class RuleCreate(CamelModel):
    id: Optional[str] = None
    machine_id: str
    sensor_id: Optional[str] = None
    metric: str
    operator: Operator
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    threshold_value: Optional[float] = None
    priority: Optional[Priority] = None
    message: Optional[str] = None
    enabled: Optional[bool] = None
    cooldown_seconds: Optional[int] = Field(default=None, ge=0)

    @field_validator('sensor_id', 'message', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode='after')
    def check_operands(self):
        if self.operator in AlertRuleConfig.THRESHOLD_OPERATORS and self.threshold_value is None:
            raise ValueError(f"thresholdValue is required for operator '{self.operator}'")
        return self


class RuleSchema(CamelModel):
    id: str
    machine_id: str
    sensor_id: Optional[str] = None
    metric: str
    operator: str
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    threshold_value: Optional[float] = None
    priority: str
    message: str
    enabled: bool
    cooldown_seconds: Optional[int] = None


# Alerts

class AlertSchema(CamelModel):
    id: str
    machine_id: str
    rule_id: Optional[str] = None
    sensor_id: Optional[str] = None
    metric: str
    value: Optional[float] = None
    status: str
    priority: str
    message: str
    created_at: datetime
    resolved_at: Optional[datetime] = None


# Ingestion

class SensorReading(CamelModel):
    sensor_id: str
    metric: str
    value: float
    timestamp: Optional[datetime] = None


class IngestResult(CamelModel):
    ok: bool = True
    alerts_created: int
