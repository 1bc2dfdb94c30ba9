from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from factory_telemetry.core.db_connect import get_session
from factory_telemetry.services.alert_store import AlertStore
from factory_telemetry.services.ingestion_pipeline import IngestionPipeline
from factory_telemetry.services.sensor_store import BindingTable, RuleStore, SensorRegistry
from factory_telemetry.services.vision_event_log import VisionEventLog


def get_sensor_registry(db: AsyncSession = Depends(get_session)) -> SensorRegistry:
    return SensorRegistry(db)


def get_binding_table(db: AsyncSession = Depends(get_session)) -> BindingTable:
    return BindingTable(db)


def get_rule_store(db: AsyncSession = Depends(get_session)) -> RuleStore:
    return RuleStore(db)


def get_alert_store(db: AsyncSession = Depends(get_session)) -> AlertStore:
    return AlertStore(db)


def get_vision_event_log(db: AsyncSession = Depends(get_session)) -> VisionEventLog:
    return VisionEventLog(db)


def get_ingestion_pipeline(
    bindings: BindingTable = Depends(get_binding_table),
    rules: RuleStore = Depends(get_rule_store),
    alerts: AlertStore = Depends(get_alert_store),
) -> IngestionPipeline:
    return IngestionPipeline(bindings, rules, alerts)
