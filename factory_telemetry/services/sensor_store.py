import logging
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from factory_telemetry.core.alert_rule_config import AlertRuleConfig, IdPrefix
from factory_telemetry.models.base import generate_id
from factory_telemetry.models.sensor import Sensor
from factory_telemetry.models.sensor_binding import SensorBinding
from factory_telemetry.models.sensor_rule import SensorRule
from factory_telemetry.schemas.sensorSchemas import BindingCreate, RuleCreate, SensorCreate

logger = logging.getLogger(__name__)


def upsert_statement(model, values: dict):
    """INSERT ... ON CONFLICT (id) DO UPDATE with every supplied column overwritten."""
    table = model.__table__
    stmt = insert(table).values(**values)
    update_cols = {name: stmt.excluded[name] for name in values if name != "id"}
    return stmt.on_conflict_do_update(index_elements=[table.c.id], set_=update_cols)


async def _upsert(db: AsyncSession, model, values: dict) -> None:
    await db.execute(upsert_statement(model, values))
    await db.commit()


class SensorRegistry:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def register(self, sensor: SensorCreate) -> str:
        sensor_id = sensor.id or generate_id(IdPrefix.SENSOR)
        await _upsert(self.db, Sensor, {
            "id": sensor_id,
            "name": sensor.name,
            "type": sensor.type,
            "protocol": sensor.protocol,
            "address": sensor.address or None,
            "metadata": sensor.metadata or {},
        })
        logger.info(f"Sensor {sensor_id} registered ({sensor.type}/{sensor.protocol})")
        return sensor_id

    async def list(self) -> List[Sensor]:
        result = await self.db.execute(select(Sensor).order_by(Sensor.created_at.desc()))
        return list(result.scalars().all())


class BindingTable:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def bind(self, binding: BindingCreate) -> str:
        binding_id = binding.id or generate_id(IdPrefix.BINDING)
        await _upsert(self.db, SensorBinding, {
            "id": binding_id,
            "sensor_id": binding.sensor_id,
            "machine_id": binding.machine_id,
            "metric": binding.metric,
            "unit": binding.unit or None,
            "scale": AlertRuleConfig.DEFAULT_SCALE if binding.scale is None else binding.scale,
            "offset_value": AlertRuleConfig.DEFAULT_OFFSET if binding.offset is None else binding.offset,
        })
        logger.info(f"Sensor {binding.sensor_id}/{binding.metric} bound to machine {binding.machine_id} ({binding_id})")
        return binding_id

    async def find_by_sensor_metric(self, sensor_id: str, metric: str) -> List[SensorBinding]:
        query = (
            select(SensorBinding)
            .where(SensorBinding.sensor_id == sensor_id, SensorBinding.metric == metric)
            .order_by(SensorBinding.created_at, SensorBinding.id)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list(self, machine_id: Optional[str] = None) -> List[SensorBinding]:
        query = select(SensorBinding)
        if machine_id:
            query = query.where(SensorBinding.machine_id == machine_id)
        result = await self.db.execute(query.order_by(SensorBinding.created_at.desc()))
        return list(result.scalars().all())


class RuleStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, rule: RuleCreate) -> str:
        rule_id = rule.id or generate_id(IdPrefix.RULE)
        await _upsert(self.db, SensorRule, {
            "id": rule_id,
            "machine_id": rule.machine_id,
            "sensor_id": rule.sensor_id,
            "metric": rule.metric,
            "operator": rule.operator,
            "min_value": rule.min_value,
            "max_value": rule.max_value,
            "threshold_value": rule.threshold_value,
            "priority": rule.priority or AlertRuleConfig.DEFAULT_PRIORITY,
            "message": rule.message or AlertRuleConfig.DEFAULT_MESSAGE,
            "enabled": True if rule.enabled is None else rule.enabled,
            "cooldown_seconds": rule.cooldown_seconds,
        })
        logger.info(f"Rule {rule_id} saved for machine {rule.machine_id} ({rule.metric} {rule.operator})")
        return rule_id

    async def find_active(self, machine_id: str, sensor_id: str, metric: str) -> List[SensorRule]:
        """Enabled rules for the machine and metric, either global or scoped to this sensor."""
        query = (
            select(SensorRule)
            .where(
                SensorRule.enabled.is_(True),
                SensorRule.machine_id == machine_id,
                SensorRule.metric == metric,
                or_(SensorRule.sensor_id.is_(None), SensorRule.sensor_id == sensor_id),
            )
            .order_by(SensorRule.created_at, SensorRule.id)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_enabled(self) -> List[SensorRule]:
        query = select(SensorRule).where(SensorRule.enabled.is_(True)).order_by(SensorRule.created_at.desc())
        result = await self.db.execute(query)
        return list(result.scalars().all())
