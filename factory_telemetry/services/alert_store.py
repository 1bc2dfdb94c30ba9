import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from factory_telemetry.core.alert_rule_config import AlertRuleConfig, IdPrefix
from factory_telemetry.models.alert import Alert
from factory_telemetry.models.base import generate_id

logger = logging.getLogger(__name__)


class AlertStore:
    """
    Alerts materialized by ingestion. Lifecycle is active -> acknowledged only.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, *, machine_id: str, rule_id: Optional[str], sensor_id: Optional[str], metric: str,
                     value: float, priority: str, message: str, created_at: datetime) -> Alert:
        alert = Alert(
            id=generate_id(IdPrefix.ALERT),
            machine_id=machine_id,
            rule_id=rule_id,
            sensor_id=sensor_id,
            metric=metric,
            value=value,
            status=AlertRuleConfig.ALERT_ACTIVE,
            priority=priority,
            message=message,
            created_at=created_at,
        )
        self.db.add(alert)
        # committed one by one, earlier alerts survive a later failure
        await self.db.commit()
        return alert

    async def acknowledge(self, alert_id: str) -> bool:
        """Unconditional transition to acknowledged. Returns False when no row matched."""
        result = await self.db.execute(
            update(Alert).where(Alert.id == alert_id).values(status=AlertRuleConfig.ALERT_ACKNOWLEDGED)
        )
        await self.db.commit()
        return result.rowcount > 0

    async def list(self, status: Optional[str] = None, machine_id: Optional[str] = None) -> List[Alert]:
        query = select(Alert)
        if status:
            query = query.where(Alert.status == status)
        if machine_id:
            query = query.where(Alert.machine_id == machine_id)
        result = await self.db.execute(query.order_by(Alert.created_at.desc()))
        return list(result.scalars().all())

    async def exists_within(self, *, rule_id: str, machine_id: str, sensor_id: str,
                            around: datetime, seconds: int) -> bool:
        """Whether the rule already alerted for this machine/sensor within `seconds` of `around`."""
        window = timedelta(seconds=seconds)
        query = (
            select(Alert.id)
            .where(
                Alert.rule_id == rule_id,
                Alert.machine_id == machine_id,
                Alert.sensor_id == sensor_id,
                Alert.created_at > around - window,
                Alert.created_at <= around,
            )
            .limit(1)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none() is not None
