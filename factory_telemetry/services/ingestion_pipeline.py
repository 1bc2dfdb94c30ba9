import logging
from datetime import datetime, timezone

from factory_telemetry.schemas.sensorSchemas import SensorReading
from factory_telemetry.services.rule_evaluator import calibrate, is_violated
from factory_telemetry.services.uptime_calculator import as_utc

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """
    Turns one raw reading into alerts.

    bindings -> calibrated value per machine -> applicable rules -> one alert per violation.
    Calls are awaited one after another; alerts are created in binding order, then rule order.
    Repeated violating readings create repeated alerts unless the rule sets cooldown_seconds.
    """

    def __init__(self, bindings, rules, alerts):
        self.bindings = bindings
        self.rules = rules
        self.alerts = alerts

    async def ingest(self, reading: SensorReading) -> int:
        """
        Process one reading.

        Args:
            reading: sensor id, metric, raw value and optional timestamp

        Returns:
            number of alerts created across all bindings and rules
        """
        binds = await self.bindings.find_by_sensor_metric(reading.sensor_id, reading.metric)
        if not binds:
            # not wired up yet, not a fault
            logger.debug(f"No binding for {reading.sensor_id}/{reading.metric}, reading ignored")
            return 0

        created_at = as_utc(reading.timestamp) if reading.timestamp else datetime.now(timezone.utc)
        created = 0
        for binding in binds:
            adjusted = calibrate(reading.value, binding.scale, binding.offset)
            rules = await self.rules.find_active(binding.machine_id, reading.sensor_id, reading.metric)

            for rule in rules:
                if not is_violated(rule, adjusted):
                    continue
                if rule.cooldown_seconds and await self.alerts.exists_within(
                    rule_id=rule.id,
                    machine_id=binding.machine_id,
                    sensor_id=reading.sensor_id,
                    around=created_at,
                    seconds=rule.cooldown_seconds,
                ):
                    logger.debug(f"Rule {rule.id} in cooldown for machine {binding.machine_id}, alert skipped")
                    continue

                alert = await self.alerts.create(
                    machine_id=binding.machine_id,
                    rule_id=rule.id,
                    sensor_id=reading.sensor_id,
                    metric=reading.metric,
                    value=adjusted,
                    priority=rule.priority,
                    message=rule.message,
                    created_at=created_at,
                )
                created += 1
                logger.info(
                    f"Alert {alert.id} [{rule.priority}] machine={binding.machine_id} "
                    f"{reading.metric}={adjusted} rule={rule.id} ({rule.operator})",
                    extra={"context": f"sensor={reading.sensor_id} raw={reading.value}"},
                )

        return created
