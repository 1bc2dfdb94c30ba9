"""Shared fixtures: in-memory doubles of the telemetry stores, an API client wired to them and a SQLite-backed session."""

from __future__ import annotations

import asyncio
import itertools
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from factory_telemetry.api.v1 import deps
from factory_telemetry.core.alert_rule_config import AlertRuleConfig
from factory_telemetry.main import app
from factory_telemetry.models import Base
from factory_telemetry.services.ingestion_pipeline import IngestionPipeline
from factory_telemetry.services.uptime_calculator import as_utc

T0 = datetime(2025, 1, 6, 8, 0, tzinfo=timezone.utc)

_seq = itertools.count(1)


def _next_id(prefix: str) -> str:
    return f"{prefix}-{next(_seq)}"


def _created_at() -> datetime:
    # strictly increasing so "newest first" ordering is deterministic
    return T0 + timedelta(seconds=next(_seq))


class FakeSensorRegistry:
    def __init__(self):
        self.sensors: List[SimpleNamespace] = []

    async def register(self, sensor) -> str:
        sensor_id = sensor.id or _next_id("sensor")
        self.sensors = [s for s in self.sensors if s.id != sensor_id]
        self.sensors.append(SimpleNamespace(
            id=sensor_id, name=sensor.name, type=sensor.type, protocol=sensor.protocol,
            address=sensor.address, sensor_metadata=sensor.metadata or {}, created_at=_created_at(),
        ))
        return sensor_id

    async def list(self):
        return sorted(self.sensors, key=lambda s: s.created_at, reverse=True)


class FakeBindingTable:
    def __init__(self):
        self.bindings: List[SimpleNamespace] = []

    def add(self, sensor_id, machine_id, metric, scale=1.0, offset=0.0, unit=None) -> SimpleNamespace:
        binding = SimpleNamespace(
            id=_next_id("bind"), sensor_id=sensor_id, machine_id=machine_id, metric=metric,
            unit=unit, scale=scale, offset=offset, created_at=_created_at(),
        )
        self.bindings.append(binding)
        return binding

    async def bind(self, binding) -> str:
        binding_id = binding.id or _next_id("bind")
        self.bindings = [b for b in self.bindings if b.id != binding_id]
        self.bindings.append(SimpleNamespace(
            id=binding_id, sensor_id=binding.sensor_id, machine_id=binding.machine_id, metric=binding.metric,
            unit=binding.unit,
            scale=AlertRuleConfig.DEFAULT_SCALE if binding.scale is None else binding.scale,
            offset=AlertRuleConfig.DEFAULT_OFFSET if binding.offset is None else binding.offset,
            created_at=_created_at(),
        ))
        return binding_id

    async def find_by_sensor_metric(self, sensor_id, metric):
        return [b for b in self.bindings if b.sensor_id == sensor_id and b.metric == metric]

    async def list(self, machine_id=None):
        found = [b for b in self.bindings if machine_id is None or b.machine_id == machine_id]
        return sorted(found, key=lambda b: b.created_at, reverse=True)


class FakeRuleStore:
    def __init__(self):
        self.rules: List[SimpleNamespace] = []

    def add(self, machine_id, metric, operator, sensor_id=None, min_value=None, max_value=None,
            threshold_value=None, priority="medium", message="Sensor alert", enabled=True,
            cooldown_seconds=None) -> SimpleNamespace:
        rule = SimpleNamespace(
            id=_next_id("rule"), machine_id=machine_id, sensor_id=sensor_id, metric=metric, operator=operator,
            min_value=min_value, max_value=max_value, threshold_value=threshold_value, priority=priority,
            message=message, enabled=enabled, cooldown_seconds=cooldown_seconds, created_at=_created_at(),
        )
        self.rules.append(rule)
        return rule

    async def create(self, rule) -> str:
        rule_id = rule.id or _next_id("rule")
        self.rules = [r for r in self.rules if r.id != rule_id]
        self.rules.append(SimpleNamespace(
            id=rule_id, machine_id=rule.machine_id, sensor_id=rule.sensor_id, metric=rule.metric,
            operator=rule.operator, min_value=rule.min_value, max_value=rule.max_value,
            threshold_value=rule.threshold_value,
            priority=rule.priority or AlertRuleConfig.DEFAULT_PRIORITY,
            message=rule.message or AlertRuleConfig.DEFAULT_MESSAGE,
            enabled=True if rule.enabled is None else rule.enabled,
            cooldown_seconds=rule.cooldown_seconds, created_at=_created_at(),
        ))
        return rule_id

    async def find_active(self, machine_id, sensor_id, metric):
        return [
            r for r in self.rules
            if r.enabled and r.machine_id == machine_id and r.metric == metric
            and (r.sensor_id is None or r.sensor_id == sensor_id)
        ]

    async def list_enabled(self):
        return sorted((r for r in self.rules if r.enabled), key=lambda r: r.created_at, reverse=True)


class FakeAlertStore:
    def __init__(self):
        self.alerts: List[SimpleNamespace] = []

    async def create(self, *, machine_id, rule_id, sensor_id, metric, value, priority, message, created_at):
        alert = SimpleNamespace(
            id=_next_id("alert"), machine_id=machine_id, rule_id=rule_id, sensor_id=sensor_id, metric=metric,
            value=value, status=AlertRuleConfig.ALERT_ACTIVE, priority=priority, message=message,
            created_at=created_at, resolved_at=None,
        )
        self.alerts.append(alert)
        return alert

    async def acknowledge(self, alert_id) -> bool:
        matched = False
        for alert in self.alerts:
            if alert.id == alert_id:
                alert.status = AlertRuleConfig.ALERT_ACKNOWLEDGED
                matched = True
        return matched

    async def list(self, status=None, machine_id=None):
        found = [
            a for a in self.alerts
            if (status is None or a.status == status) and (machine_id is None or a.machine_id == machine_id)
        ]
        return sorted(found, key=lambda a: a.created_at, reverse=True)

    async def exists_within(self, *, rule_id, machine_id, sensor_id, around, seconds) -> bool:
        window = timedelta(seconds=seconds)
        return any(
            a.rule_id == rule_id and a.machine_id == machine_id and a.sensor_id == sensor_id
            and around - window < a.created_at <= around
            for a in self.alerts
        )


class FakeVisionEventLog:
    def __init__(self):
        self.events: List[SimpleNamespace] = []

    def add(self, created_at, status, machine_id="m-1", camera_id=None, roi_id=None, confidence=None):
        event = SimpleNamespace(
            id=_next_id("vis"), machine_id=machine_id, camera_id=camera_id, roi_id=roi_id, status=status,
            confidence=confidence, frame_time=created_at, created_at=created_at,
        )
        self.events.append(event)
        return event

    async def record(self, event):
        when = as_utc(event.created_at) if event.created_at else datetime.now(timezone.utc)
        row = SimpleNamespace(
            id=event.id or _next_id("vis"), machine_id=event.machine_id, camera_id=event.camera_id,
            roi_id=event.roi_id, status=event.status, confidence=event.confidence,
            frame_time=when, created_at=when,
        )
        self.events.append(row)
        return row

    def _scoped(self, scope, scope_id):
        key = {"roi": "roi_id", "machine": "machine_id", "camera": "camera_id"}[scope]
        return sorted((e for e in self.events if getattr(e, key) == scope_id), key=lambda e: e.created_at)

    async def latest(self, scope, scope_id) -> Optional[SimpleNamespace]:
        found = self._scoped(scope, scope_id)
        return found[-1] if found else None

    async def latest_before(self, scope, scope_id, moment):
        found = [e for e in self._scoped(scope, scope_id) if e.created_at < moment]
        return found[-1] if found else None

    async def between(self, scope, scope_id, start, end):
        return [e for e in self._scoped(scope, scope_id) if start <= e.created_at <= end]


@pytest.fixture
def stores() -> SimpleNamespace:
    return SimpleNamespace(
        sensors=FakeSensorRegistry(),
        bindings=FakeBindingTable(),
        rules=FakeRuleStore(),
        alerts=FakeAlertStore(),
        vision=FakeVisionEventLog(),
    )


@pytest.fixture
def pipeline(stores) -> IngestionPipeline:
    return IngestionPipeline(stores.bindings, stores.rules, stores.alerts)


@pytest.fixture
def client(stores):
    app.dependency_overrides[deps.get_sensor_registry] = lambda: stores.sensors
    app.dependency_overrides[deps.get_binding_table] = lambda: stores.bindings
    app.dependency_overrides[deps.get_rule_store] = lambda: stores.rules
    app.dependency_overrides[deps.get_alert_store] = lambda: stores.alerts
    app.dependency_overrides[deps.get_vision_event_log] = lambda: stores.vision
    app.dependency_overrides[deps.get_ingestion_pipeline] = (
        lambda: IngestionPipeline(stores.bindings, stores.rules, stores.alerts)
    )
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def unconfigured_client():
    # no lifespan run, so app.state carries no database handle
    app.dependency_overrides.clear()
    return TestClient(app)


@pytest.fixture
def run_in_db():
    """Run `fn(session)` against a fresh in-memory SQLite schema and return its result."""

    def _run(fn):
        async def _main():
            engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            session_factory = async_sessionmaker(engine, expire_on_commit=False)
            try:
                async with session_factory() as session:
                    return await fn(session)
            finally:
                await engine.dispose()

        return asyncio.run(_main())

    return _run
