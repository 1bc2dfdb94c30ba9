from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from factory_telemetry.api.v1.deps import get_binding_table, get_ingestion_pipeline, get_sensor_registry
from factory_telemetry.schemas.sensorSchemas import (
    BindingCreate,
    BindingSchema,
    IdResponse,
    IngestResult,
    SensorCreate,
    SensorReading,
    SensorSchema,
)
from factory_telemetry.services.ingestion_pipeline import IngestionPipeline
from factory_telemetry.services.sensor_store import BindingTable, SensorRegistry

router = APIRouter()


@router.get("/sensors", response_model=List[SensorSchema])
async def list_sensors(registry: SensorRegistry = Depends(get_sensor_registry)):
    return await registry.list()


@router.post("/sensors", response_model=IdResponse)
async def register_sensor(sensor: SensorCreate, registry: SensorRegistry = Depends(get_sensor_registry)):
    sensor_id = await registry.register(sensor)
    return IdResponse(id=sensor_id)


# fixed paths before anything parameterised
@router.post("/sensors/bind", response_model=IdResponse)
async def bind_sensor(binding: BindingCreate, bindings: BindingTable = Depends(get_binding_table)):
    binding_id = await bindings.bind(binding)
    return IdResponse(id=binding_id)


@router.get("/sensors/bindings", response_model=List[BindingSchema])
async def list_bindings(
    machine_id: Optional[str] = Query(None, alias="machineId", description="only bindings of this machine"),
    bindings: BindingTable = Depends(get_binding_table),
):
    return await bindings.list(machine_id)


@router.post("/sensors/ingest", response_model=IngestResult)
async def ingest_reading(reading: SensorReading, pipeline: IngestionPipeline = Depends(get_ingestion_pipeline)):
    """
    Readings from OPC-UA / MQTT / HTTP gateways.
    An unbound sensor/metric is accepted and creates no alerts.
    """
    created = await pipeline.ingest(reading)
    return IngestResult(ok=True, alerts_created=created)
