import logging
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query

from factory_telemetry.api.v1.deps import get_alert_store
from factory_telemetry.schemas.sensorSchemas import AlertSchema, OkResponse
from factory_telemetry.services.alert_store import AlertStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/alerts", response_model=List[AlertSchema])
async def list_alerts(
    status: Optional[Literal["active", "acknowledged"]] = Query(None, description="alert status"),
    machine_id: Optional[str] = Query(None, alias="machineId", description="machine id"),
    alerts: AlertStore = Depends(get_alert_store),
):
    return await alerts.list(status=status, machine_id=machine_id)


@router.post("/alerts/{alert_id}/ack", response_model=OkResponse)
async def acknowledge_alert(alert_id: str, alerts: AlertStore = Depends(get_alert_store)):
    matched = await alerts.acknowledge(alert_id)
    if not matched:
        logger.warning(f"Acknowledge requested for unknown alert {alert_id}")
    return OkResponse(ok=True)
