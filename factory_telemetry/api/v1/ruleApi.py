from typing import List

from fastapi import APIRouter, Depends

from factory_telemetry.api.v1.deps import get_rule_store
from factory_telemetry.schemas.sensorSchemas import IdResponse, RuleCreate, RuleSchema
from factory_telemetry.services.sensor_store import RuleStore

router = APIRouter()


@router.get("/rules", response_model=List[RuleSchema])
async def list_rules(rules: RuleStore = Depends(get_rule_store)):
    return await rules.list_enabled()


@router.post("/rules", response_model=IdResponse)
async def save_rule(rule: RuleCreate, rules: RuleStore = Depends(get_rule_store)):
    """Create or overwrite a rule. Send enabled=false to switch it off."""
    rule_id = await rules.create(rule)
    return IdResponse(id=rule_id)
