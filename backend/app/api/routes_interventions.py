from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends

from backend.app.api.schemas import ApiResponse, InterventionDetail, StackSimulation
from backend.app.dependencies import Caller, get_caller, get_intervention_service
from backend.app.services.intervention_service import InterventionService

router = APIRouter()


@router.get("", response_model=ApiResponse[List[Dict[str, Any]]])
def list_interventions(
    caller: Caller = Depends(get_caller),
    service: InterventionService = Depends(get_intervention_service),
):
    return ApiResponse(data=service.list_interventions())


@router.get("/{intervention_id}", response_model=ApiResponse[InterventionDetail])
def intervention_detail(
    intervention_id: str,
    caller: Caller = Depends(get_caller),
    service: InterventionService = Depends(get_intervention_service),
):
    return ApiResponse(data=service.intervention_detail(intervention_id, caller.user_id))


@router.post("/{intervention_id}/simulate", response_model=ApiResponse[StackSimulation])
def simulate(
    intervention_id: str,
    payload: Any = Body(default=None),
    caller: Caller = Depends(get_caller),
    service: InterventionService = Depends(get_intervention_service),
):
    return ApiResponse(data=service.simulate_with(intervention_id, caller.user_id, payload))
