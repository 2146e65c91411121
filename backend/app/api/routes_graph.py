from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query

from backend.app.api.schemas import (
    ApiResponse,
    GraphConfigData,
    ImpactsData,
    ReachableData,
)
from backend.app.dependencies import (
    Caller,
    get_caller,
    get_graph_service,
    get_intervention_service,
)
from backend.app.services.graph_service import GraphService
from backend.app.services.intervention_service import InterventionService

router = APIRouter()

DetailParam = Optional[Literal["core", "full"]]
DirectionParam = Literal["upstream", "downstream"]


@router.get("/config", response_model=ApiResponse[GraphConfigData])
def graph_config(
    detail: DetailParam = Query(default=None),
    interventions: List[str] = Query(default=[]),
    caller: Caller = Depends(get_caller),
    service: GraphService = Depends(get_graph_service),
    intervention_service: InterventionService = Depends(get_intervention_service),
):
    simulation = None
    if interventions:
        simulation = intervention_service.simulate(caller.user_id, interventions)
    return ApiResponse(data=service.graph_config(detail, simulation))


@router.get("/nodes/{node_id}/reachable", response_model=ApiResponse[ReachableData])
def reachable(
    node_id: str,
    direction: DirectionParam = Query(default="downstream"),
    detail: DetailParam = Query(default=None),
    caller: Caller = Depends(get_caller),
    service: GraphService = Depends(get_graph_service),
):
    return ApiResponse(
        data=ReachableData(
            node_id=node_id,
            direction=direction,
            reachable=service.reachable(node_id, direction, detail),
        )
    )


@router.get("/nodes/{node_id}/impacts", response_model=ApiResponse[ImpactsData])
def impacts(
    node_id: str,
    direction: DirectionParam = Query(default="downstream"),
    limit: Optional[int] = Query(default=None, ge=0),
    detail: DetailParam = Query(default=None),
    caller: Caller = Depends(get_caller),
    service: GraphService = Depends(get_graph_service),
):
    connections = service.impacts(node_id, direction, limit, detail)
    return ApiResponse(
        data=ImpactsData(
            node_id=node_id,
            direction=direction,
            impacts=[connection.to_dict() for connection in connections],
        )
    )
