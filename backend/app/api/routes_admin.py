from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends

from backend.app.api.schemas import (
    ApiResponse,
    GraphConfigData,
    ImportSummary,
    VersionHistory,
    VersionLookup,
)
from backend.app.dependencies import (
    Caller,
    get_graph_service,
    get_intervention_service,
    require_privileged,
)
from backend.app.services.graph_service import GraphService
from backend.app.services.intervention_service import InterventionService

router = APIRouter()


# ---------------------------------------------------------------------
# Graph
# ---------------------------------------------------------------------


@router.get("/graph/config", response_model=ApiResponse[GraphConfigData])
def developer_graph_config(
    caller: Caller = Depends(require_privileged),
    service: GraphService = Depends(get_graph_service),
):
    return ApiResponse(data=service.graph_config("full"))


@router.get("/graph/export", response_model=ApiResponse[Dict[str, Any]])
def developer_graph_export(
    caller: Caller = Depends(require_privileged),
    service: GraphService = Depends(get_graph_service),
):
    return ApiResponse(data=service.export())


@router.post("/graph/metrics", status_code=201, response_model=ApiResponse[Dict[str, Any]])
def add_metric(
    payload: Any = Body(default=None),
    caller: Caller = Depends(require_privileged),
    service: GraphService = Depends(get_graph_service),
):
    return ApiResponse(data=service.add_metric(payload, caller.user_id))


@router.delete("/graph/metrics/{metric_id}", response_model=ApiResponse[Dict[str, Any]])
def remove_metric(
    metric_id: str,
    caller: Caller = Depends(require_privileged),
    service: GraphService = Depends(get_graph_service),
):
    return ApiResponse(data=service.remove_metric(metric_id))


@router.post("/graph/edges", status_code=201, response_model=ApiResponse[Dict[str, Any]])
def add_edge(
    payload: Any = Body(default=None),
    caller: Caller = Depends(require_privileged),
    service: GraphService = Depends(get_graph_service),
):
    return ApiResponse(data=service.add_edge(payload, caller.user_id))


@router.delete("/graph/edges/{edge_id}", response_model=ApiResponse[Dict[str, Any]])
def remove_edge(
    edge_id: str,
    caller: Caller = Depends(require_privileged),
    service: GraphService = Depends(get_graph_service),
):
    return ApiResponse(data=service.remove_edge(edge_id))


@router.post("/graph/import", response_model=ApiResponse[ImportSummary])
def import_graph(
    payload: Any = Body(default=None),
    caller: Caller = Depends(require_privileged),
    service: GraphService = Depends(get_graph_service),
):
    return ApiResponse(data=service.import_graph(payload, caller.user_id))


# ---------------------------------------------------------------------
# Intervention versions
# ---------------------------------------------------------------------


@router.get("/interventions", response_model=ApiResponse[List[Dict[str, Any]]])
def list_versions(
    caller: Caller = Depends(require_privileged),
    service: InterventionService = Depends(get_intervention_service),
):
    return ApiResponse(data=service.all_versions())


@router.post("/interventions", status_code=201, response_model=ApiResponse[Dict[str, Any]])
def create_draft(
    payload: Any = Body(default=None),
    caller: Caller = Depends(require_privileged),
    service: InterventionService = Depends(get_intervention_service),
):
    return ApiResponse(data=service.create_draft(payload, caller.user_id))


@router.get("/interventions/{intervention_id}", response_model=ApiResponse[VersionHistory])
def version_history(
    intervention_id: str,
    caller: Caller = Depends(require_privileged),
    service: InterventionService = Depends(get_intervention_service),
):
    return ApiResponse(
        data=VersionHistory(
            intervention_id=intervention_id,
            versions=service.version_history(intervention_id),
        )
    )


@router.post(
    "/interventions/{intervention_id}/publish",
    response_model=ApiResponse[Dict[str, Any]],
)
def publish(
    intervention_id: str,
    caller: Caller = Depends(require_privileged),
    service: InterventionService = Depends(get_intervention_service),
):
    return ApiResponse(data=service.publish(intervention_id, caller.user_id))


@router.get(
    "/interventions/{intervention_id}/v/{version_number}",
    response_model=ApiResponse[VersionLookup],
)
@router.post(
    "/interventions/{intervention_id}/revert/{version_number}",
    response_model=ApiResponse[VersionLookup],
)
def get_version(
    intervention_id: str,
    version_number: int,
    caller: Caller = Depends(require_privileged),
    service: InterventionService = Depends(get_intervention_service),
):
    return ApiResponse(
        data=VersionLookup(
            intervention_id=intervention_id,
            version_number=version_number,
            version=service.get_version(intervention_id, version_number),
        )
    )


@router.put(
    "/interventions/{intervention_id}/v/{version_number}",
    response_model=ApiResponse[Dict[str, Any]],
)
def update_draft(
    intervention_id: str,
    version_number: int,
    payload: Any = Body(default=None),
    caller: Caller = Depends(require_privileged),
    service: InterventionService = Depends(get_intervention_service),
):
    return ApiResponse(data=service.update_draft(intervention_id, version_number, payload))


@router.delete(
    "/interventions/{intervention_id}/v/{version_number}",
    response_model=ApiResponse[Dict[str, Any]],
)
def delete_draft(
    intervention_id: str,
    version_number: int,
    caller: Caller = Depends(require_privileged),
    service: InterventionService = Depends(get_intervention_service),
):
    return ApiResponse(data=service.delete_draft(intervention_id, version_number))
