from typing import Any, Dict, Generic, List, Literal, Optional, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    ok: bool = True
    data: T


class ApiError(BaseModel):
    code: str
    message: str


class ApiErrorResponse(BaseModel):
    ok: bool = False
    error: ApiError


class GraphNode(BaseModel):
    id: str
    label: str
    x: float
    y: float
    tier: Literal["core", "supporting"]
    domain: str
    description: str
    status: Optional[Literal["improved", "worsened", "unchanged"]] = None


class GraphEdge(BaseModel):
    id: str
    source: str
    target: str
    direction: Literal["direct", "inverse"]
    effect_strength: Literal["low", "moderate", "high"]
    type: Literal["causal", "correlative"]
    description: str


class GraphConfigData(BaseModel):
    detail_mode: Literal["core", "full"]
    nodes: List[GraphNode]
    edges: List[GraphEdge]


class ReachableData(BaseModel):
    node_id: str
    direction: Literal["upstream", "downstream"]
    reachable: List[str]


class ImpactItem(BaseModel):
    edge: GraphEdge
    node: GraphNode
    score: float


class ImpactsData(BaseModel):
    node_id: str
    direction: Literal["upstream", "downstream"]
    impacts: List[ImpactItem]


class ImportSummary(BaseModel):
    mode: Literal["append", "replace_custom"]
    created_metrics: int
    created_edges: int


class MetricProjection(BaseModel):
    metric_name: str
    metric_label: str
    current: float
    predicted: float
    delta: float
    confidence: Literal["low", "moderate", "high"]
    direction: Literal["improved", "worsened", "unchanged"]


class SimulationData(BaseModel):
    current: Dict[str, float]
    predicted: Dict[str, float]
    table: List[MetricProjection]
    warnings: List[str]
    interventions: List[Dict[str, Any]]


class InterventionDetail(BaseModel):
    intervention: Dict[str, Any]
    simulation: SimulationData


class StackSimulation(BaseModel):
    intervention_id: str
    selected_interventions: List[str]
    simulation: SimulationData


class VersionHistory(BaseModel):
    intervention_id: str
    versions: List[Dict[str, Any]]


class VersionLookup(BaseModel):
    intervention_id: str
    version_number: int
    version: Dict[str, Any]


class SuggestionsData(BaseModel):
    latest: List[Dict[str, Any]]
    suggestions: List[Dict[str, Any]]
