from __future__ import annotations

from dataclasses import dataclass, asdict, replace
from typing import Any, Dict, Literal, Optional, Tuple
from uuid import uuid4

NodeTier = Literal["core", "supporting"]
NodeDomain = Literal[
    "cardiovascular",
    "respiratory",
    "nervous",
    "metabolic",
    "musculoskeletal",
    "recovery",
]
EdgeDirection = Literal["direct", "inverse"]
EdgeStrength = Literal["low", "moderate", "high"]
EdgeType = Literal["causal", "correlative"]

NODE_TIERS: Tuple[str, ...] = ("core", "supporting")
NODE_DOMAINS: Tuple[str, ...] = (
    "cardiovascular",
    "respiratory",
    "nervous",
    "metabolic",
    "musculoskeletal",
    "recovery",
)
EDGE_DIRECTIONS: Tuple[str, ...] = ("direct", "inverse")
EDGE_STRENGTHS: Tuple[str, ...] = ("low", "moderate", "high")
EDGE_TYPES: Tuple[str, ...] = ("causal", "correlative")


@dataclass(frozen=True)
class MetricNode:
    """
    Physiological metric in the causal graph.

    Core-tier nodes map 1:1 to tracked metrics; supporting-tier nodes
    are context only and never carry a logged value. ``x``/``y`` are
    layout hints and play no part in any computation.
    """

    id: str
    label: str
    tier: NodeTier
    domain: NodeDomain
    x: float
    y: float
    description: str

    created_by: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def is_core(self) -> bool:
        return self.tier == "core"

    def stamped(self, *, author_id: str, now: str) -> "MetricNode":
        return replace(self, created_by=author_id, created_at=now, updated_at=now)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_config(self) -> Dict[str, Any]:
        """Layout/config view without authorship stamps."""
        return {
            "id": self.id,
            "label": self.label,
            "x": self.x,
            "y": self.y,
            "tier": self.tier,
            "domain": self.domain,
            "description": self.description,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "MetricNode":
        return MetricNode(
            id=str(data["id"]),
            label=str(data["label"]),
            tier=data["tier"],
            domain=data["domain"],
            x=float(data.get("x", 0.0)),
            y=float(data.get("y", 0.0)),
            description=str(data.get("description", "")),
            created_by=data.get("created_by"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )


@dataclass(frozen=True)
class MetricEdge:
    """
    Directed relationship between two metrics.

    A relationship is exactly one edge; there is no implicit reverse.
    """

    id: str

    source: str
    target: str

    direction: EdgeDirection
    effect_strength: EdgeStrength
    type: EdgeType

    description: str

    created_by: Optional[str] = None
    created_at: Optional[str] = None

    @property
    def is_causal(self) -> bool:
        return self.type == "causal"

    def stamped(self, *, author_id: str, now: str) -> "MetricEdge":
        return replace(self, created_by=author_id, created_at=now)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_config(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "direction": self.direction,
            "effect_strength": self.effect_strength,
            "type": self.type,
            "description": self.description,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "MetricEdge":
        return MetricEdge(
            id=str(data["id"]),
            source=str(data["source"]),
            target=str(data["target"]),
            direction=data["direction"],
            effect_strength=data.get("effect_strength", data.get("effectStrength")),
            type=data["type"],
            description=str(data.get("description", "")),
            created_by=data.get("created_by"),
            created_at=data.get("created_at"),
        )

    @staticmethod
    def create(
        source: str,
        target: str,
        direction: EdgeDirection,
        effect_strength: EdgeStrength,
        type: EdgeType,
        description: str,
        id: Optional[str] = None,
    ) -> "MetricEdge":
        return MetricEdge(
            id=id or uuid4().hex,
            source=source,
            target=target,
            direction=direction,
            effect_strength=effect_strength,
            type=type,
            description=description,
        )
