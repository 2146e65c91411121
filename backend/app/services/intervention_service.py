from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from vitalgraph.config.settings import VitalgraphConfig
from vitalgraph.errors import NotFoundError
from vitalgraph.interventions import versions
from vitalgraph.interventions.catalog import InterventionCatalog
from vitalgraph.interventions.conflicts import (
    ContraindicationDetector,
    KeywordContraindicationDetector,
)
from vitalgraph.interventions.simulator import SimulationResult, simulate_stack
from vitalgraph.interventions.suggestions import build_suggestions
from vitalgraph.state.base import StateStore
from vitalgraph.validation import parse_intervention_version, parse_simulate

from backend.app.services.metric_source import MetricSource
from backend.app.services.retry import mutate_with_retry

logger = logging.getLogger("vitalgraph.interventions")


class InterventionService:
    """
    Catalog lookups, stack simulation, suggestions and the editorial
    version workflow.
    """

    def __init__(
        self,
        *,
        store: StateStore,
        metric_source: MetricSource,
        config: VitalgraphConfig,
        detector: Optional[ContraindicationDetector] = None,
    ) -> None:
        self.store = store
        self.metric_source = metric_source
        self.config = config
        self.detector = detector or KeywordContraindicationDetector()

    # ------------------------------------------------------------------
    # Catalog & simulation
    # ------------------------------------------------------------------

    def catalog(self) -> InterventionCatalog:
        return InterventionCatalog.from_state(self.store.read()["intervention_versions"])

    def list_interventions(self) -> List[Dict[str, Any]]:
        return [item.to_dict() for item in self.catalog().list()]

    def simulate(self, user_id: str, selected_ids: Sequence[str]) -> SimulationResult:
        return simulate_stack(
            self.metric_source.latest(user_id),
            list(selected_ids),
            self.metric_source.weight_unit(user_id),
            catalog=self.catalog(),
            detector=self.detector,
            epsilon=self.config.simulation.unchanged_epsilon,
        )

    def intervention_detail(self, intervention_id: str, user_id: str) -> Dict[str, Any]:
        intervention = self.catalog().require(intervention_id)
        return {
            "intervention": intervention.to_dict(),
            "simulation": self.simulate(user_id, [intervention_id]).to_dict(),
        }

    def simulate_with(self, intervention_id: str, user_id: str, payload: Any) -> Dict[str, Any]:
        """
        Simulate ``intervention_id`` stacked with the caller's selection.

        The target goes first; later duplicates of any id are dropped.
        """
        self.catalog().require(intervention_id)
        stack = list(dict.fromkeys([intervention_id, *parse_simulate(payload)]))
        return {
            "intervention_id": intervention_id,
            "selected_interventions": stack,
            "simulation": self.simulate(user_id, stack).to_dict(),
        }

    def suggestions(self, user_id: str) -> Dict[str, Any]:
        latest = self.metric_source.latest(user_id)
        return {
            "latest": [reading.to_dict() for reading in latest],
            "suggestions": [rule.to_dict() for rule in build_suggestions(latest)],
        }

    # ------------------------------------------------------------------
    # Versions
    # ------------------------------------------------------------------

    def _mutate(self, fn):
        return mutate_with_retry(
            self.store,
            fn,
            attempts=self.config.store.retry_attempts,
        )

    def seed(self) -> bool:
        return self._mutate(versions.seed_versions)

    def _mutate_versions(self, fn):
        # Built-ins are recorded as v1 before the first editorial change.
        def _apply(doc):
            versions.seed_versions(doc)
            return fn(doc)

        return self._mutate(_apply)

    def _read_versions(self) -> Dict[str, Any]:
        doc = self.store.read()
        versions.seed_versions(doc)
        return doc

    def version_history(self, intervention_id: str) -> List[Dict[str, Any]]:
        history = versions.list_versions(self._read_versions(), intervention_id)
        if not history:
            raise NotFoundError(
                f"Intervention not found: {intervention_id}",
                "intervention_not_found",
            )
        return [version.to_dict() for version in history]

    def all_versions(self) -> List[Dict[str, Any]]:
        """Every version, grouped by intervention id, newest first."""
        doc = self._read_versions()
        ids = sorted({raw["intervention_id"] for raw in doc["intervention_versions"]})
        return [
            version.to_dict()
            for intervention_id in ids
            for version in versions.list_versions(doc, intervention_id)
        ]

    def get_version(self, intervention_id: str, version_number: int) -> Dict[str, Any]:
        version = versions.find_version(self._read_versions(), intervention_id, version_number)
        if version is None:
            raise NotFoundError("Intervention version not found", "intervention_version_not_found")
        return version.to_dict()

    def create_draft(self, payload: Any, author_id: str) -> Dict[str, Any]:
        draft = parse_intervention_version(payload)
        created = self._mutate_versions(
            lambda doc: versions.create_draft_version(doc, draft, author_id)
        )
        return created.to_dict()

    def update_draft(
        self,
        intervention_id: str,
        version_number: int,
        payload: Any,
    ) -> Dict[str, Any]:
        draft = parse_intervention_version(payload)
        updated = self._mutate_versions(
            lambda doc: versions.update_draft_version(doc, intervention_id, version_number, draft)
        )
        return updated.to_dict()

    def delete_draft(self, intervention_id: str, version_number: int) -> Dict[str, Any]:
        removed = self._mutate_versions(
            lambda doc: versions.delete_draft_version(doc, intervention_id, version_number)
        )
        return removed.to_dict()

    def publish(self, intervention_id: str, author_id: str) -> Dict[str, Any]:
        published = self._mutate_versions(
            lambda doc: versions.publish_latest_draft(doc, intervention_id, author_id)
        )
        logger.info("[versions] catalog now serves %s v%d", intervention_id, published.version_number)
        return published.to_dict()
