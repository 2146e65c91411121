from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from contextlib import asynccontextmanager

from backend.app.main import create_app
from backend.app.config import AppConfig
from backend.app.dependencies import get_graph_service, get_intervention_service
from backend.app.services.graph_service import GraphService
from backend.app.services.intervention_service import InterventionService
from backend.app.services.metric_source import StateMetricSource

from vitalgraph.config.settings import VitalgraphConfig
from vitalgraph.state.json_store import JsonFileStateStore
from vitalgraph.state.mutation_queue import MutationQueue
from vitalgraph.state.sql_store import SqlStateStore


@pytest.fixture()
def queue() -> MutationQueue:
    return MutationQueue()


@pytest.fixture()
def json_store(tmp_path, queue: MutationQueue) -> JsonFileStateStore:
    return JsonFileStateStore(tmp_path / "health-db.json", queue=queue)


@pytest.fixture()
def sql_store(tmp_path, queue: MutationQueue):
    store = SqlStateStore.from_url(f"sqlite:///{tmp_path / 'state.db'}", queue=queue)
    yield store
    store.close()


@pytest.fixture()
def vitalgraph_config() -> VitalgraphConfig:
    return VitalgraphConfig()


@pytest.fixture()
def graph_service(json_store, vitalgraph_config) -> GraphService:
    return GraphService(store=json_store, config=vitalgraph_config)


@pytest.fixture()
def intervention_service(json_store, vitalgraph_config) -> InterventionService:
    return InterventionService(
        store=json_store,
        metric_source=StateMetricSource(json_store),
        config=vitalgraph_config,
    )


@pytest.fixture()
def client(graph_service: GraphService, intervention_service: InterventionService):
    @asynccontextmanager
    async def _no_lifespan(_: FastAPI):
        yield

    app = create_app(AppConfig())
    app.router.lifespan_context = _no_lifespan

    app.dependency_overrides[get_graph_service] = lambda: graph_service
    app.dependency_overrides[get_intervention_service] = lambda: intervention_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def log_metrics(json_store):
    """Append metric records for ``user_id`` to the state document."""

    def _log(user_id: str, *readings) -> None:
        records = [
            {
                "user_id": user_id,
                "metric_name": metric_name,
                "value": value,
                "unit": unit,
                "recorded_at": recorded_at,
            }
            for metric_name, value, unit, recorded_at in readings
        ]
        json_store.mutate(lambda doc: doc["metrics"].extend(records))

    return _log
