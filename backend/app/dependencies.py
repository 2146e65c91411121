from dataclasses import dataclass
from functools import lru_cache
import logging
import time
from typing import Optional

from fastapi import Depends, Header

from vitalgraph.errors import VitalgraphError
from vitalgraph.state import StateStore, create_state_store

from backend.app.config import AppConfig
from backend.app.services.graph_service import GraphService
from backend.app.services.intervention_service import InterventionService
from backend.app.services.metric_source import StateMetricSource


class UnauthorizedError(VitalgraphError):
    status_code = 401
    default_code = "unauthorized"


class ForbiddenError(VitalgraphError):
    status_code = 403
    default_code = "forbidden"


@dataclass(frozen=True)
class Caller:
    """
    Identity forwarded by the upstream auth layer.
    """

    user_id: str
    role: str


@lru_cache
def get_config() -> AppConfig:
    return AppConfig()


@lru_cache
def get_state_store() -> StateStore:
    logger = logging.getLogger("vitalgraph.startup")
    t0 = time.perf_counter()
    store = create_state_store(get_config().vitalgraph.store)
    logger.info(
        "[startup] %s state store ready in %.3fs",
        store.backend,
        time.perf_counter() - t0,
    )
    return store


@lru_cache
def get_metric_source() -> StateMetricSource:
    config = get_config()

    return StateMetricSource(
        get_state_store(),
        default_weight_unit=config.vitalgraph.simulation.default_weight_unit,
    )


@lru_cache
def get_graph_service() -> GraphService:
    config = get_config()

    return GraphService(
        store=get_state_store(),
        config=config.vitalgraph,
    )


@lru_cache
def get_intervention_service() -> InterventionService:
    config = get_config()

    return InterventionService(
        store=get_state_store(),
        metric_source=get_metric_source(),
        config=config.vitalgraph,
    )


def get_caller(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
) -> Caller:
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise UnauthorizedError("Authentication required")
    return Caller(user_id=user_id, role=(x_user_role or "user").strip().lower())


def require_privileged(
    caller: Caller = Depends(get_caller),
    config: AppConfig = Depends(get_config),
) -> Caller:
    if caller.role not in config.vitalgraph.admin_roles:
        raise ForbiddenError("Developer access required")
    return caller
