from dataclasses import dataclass, field
from dynaconf import Dynaconf
from backend.app.constants import DEFAULTS

from vitalgraph.config.settings import (
    GraphConfig,
    SimulationConfig,
    StoreConfig,
    VitalgraphConfig,
)

settings = Dynaconf(
    envvar_prefix="VITALGRAPH",
    load_dotenv=True,
    settings_files=[],
)


def _setting(key: str):
    # Environment (VITALGRAPH_<KEY>) wins over the packaged defaults.
    return settings.get(key, DEFAULTS[key])


def _parse_csv(value):
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    if isinstance(value, str):
        return [v.strip() for v in value.split(",") if v.strip()]
    return None


def _build_vitalgraph_config() -> VitalgraphConfig:
    return VitalgraphConfig(
        graph=GraphConfig(
            impact_limit=int(_setting("GRAPH_IMPACT_LIMIT")),
            default_detail_mode=_setting("GRAPH_DEFAULT_DETAIL_MODE"),
        ),
        simulation=SimulationConfig(
            unchanged_epsilon=float(_setting("SIMULATION_UNCHANGED_EPSILON")),
            default_weight_unit=_setting("SIMULATION_DEFAULT_WEIGHT_UNIT"),
        ),
        store=StoreConfig(
            data_path=str(_setting("STORE_DATA_PATH")),
            database_url=str(_setting("STORE_DATABASE_URL") or ""),
            state_key=str(_setting("STORE_STATE_KEY")),
            retry_attempts=int(_setting("STORE_RETRY_ATTEMPTS")),
        ),
        admin_roles=tuple(_parse_csv(_setting("ADMIN_ROLES")) or ("admin",)),
    )


@dataclass(frozen=True)
class AppConfig:
    # ---------------- App ----------------
    app_name: str = _setting("APP_NAME")
    api_prefix: str = _setting("API_PREFIX")

    # ---------------- Vitalgraph Policy ----------------
    vitalgraph: VitalgraphConfig = field(default_factory=_build_vitalgraph_config)
