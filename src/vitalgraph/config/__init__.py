"""
Configuration layer for vitalgraph.

Configuration is passed explicitly as frozen dataclasses; nothing in the
library reads the environment. The backend populates these from
dynaconf at startup.
"""

from vitalgraph.config.settings import (
    GraphConfig,
    SimulationConfig,
    StoreConfig,
    VitalgraphConfig,
)

__all__ = [
    "GraphConfig",
    "SimulationConfig",
    "StoreConfig",
    "VitalgraphConfig",
]
