import json
import logging
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.app.config import AppConfig  # noqa: E402
from backend.app.dependencies import (  # noqa: E402
    get_graph_service,
    get_intervention_service,
)


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logger = logging.getLogger("vitalgraph.run")
    start = time.perf_counter()
    config = AppConfig()

    graph = get_graph_service()
    interventions = get_intervention_service()
    interventions.seed()

    user_id = sys.argv[1] if len(sys.argv) > 1 else "demo"
    selected = sys.argv[2:] or ["weight_training_5x5", "cardio_moderate_3x"]

    graph_config = graph.graph_config(config.vitalgraph.graph.default_detail_mode)
    logger.info(
        "[graph] %d nodes, %d edges (%s view)",
        len(graph_config["nodes"]),
        len(graph_config["edges"]),
        graph_config["detail_mode"],
    )

    for connection in graph.impacts("sleep", "downstream"):
        logger.info(
            "[graph] sleep -> %s score=%.2f",
            connection.node.id,
            connection.score,
        )

    result = interventions.simulate(user_id, selected)
    logger.info("[simulate] %s", json.dumps(result.to_dict(), indent=2))
    if result.warnings:
        logger.warning("[simulate] %d contraindication warning(s)", len(result.warnings))

    logger.info("[run] done in %.2fs", time.perf_counter() - start)


if __name__ == "__main__":
    main()
