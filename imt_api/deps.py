"""
API Dependencies

Resolves server configuration and builds trees for requests.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from imt.config import RuntimeConfig, TreeConfig, load_config
from imt.schemas.canonical import decode_node
from imt_api.models.requests import TreeRequest

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_runtime_config() -> RuntimeConfig:
    """Load RuntimeConfig once: config file first, then environment variables."""
    config = load_config()
    logger.info(f"Serving with tree defaults: {config.tree}")
    return config


def tree_config_for(request: TreeRequest) -> TreeConfig:
    """Overlay request fields on the server's tree defaults."""
    base = get_runtime_config().tree
    return TreeConfig(
        kind=request.kind or base.kind,
        depth=request.depth if request.depth is not None else base.depth,
        arity=request.arity if request.arity is not None else base.arity,
        zero_value=(
            decode_node(request.zero_value) if request.zero_value is not None else base.zero_value
        ),
        hash=request.hash or base.hash,
    )


def leaves_for(request: TreeRequest) -> list:
    return [decode_node(leaf) for leaf in request.leaves]
