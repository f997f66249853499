"""
Tree Routes

Build a tree from the request's leaves and return its root or a proof.
Nothing is kept between requests.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from imt.config import build_tree
from imt.merkle import LeanIMT
from imt.schemas.canonical import encode_node
from imt_api.deps import leaves_for, tree_config_for
from imt_api.models.requests import ProofRequest, TreeRequest
from imt_api.models.responses import ProofResponse, RootResponse


logger = logging.getLogger(__name__)

router = APIRouter(tags=["trees"])


@router.post("/trees/root", response_model=RootResponse)
def compute_root(request: TreeRequest) -> RootResponse:
    """
    Build a tree and return its root.

    Integer roots are returned as decimal text.
    """
    tree_config = tree_config_for(request)
    tree = build_tree(tree_config, leaves_for(request))
    logger.debug(f"Built {tree_config.kind} tree of size {tree.size}")

    root = tree.root
    return RootResponse(
        kind=tree_config.kind,
        root=None if root is None else str(encode_node(root)),
        depth=tree.depth,
        size=tree.size,
    )


@router.post("/proofs", response_model=ProofResponse)
def create_proof(request: ProofRequest) -> ProofResponse:
    """Build a tree and return the membership proof for ``index``."""
    tree_config = tree_config_for(request)
    tree = build_tree(tree_config, leaves_for(request))

    if isinstance(tree, LeanIMT):
        proof = tree.generate_proof(request.index)
    else:
        proof = tree.create_proof(request.index)

    return ProofResponse(kind=tree_config.kind, proof=proof.to_wire())
