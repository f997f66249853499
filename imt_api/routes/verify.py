"""
Verify Route

Verify a membership proof without any tree.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from imt.crypto.hashing import binary, get_hash_binding
from imt.merkle import (
    IMTMerkleProof,
    LeanIMTMerkleProof,
    verify_imt_proof,
    verify_lean_imt_proof,
)
from imt_api.deps import get_runtime_config
from imt_api.errors import InvalidRequestError
from imt_api.models.requests import VerifyRequest
from imt_api.models.responses import VerifyResponse


logger = logging.getLogger(__name__)

router = APIRouter(tags=["verification"])


@router.post("/verify", response_model=VerifyResponse)
def verify_proof(request: VerifyRequest) -> VerifyResponse:
    """
    Verify a proof in wire JSON form.

    The proof kind is detected from its fields when not given: fixed tree
    proofs carry ``pathIndices``.
    """
    if not request.proof:
        raise InvalidRequestError("Proof is empty")

    kind = request.kind
    if kind is None:
        kind = "fixed" if "pathIndices" in request.proof or "path_indices" in request.proof else "lean"

    binding = get_hash_binding(request.hash or get_runtime_config().tree.hash)

    if kind == "fixed":
        valid = verify_imt_proof(IMTMerkleProof.from_wire(request.proof), binding)
    else:
        valid = verify_lean_imt_proof(LeanIMTMerkleProof.from_wire(request.proof), binary(binding))

    logger.info(f"Verified {kind} proof: valid={valid}")
    return VerifyResponse(kind=kind, valid=valid)
