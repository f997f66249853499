"""
API Request Models

Pydantic models for API request validation.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field


# Per-request limits on the size of a tree built by the service
MAX_TREE_DEPTH = 64
MAX_TREE_ARITY = 16
MAX_LEAVES = 1 << 16


class TreeRequest(BaseModel):
    """Request body describing a tree to build."""

    kind: Literal["lean", "fixed"] | None = Field(
        default=None,
        description="Tree kind (default: from server config)",
    )
    leaves: list[int | str] = Field(
        default_factory=list,
        max_length=MAX_LEAVES,
        description="Leaf values; decimal text is read as an integer",
    )
    depth: int | None = Field(
        default=None, ge=0, le=MAX_TREE_DEPTH, description="Fixed tree depth"
    )
    arity: int | None = Field(
        default=None, ge=2, le=MAX_TREE_ARITY, description="Fixed tree arity"
    )
    zero_value: int | str | None = Field(default=None, description="Fixed tree zero value")
    hash: str | None = Field(
        default=None,
        description="Hash binding: sha256, sha3_256 or blake2s (default: from server config)",
    )


class ProofRequest(TreeRequest):
    """Request body for POST /proofs."""

    index: int = Field(..., description="Leaf index to prove")


class VerifyRequest(BaseModel):
    """Request body for POST /verify."""

    kind: Literal["lean", "fixed"] | None = Field(
        default=None,
        description="Proof kind (default: detected from the proof fields)",
    )
    hash: str | None = Field(default=None, description="Hash binding the tree was built with")
    proof: dict[str, Any] = Field(..., description="Proof in wire JSON form")
