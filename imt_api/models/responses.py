"""
API Response Models

Pydantic models for API response serialization.
"""

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "imt-api"
    version: str = "v1"


class RootResponse(BaseModel):
    """Response for POST /trees/root."""

    ok: bool = True
    kind: str = Field(..., description="Tree kind that was built")
    root: str | None = Field(..., description="Root as wire text (None for an empty lean tree)")
    depth: int
    size: int


class ProofResponse(BaseModel):
    """Response for POST /proofs."""

    ok: bool = True
    kind: str
    proof: dict[str, Any] = Field(..., description="Proof in wire JSON form")


class VerifyResponse(BaseModel):
    """Response for POST /verify."""

    ok: bool = True
    kind: str
    valid: bool = Field(..., description="Whether the proof recomputes its root")


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail
