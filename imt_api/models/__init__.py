"""API request and response models."""

from imt_api.models.requests import ProofRequest, TreeRequest, VerifyRequest
from imt_api.models.responses import (
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    ProofResponse,
    RootResponse,
    VerifyResponse,
)

__all__ = [
    "TreeRequest",
    "ProofRequest",
    "VerifyRequest",
    "HealthResponse",
    "RootResponse",
    "ProofResponse",
    "VerifyResponse",
    "ErrorDetail",
    "ErrorResponse",
]
