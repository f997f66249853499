"""
IMT HTTP API

Stateless FastAPI service for computing roots and creating/verifying
membership proofs.

Usage:
    uvicorn imt_api.app:app --reload
"""
