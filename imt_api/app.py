"""
FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn imt_api.app:app --reload

    # Or run directly
    python -m imt_api.app
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from imt import __version__
from imt.schemas.errors import IMTException
from imt_api.deps import get_runtime_config
from imt_api.errors import APIError, api_error_handler, generic_error_handler, imt_error_handler
from imt_api.routes import health, trees, verify


logging.basicConfig(
    level=getattr(logging, get_runtime_config().log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="IMT API",
        description="""
HTTP API for incremental Merkle trees.

## Endpoints

- **POST /trees/root** - Build a tree from leaves and return its root
- **POST /proofs** - Build a tree and return a membership proof
- **POST /verify** - Verify a membership proof without the tree
- **GET /health** - Health check

Integer node values are exchanged as decimal text.
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(IMTException, imt_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    app.include_router(health.router)
    app.include_router(trees.router)
    app.include_router(verify.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    config = get_runtime_config()
    uvicorn.run(app, host=config.api.host, port=config.api.port)
