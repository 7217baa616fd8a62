"""
FastAPI application for the bpmn-diff service.

Serves structural comparisons to an interactive diagram viewer.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bpmn_diff import __version__
from bpmn_diff.agent.config import ComparisonConfig
from bpmn_diff.api.comparison_routes import router as comparison_router
from bpmn_diff.core.observability import ObservabilityConfig, ObservabilityManager

# Create FastAPI app
app = FastAPI(
    title="bpmn-diff API",
    description="REST API for structural comparison of BPMN 2.0 diagrams",
    version=__version__,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(comparison_router)


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "bpmn-diff API",
        "version": __version__,
        "docs": "/docs",
        "redoc": "/redoc",
    }


@app.get("/health")
async def health():
    """Liveness check."""
    return {"status": "ok"}


def main() -> None:
    import uvicorn

    config = ComparisonConfig.from_env()
    ObservabilityManager.initialize(
        ObservabilityConfig(
            service_name="bpmn-diff-api",
            log_level=config.log_level,
            enable_tracing=config.enable_tracing,
        )
    )
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
