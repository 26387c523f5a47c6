"""FastAPI application."""

from fastapi import FastAPI

from backend.app.api.routes.docs import router as docs_router
from backend.app.api.routes.flex import router as flex_router
from backend.app.api.routes.health import router as health_router
from backend.app.api.routes.images import router as images_router
from backend.app.api.routes.metrics import router as metrics_router
from backend.app.api.routes.shares import router as shares_router
from backend.app.config import get_settings
from backend.app.utils.logging import configure_logging

configure_logging(get_settings().log_level)

app = FastAPI(title="Flex Studio API", version="0.1.0")

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(flex_router, tags=["flex"])
app.include_router(docs_router, tags=["docs"])
app.include_router(images_router, tags=["images"])
app.include_router(shares_router, tags=["share"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Flex Studio API", "version": "0.1.0"}
