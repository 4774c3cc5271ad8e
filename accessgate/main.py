"""
Main FastAPI application for the content access API.
Serves health, payments, subscriptions, access decisions, content metadata and metrics.
"""
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from accessgate.core.config import settings
from accessgate.core.logging import configure_logging
from accessgate.api.errors import register_error_handlers
from accessgate.api.routes import access, content, health, payments, subscriptions
from accessgate.utils.metrics import router as metrics_router


configure_logging()

app = FastAPI(
    title="Content Access API",
    description="Payment verification, subscriptions and access decisions for gated content",
    version="1.0.0",
)

# CORS
origins = settings.cors_origins_list
if not origins:
    origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Routers
app.include_router(health.router, tags=["health"])
app.include_router(payments.router)
app.include_router(subscriptions.router)
app.include_router(access.router)
app.include_router(content.router)
app.include_router(metrics_router)


def run() -> None:
    """Serve the API with uvicorn; host, port and workers come from settings."""
    uvicorn.run(
        "accessgate.main:app",
        host=settings.api_host,
        port=settings.api_port,
        workers=settings.uvicorn_workers,
        log_config=None,
    )


if __name__ == "__main__":
    run()
