from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from dotenv import load_dotenv
from pathlib import Path
import logging

# Load environment variables early
_env_path = Path(__file__).resolve().parents[2] / ".env"
load_dotenv(_env_path)

from .config import get_settings
from .database import Database
from .errors import ServiceError
from .observability import (
    setup_logging,
    init_sentry,
    setup_metrics_middleware,
    metrics_endpoint,
    get_health_check,
)
from .routes import accounts as accounts_routes
from .routes import complaints as complaints_routes
from .routes import events as events_routes
from .routes import feedback as feedback_routes

# Setup observability
setup_logging()
init_sentry()

# Application logger
logger = logging.getLogger("campus_api")

settings = get_settings()

app = FastAPI(title="Campus Complaint API")

# Setup metrics middleware
setup_metrics_middleware(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.allowed_origins) or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(accounts_routes.router)
app.include_router(complaints_routes.router)
app.include_router(events_routes.router)
app.include_router(feedback_routes.router)

# Tests install their own Database before the app starts.
app.state.database = None


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.on_event("startup")
async def startup_event():
    """Open the database connection."""
    logger.info("Starting up campus complaint system...")
    if app.state.database is None:
        app.state.database = Database(settings.database_url)
    await app.state.database.connect()


@app.on_event("shutdown")
async def shutdown_event():
    """Release the database connection."""
    logger.info("Shutting down campus complaint system...")
    if app.state.database is not None:
        await app.state.database.disconnect()


@app.get("/health")
def health():
    """Health check endpoint."""
    database = app.state.database
    return get_health_check(database.dialect if database is not None else "")


@app.get("/metrics")
def metrics() -> Response:
    """Prometheus metrics endpoint."""
    return metrics_endpoint()


def run() -> None:
    import uvicorn

    uvicorn.run("campus_api.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
