"""
Placement Eligibility Engine - Main Application

FastAPI backend with:
- PostgreSQL (SQLAlchemy) for profiles, jobs, requirements and applications
- JWT bearer authentication (tokens issued by the session layer)
- One shared eligibility evaluator for readiness, submission and counts

Run: uvicorn app.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes import api_router
from app.core.config import get_settings
from app.core.exceptions import PlacementError
from app.db.postgres import engine, test_postgres_connection
from app.db.schema import init_schema
from app.schemas.schemas import ErrorResponse

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Placement Eligibility Engine",
    description="""
    Tiered eligibility and application requirements for campus placements.

    ## Features
    - **Readiness**: pre-check a job against the student's current profile
    - **Missing fields**: form descriptors for data the student can still supply
    - **Apply**: transactional submission with an immutable profile snapshot
    - **Extended profile**: six secondary sections with completion tracking
    - **Requirements**: per-job specs, company templates, eligible counts
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.exception_handler(PlacementError)
async def placement_error_handler(request: Request, exc: PlacementError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    else:
        logger.info("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.detail)
    body = ErrorResponse(detail=exc.detail, errors=exc.errors)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


# Startup event
@app.on_event("startup")
async def startup_event():
    """Create missing tables when asked to (local development)."""
    if settings.auto_create_schema:
        init_schema(engine)
        logger.info("Database schema initialized")


@app.get("/health", tags=["Health"])
def health_check():
    """Detailed health check."""
    connected = test_postgres_connection()
    return {
        "status": "healthy" if connected else "degraded",
        "database": "connected" if connected else "disconnected"
    }
