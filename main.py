from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from app.config.catalogs import get_catalog_registry
from app.config.settings import settings
from app.api.triage import router as triage_router
from app.services.session_service import get_session_service
import logging

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    # Startup
    logger.info("Starting Symptom Triage Service...")
    logger.info(f"Environment: {settings.environment}")

    try:
        registry = get_catalog_registry()
        logger.info(f"Catalogs loaded: {', '.join(registry.ids())}")
    except Exception as e:
        logger.error(f"Failed to load triage catalogs: {e}")
        raise

    yield

    # Shutdown
    logger.info("Shutting down Symptom Triage Service...")
    get_session_service().clear()


# Initialize FastAPI app
app = FastAPI(
    title="Symptom Triage",
    description="Guided pet symptom questionnaire that scores observations and maps them to a risk tier.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(triage_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    registry = get_catalog_registry()
    return {
        "status": "ok",
        "service": settings.service_name,
        "version": "1.0.0",
        "catalogs": registry.ids(),
        "active_sessions": len(get_session_service().list_session_ids()),
    }


@app.get("/")
async def root():
    return {
        "message": "Symptom Triage Service",
        "description": "Guided symptom questionnaire with risk classification",
        "version": "1.0.0",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.triage_port,
        reload=settings.environment == "development",
    )
