from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Load environment variables before config is read
load_dotenv()

from paintmatch import __version__
from paintmatch.api.v1 import router as v1_router
from paintmatch.config import config
from paintmatch.schemas import HealthResponse
from paintmatch.services.colors.catalog import load_catalog
from paintmatch.services.colors.quantization import KMeansQuantizer
from paintmatch.services.storage import InMemoryResultStore
from paintmatch.utils.logging import get_logger

logger = get_logger()


def create_app() -> FastAPI:
    """Build the API app with its catalog, quantizer and result store."""
    app = FastAPI(
        title="Paint Matcher API",
        description="Match wall photo colors to commercial paint catalogs",
        version=__version__
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins() or [],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    # Per-app collaborators; tests swap these out on app.state
    app.state.catalog = load_catalog()
    app.state.quantizer = KMeansQuantizer()
    app.state.store = InMemoryResultStore(max_size=config.STORE_MAX_SIZE, ttl=config.STORE_TTL)

    app.include_router(v1_router)

    @app.get("/healthz", response_model=HealthResponse)
    def health_check():
        """Health check endpoint."""
        return HealthResponse(ok=True, version=__version__, service="paintmatch")

    @app.get("/")
    def root():
        """Root endpoint"""
        return {
            "message": "Paint Matcher API",
            "version": __version__,
            "docs": "/docs"
        }

    logger.info("Paint Matcher API ready", extra={
        "vendors": len(app.state.catalog.vendors),
        "colours": len(app.state.catalog),
    })
    return app


app = create_app()
