from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .config_provider import config_provider
from .database import engine, Base
from .routers import quote, saved_quotes

logger = logging.getLogger("blindquote")

# Create tables (handles new tables but won't add columns to existing ones)
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title=settings.COMPANY_NAME,
    description="Roller blind quoting tool",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(quote.router, prefix="/api")
app.include_router(saved_quotes.router, prefix="/api")


@app.get("/health")
def health():
    return {
        "status": "ok",
        "app": "blindquote",
        "reference_data_loaded": config_provider.is_initialized,
    }


@app.on_event("startup")
def load_reference_data():
    """Load price matrices and business rules; pricing degrades softly if this fails."""
    if config_provider.is_initialized:
        return
    if not config_provider.initialize(settings.REFERENCE_DATA_PATH):
        logger.warning(f"Reference data not loaded: {config_provider.load_error}")
