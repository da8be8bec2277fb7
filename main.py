"""Main application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.error_handlers import register_error_handlers
from src.api.routes import router
from src.database.db import init_db
from src.utils.config import config
from src.utils.logger import StructuredLogger

logger = StructuredLogger("Main")

# Initialize database
init_db()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan events."""
    try:
        config.validate()
    except ValueError as e:
        logger.critical("Configuration error", exception=e)
        raise
    if config.quote_api.is_demo_key:
        logger.warning("ALPHA_VANTAGE_API_KEY not set, quotes use the demo key")
    yield


app = FastAPI(
    title="Stock Quote Viewer",
    description="Stock quotes, price history analytics and a watchlist",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(router, prefix="/api", tags=["quotes"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
