# eventscale/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eventscale.core.config import APP_ENV, AUTO_CREATE_TABLES, CORS_ORIGINS, LOG_LEVEL
from eventscale.core.database import create_tables
from eventscale.core.errors import register_exception_handlers
import eventscale.models  # noqa: F401  (registers tables on Base.metadata)

#Import Routers
from eventscale.api.v1 import calendar
from eventscale.api.v1 import confirm
from eventscale.api.v1 import events
from eventscale.api.v1 import realtime

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("aiosqlite").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Event scale API starting up...")
    if AUTO_CREATE_TABLES:
        await create_tables()
        logger.info("Database tables ready")
    yield
    logger.info("Event scale API shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Event Scale API",
    description="Church events, checklists and service scales with public confirmation links",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)

#Include routers
app.include_router(events.router, prefix="/api", tags=["events"])
app.include_router(calendar.router, prefix="/api", tags=["calendar"])
app.include_router(confirm.router, prefix="/confirmar", tags=["public"])
app.include_router(realtime.router, tags=["realtime"])


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Event Scale API",
        "version": "1.0.0",
        "status": "running"
    }

@app.get("/health")
async def health():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "environment": APP_ENV
    }

if __name__ == "__main__":
    import uvicorn
    from eventscale.core.config import API_HOST, API_PORT
    uvicorn.run(
        "eventscale.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=True
    )
