import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from recruitflow.core.config import settings
from recruitflow.core.database import init_db
from recruitflow.core.logging_config import setup_logging
from recruitflow.api.router import api_router

setup_logging(settings.LOG_LEVEL, settings.JSON_LOGS)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    logger.info("Starting up RecruitFlow API...")
    init_db()
    logger.info("Models registered; schema is managed by Alembic")

    yield

    logger.info("Shutting down RecruitFlow API...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Recruitment workflow API: requisitions, CV intake, interviews and onboarding",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    return {
        "message": "RecruitFlow API",
        "version": "1.0.0",
        "status": "healthy"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
