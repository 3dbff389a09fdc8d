"""
Masters Marketplace API entry point.

Run locally: python main.py (or uvicorn main:app --reload).
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from app.core.config import settings
from app.core.database import Base, engine
from app.core.exceptions import register_exception_handlers
from app.core.middleware import SessionMiddleware
from app.router.endpoints import api_router
from app.session import init_redis
import logging
import redis
import uvicorn

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def _connect_redis() -> None:
    try:
        init_redis(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            db=settings.REDIS_DB,
            session_ttl=settings.SESSION_TTL,
        )
    except redis.RedisError as e:
        # Sessions and rate limits are unavailable until Redis comes back.
        logger.error("Redis initialization failed: %s", e)


def _prepare_database() -> None:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Database connection failed: %s", e)
        return
    logger.info("Database connection OK")

    if settings.DEBUG:
        # Production schema comes from Alembic.
        from app import model  # noqa: F401
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created (DEBUG mode)")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting %s...", settings.PROJECT_NAME)
    _connect_redis()
    _prepare_database()
    yield
    logger.info("Shutting down...")
    engine.dispose()


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    lifespan=lifespan,
)

register_exception_handlers(app)
app.add_middleware(SessionMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(api_router)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/")
async def root():
    return {"message": f"Welcome to the {settings.PROJECT_NAME}!", "docs": "/docs"}


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
