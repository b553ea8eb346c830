"""Practice scheduler API entry point.

    uvicorn main:app --reload        (from backend/)
    python main.py
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import practice
from core.config import settings
from core.errors import register_error_handlers
from core.logging import SERVICE_VERSION, configure_logging, get_logger
from core.middleware import RequestLoggingMiddleware, SlowRequestMiddleware

configure_logging(level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
log = get_logger("practice.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info(
        "startup",
        session_size=settings.PRACTICE_SESSION_SIZE,
        pool_factor=settings.CANDIDATE_POOL_FACTOR,
        scoring=practice.get_scoring_config().to_dict(),
    )
    yield
    log.info("shutdown")


app = FastAPI(
    title="Practice Scheduler API",
    description="Picks the words a learner should drill next and builds a varied exercise session from them.",
    version=SERVICE_VERSION,
    lifespan=lifespan,
)
register_error_handlers(app)

# Starlette runs the last-added middleware first
app.add_middleware(SlowRequestMiddleware, slow_threshold_ms=250)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
    expose_headers=["X-Correlation-ID"],
)

app.include_router(practice.router, prefix="/api/practice", tags=["practice"])


@app.get("/health")
async def health():
    return {"status": "healthy", "service": "practice-scheduler", "version": SERVICE_VERSION}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.BACKEND_HOST,
        port=settings.BACKEND_PORT,
        reload=settings.APP_DEBUG,
        log_config=None,
    )
