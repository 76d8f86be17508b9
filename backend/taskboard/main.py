import asyncio
import json
import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError

from taskboard.core.config import settings
from taskboard.core.database import Base, engine
from taskboard.core.errors import AccessDenied, Conflict, NotFound, TaskboardError
from taskboard.core.events import ACTIVITY_CHANNEL, redis_client
from taskboard.core.logging_setup import setup_logging
from taskboard.core.websocket import manager
from taskboard.routers import activity, attachments, auth, comments, dashboard, profiles, tasks
import taskboard.models  # noqa: F401  registers tables

logger = logging.getLogger(__name__)

app = FastAPI(title="Taskboard API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(profiles.router)
app.include_router(tasks.router)
app.include_router(comments.router)
app.include_router(attachments.router)
app.include_router(dashboard.router)
app.include_router(activity.router)

ERROR_STATUS = {
    AccessDenied: status.HTTP_403_FORBIDDEN,
    NotFound: status.HTTP_404_NOT_FOUND,
    Conflict: status.HTTP_409_CONFLICT,
}

@app.exception_handler(TaskboardError)
async def taskboard_error_handler(request: Request, exc: TaskboardError):
    code = status.HTTP_400_BAD_REQUEST
    for error_type, error_code in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            code = error_code
            break
    return JSONResponse(status_code=code, content={"detail": exc.detail})

@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    # uniqueness, foreign key and CHECK violations go back verbatim
    logger.warning("constraint violation on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc.orig)})

@app.exception_handler(OperationalError)
@app.exception_handler(InterfaceError)
async def database_unavailable_handler(request: Request, exc: Exception):
    logger.error("database failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "The service is temporarily unavailable, please try again"},
    )

async def redis_listener():
    pubsub = redis_client.pubsub()
    await pubsub.subscribe(ACTIVITY_CHANNEL)
    async for message in pubsub.listen():
        if message["type"] == "message":
            try:
                event = json.loads(message["data"])
            except json.JSONDecodeError:
                logger.warning("ignoring malformed activity message: %r", message["data"])
                continue
            await manager.broadcast(event)

def log_listener_exit(task: asyncio.Task):
    if task.cancelled():
        logger.info("activity listener cancelled")
        return
    exc = task.exception()
    if exc is not None:
        logger.error("activity listener stopped", exc_info=exc)

def start_redis_listener(listener=redis_listener) -> asyncio.Task:
    task = asyncio.create_task(listener())
    task.add_done_callback(log_listener_exit)
    app.state.redis_listener_task = task
    return task

@app.on_event("startup")
async def startup():
    setup_logging(level=settings.LOG_LEVEL, log_dir=settings.LOG_DIR)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    if redis_client is not None:
        start_redis_listener()
    logger.info("Taskboard API started")

@app.get("/")
async def root():
    return {"message": "Taskboard API is running"}
