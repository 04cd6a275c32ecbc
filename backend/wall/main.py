import logging
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
from wall.core import messages
from wall.core.config import settings
from wall.core.database import engine, metadata
from wall.core.scheduler import start_scheduler, stop_scheduler
from wall.api.routes import auth, posts, profile
from wall.repositories import tables  # noqa: F401 - registers tables on metadata
from wall.storage.local_storage import storage

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage app lifecycle events.

    Startup: create missing tables, start the upload cleanup scheduler
    Shutdown: stop the scheduler
    """
    # create_all only adds missing tables; schema changes need a migration tool
    metadata.create_all(bind=engine)
    if settings.ENABLE_SCHEDULER:
        start_scheduler()
    yield
    stop_scheduler()


app = FastAPI(
    title="Wall API",
    description="Accounts, profiles and a shared post feed",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware - allows the browser client on another origin to call the API
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    """Report storage failures without leaking driver details to the client"""
    logger.exception(f"Database error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": messages.DATABASE_ERROR},
    )


app.include_router(auth.router, prefix=settings.API_PREFIX)
app.include_router(profile.router, prefix=settings.API_PREFIX)
app.include_router(posts.router, prefix=settings.API_PREFIX)

# Uploaded images are served as-is by filename
app.mount("/uploads", StaticFiles(directory=storage.upload_dir), name="uploads")


@app.get("/")
async def root():
    """Root endpoint - API information"""
    return {"message": "Wall API", "version": "1.0.0"}


@app.get("/health")
async def health():
    """Health check endpoint - used by monitoring/deployment tools"""
    return {"status": "healthy"}
