"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.api.v1 import router as v1_router
from app.core.config import settings
from app.services.uploads import UPLOADS_URL_PREFIX


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Create the uploads directory served under /uploads."""
    Path(settings.UPLOADS_DIR).mkdir(parents=True, exist_ok=True)
    yield


app = FastAPI(
    title="Users API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)

# Uploaded profile assets; the directory is created at startup.
app.mount(
    UPLOADS_URL_PREFIX,
    StaticFiles(directory=settings.UPLOADS_DIR, check_dir=False),
    name="uploads",
)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Users API", "docs": "/docs"}
