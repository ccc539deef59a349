from fastapi import FastAPI
import uvicorn
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from core.config import settings
from core.exceptions import register_exception_handlers
from core.logging import get_logger, setup_logging
from db.database import create_db_and_tables
from routers.socks import router as socks_router

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_db_and_tables()
    logger.info("Sock inventory API started")
    yield


app = FastAPI(
    title="Sock Inventory API",
    description="API for tracking sock stock: arrivals, departures, filters and CSV batch import",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Sock inventory routes
app.include_router(socks_router, prefix=f"{settings.api_prefix}/socks", tags=["socks"])


@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
