from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.middleware.cors import CORSMiddleware

from storefront_admin.api.v1 import api_router
from storefront_admin.api.v1.exception_handlers import register_exception_handlers
from storefront_admin.core.config import settings
from storefront_admin.db.session import db_manager
from storefront_admin.middlewares.logging_middleware import LoggingMiddleware
from storefront_admin.middlewares.rate_limit import limiter
from storefront_admin.utils.logger import configure_logging, get_logger


configure_logging()
logger = get_logger("main")

DEFAULT_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:8000",
    "http://127.0.0.1:8000",
]


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.database.create_tables:
        db_manager.create_tables()
    yield


app = FastAPI(title="Storefront Admin API", lifespan=lifespan)

allowed_origins = settings.allowed_hosts_list
if not allowed_origins:
    allowed_origins = DEFAULT_ORIGINS
    logger.warning("No valid CORS origins configured, using localhost defaults")
logger.info(f"CORS allowed origins: {allowed_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# 1) SlowAPI rate limiting
app.add_middleware(SlowAPIMiddleware)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# 2) Request logging
app.add_middleware(LoggingMiddleware)

register_exception_handlers(app)

Instrumentator().instrument(app).expose(app)

app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
async def health():
    return {"status": "healthy", "message": "Backend is running"}


@app.get("/")
async def root():
    return {"message": "Storefront Admin API"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
