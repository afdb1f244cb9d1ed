from fastapi import FastAPI, Request
from contextlib import asynccontextmanager
from starlette.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware
from app.api import auth, bookings, cities, fares, pricing, routes
from app.core.config import settings
from app.core.local_cache import LocalCache
from app.core.redis import init_redis, close_redis
from app.core.metrics import request_count, request_duration, db_connected, redis_connected, get_metrics_text
from app.core.security import restore_session
from app.db.session import AsyncSessionLocal, engine
from app.services.pricing_store import PricingStore
from app.services.table_store import TableStore
import time
import logging

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        try:
            response = await call_next(request)
            duration = time.time() - start_time

            request_count.labels(
                method=request.method,
                endpoint=request.url.path,
                status=response.status_code
            ).inc()

            request_duration.labels(
                method=request.method,
                endpoint=request.url.path
            ).observe(duration)

            return response
        except Exception:
            duration = time.time() - start_time
            request_count.labels(
                method=request.method,
                endpoint=request.url.path,
                status=500
            ).inc()
            request_duration.labels(
                method=request.method,
                endpoint=request.url.path
            ).observe(duration)
            raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting...")

    logger.info("Initializing Redis connection...")
    redis_client = None
    try:
        redis_client = await init_redis()
        redis_connected.set(1)
        logger.info("Redis connected")
    except Exception as e:
        logger.error(f"Redis connection failed: {e}")
        redis_connected.set(0)

    cache = LocalCache(redis_client)
    table_store = TableStore(AsyncSessionLocal)
    store = PricingStore(table_store, cache)

    app.state.local_cache = cache
    app.state.pricing_store = store
    app.state.admin_session = await restore_session(cache)

    await store.restore_cached_rates()

    if await table_store.ping():
        db_connected.set(1)
        logger.info("Database connected")
    else:
        db_connected.set(0)
        logger.error("Database connection failed")

    report = await store.load()
    if report.errors:
        logger.warning(f"Pricing loaded with errors: {report.errors}")
    else:
        logger.info(
            f"Pricing loaded: {len(store.config.cities)} cities, {len(store.config.routes)} routes"
        )

    yield

    logger.info("Application shutting down...")
    app.state.pricing_store = None
    await close_redis()
    redis_connected.set(0)
    await engine.dispose()
    db_connected.set(0)
    logger.info("Shutdown complete")


app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
    lifespan=lifespan
)

app.add_middleware(MetricsMiddleware)

app.include_router(auth.router)
app.include_router(pricing.router)
app.include_router(cities.router)
app.include_router(routes.router)
app.include_router(fares.router)
app.include_router(bookings.router)


@app.get("/metrics", tags=["monitoring"])
async def metrics():
    return Response(
        content=get_metrics_text(),
        media_type="text/plain; version=0.0.4; charset=utf-8"
    )


@app.get("/health", tags=["monitoring"])
async def health_check(request: Request):
    store = request.app.state.pricing_store
    cache = request.app.state.local_cache
    database_ok = await store.table_store.ping()

    return {
        "status": "healthy" if database_ok else "degraded",
        "service": settings.API_TITLE,
        "version": settings.API_VERSION,
        "pricing_ready": store.local_rates is not None,
        "dependencies": {
            "redis": "connected" if cache.available else "disconnected",
            "database": "connected" if database_ok else "disconnected"
        }
    }


@app.get("/", tags=["root"])
async def root():
    return {
        "message": settings.API_TITLE,
        "version": settings.API_VERSION,
        "docs": "/docs",
        "health": "/health",
        "metrics": "/metrics"
    }
