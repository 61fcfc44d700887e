# artmarket/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from artmarket.api.middleware import (
    RateLimiter,
    RateLimitMiddleware,
    SecurityHeadersMiddleware,
    UnhandledErrorMiddleware,
)
from artmarket.api.routers import carts, health, listings, notifications, orders, users
from artmarket.data.database import init_db, wait_for_database
from artmarket.utils.logging import get_logger, setup_logging
from artmarket.utils.settings import (
    CORS_ORIGINS,
    PORT,
    RATE_LIMIT_DEFAULT,
    RATE_LIMIT_ENABLED,
    RATE_LIMIT_STORAGE_URI,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # baza moze wstawac wolniej niz api (docker compose)
    wait_for_database()
    init_db()
    logger.info("Art marketplace API started")
    yield


def create_app(
    rate_limit_enabled: bool = RATE_LIMIT_ENABLED,
    rate_limit: str = RATE_LIMIT_DEFAULT,
    rate_limit_storage: str = RATE_LIMIT_STORAGE_URI,
) -> FastAPI:
    setup_logging()

    app = FastAPI(
        title="Art Marketplace API",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.limiter = RateLimiter(rate_limit_enabled, rate_limit, rate_limit_storage)

    # ostatni dodany jest najbardziej zewnetrzny: CORS > naglowki > limit > bledy
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-CSRF-Token"],
    )

    # Include routers
    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(listings.router)
    app.include_router(carts.router)
    app.include_router(orders.router)
    app.include_router(notifications.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=PORT)
