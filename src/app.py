"""Store FastAPI application.

Processes every command synchronously inside the HTTP request. Each request
runs in the store's domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload

Environment:
    PROTEAN_ENV       development / test / staging / production
    DATABASE_URL      switches the default database to PostgreSQL
    STORE_*           request validation settings (see store.settings)
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from store.domain import logger, store
from store.settings import StoreSettings
from store.utils.db import setup_db
from store.utils.logging import add_context, clear_context

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
settings = StoreSettings.from_env()

if settings.database_url:
    store.config["databases"]["default"] = {
        "provider": "postgresql",
        "database_uri": settings.database_url,
    }

store.init()

if settings.database_url:
    setup_db(store)

logger.info("Store domain initialized", environment=settings.environment, sql=bool(settings.database_url))

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Store API",
    description="Online store backend: catalog, cart, orders and payments",
)
app.state.settings = settings

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the store's domain context for each request."""
    clear_context()
    add_context(method=request.method, path=request.url.path, user_id=request.headers.get("X-User-Id"))
    with store.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from store.api import (  # noqa: E402
    cart_router,
    order_router,
    payment_router,
    product_router,
    register_error_handlers,
)

register_error_handlers(app)

app.include_router(product_router)
app.include_router(cart_router)
app.include_router(order_router)
app.include_router(payment_router)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domain": store.name,
            "environment": settings.environment,
        }
    )
