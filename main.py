"""
Cart service application: wires settings, storage, the cart store,
the inventory client and the notifier into the HTTP routes.
"""
from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from core.config import Settings, settings as default_settings
from core.limiter import limiter
from core.logging import add_context, clear_context, configure_logging
from db.session import create_session_factory, create_storage_engine
from routers.cart_service_router import router as cart_router
from services.cart_service import CartService
from services.cart_store import CartStore
from services.inventory_service import InventoryClient
from services.notifications import LogNotifier, Notifier
from services.storage import CartStorage, MemoryStorage, SqlStorage

logger = structlog.get_logger(__name__)


def build_storage(settings: Settings) -> CartStorage:
    if settings.CART_STORAGE_BACKEND == "memory":
        return MemoryStorage()
    engine = create_storage_engine(settings.DATABASE_URL)
    return SqlStorage(create_session_factory(engine))


def build_cart_service(
    settings: Settings,
    storage: Optional[CartStorage] = None,
    inventory: Optional[InventoryClient] = None,
    notifier: Optional[Notifier] = None,
) -> CartService:
    store = CartStore(storage or build_storage(settings), settings.CART_STORAGE_KEY)
    inventory = inventory or InventoryClient(
        settings.INVENTORY_SERVICE_URL, timeout=settings.INVENTORY_TIMEOUT_SECONDS
    )
    return CartService(
        store,
        inventory,
        notifier or LogNotifier(),
        serialize=settings.CART_SERIALIZE_MUTATIONS,
    )


def create_app(cart_service: Optional[CartService] = None, settings: Settings = default_settings) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging()
        if getattr(app.state, "cart_service", None) is None:
            app.state.cart_service = build_cart_service(settings)
        logger.info("cart_service_started", items=len(app.state.cart_service.items))
        yield

    app = FastAPI(title="Cart Service", lifespan=lifespan)
    app.state.cart_service = cart_service
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.include_router(cart_router)

    @app.middleware("http")
    async def bind_request_context(request, call_next):
        clear_context()
        add_context(method=request.method, path=request.url.path)
        return await call_next(request)

    return app


app = create_app()
