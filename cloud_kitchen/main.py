import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cloud_kitchen.application.analytics import AnalyticsService
from cloud_kitchen.application.auth_service import AuthService
from cloud_kitchen.application.order_service import OrderService
from cloud_kitchen.application.seeding import seed_admin, seed_menu
from cloud_kitchen.core.clock import utcnow
from cloud_kitchen.core.config import DEV_SESSION_SECRET, settings
from cloud_kitchen.core.errors import AppError
from cloud_kitchen.core.logging_config import setup_logging
from cloud_kitchen.infrastructure.database import SessionLocal, init_db
from cloud_kitchen.infrastructure.notification_service import NotificationService
from cloud_kitchen.infrastructure.repositories.order_repository import SqlOrderRepository
from cloud_kitchen.infrastructure.repositories.product_repository import SqlProductRepository
from cloud_kitchen.infrastructure.repositories.user_repository import SqlUserRepository
from cloud_kitchen.infrastructure.session_store import build_session_store
from cloud_kitchen.interfaces import admin, auth, integrations, orders, products

logger = logging.getLogger(__name__)


def _check_session_secret() -> None:
    if settings.SESSION_SECRET != DEV_SESSION_SECRET:
        return
    if settings.is_production:
        raise RuntimeError("SESSION_SECRET environment variable is required in production")
    logger.warning("Using default session secret. Set SESSION_SECRET in production!")


def _validation_field(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return ""
    loc = [str(part) for part in errors[0].get("loc", ()) if part not in ("body", "query", "path")]
    return ".".join(loc)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        body = {"message": "Validation failed"}
        field = _validation_field(exc)
        if field:
            body["field"] = field
        return JSONResponse(status_code=400, content=body)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        # Details stay in the server log; the client gets a generic message.
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})


def create_app(
    session_factory=None,
    session_store=None,
    notifier=None,
    clock=None,
    seed: bool = True,
) -> FastAPI:
    setup_logging(settings.LOG_LEVEL)
    _check_session_secret()

    session_factory = session_factory or SessionLocal

    # ---------------------------------------------------------
    # COMPOSITION ROOT
    # ---------------------------------------------------------
    product_repo = SqlProductRepository(session_factory)
    order_repo = SqlOrderRepository(session_factory)
    user_repo = SqlUserRepository(session_factory)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(session_factory)
        if seed:
            if settings.SEED_MENU:
                seed_menu(product_repo)
            seed_admin(user_repo, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD)
        logger.info("%s ready", settings.PROJECT_NAME)
        yield

    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.product_repo = product_repo
    app.state.order_service = OrderService(
        product_repo,
        order_repo,
        notifier=notifier if notifier is not None else NotificationService.from_settings(),
        default_country_code=settings.DEFAULT_COUNTRY_CODE,
        business_timezone=settings.BUSINESS_TIMEZONE,
        pos_system_id=settings.POS_SYSTEM_ID,
    )
    app.state.analytics_service = AnalyticsService(
        order_repo,
        clock=clock or utcnow,
        business_timezone=settings.BUSINESS_TIMEZONE,
    )
    app.state.auth_service = AuthService(user_repo, session_store or build_session_store())

    register_error_handlers(app)

    # Include Routers
    app.include_router(products.router, prefix="/api/products", tags=["products"])
    app.include_router(orders.router, prefix="/api", tags=["orders"])
    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(admin.router, prefix="/api/admin", tags=["admin"])
    app.include_router(integrations.router, prefix="/api/integrations", tags=["integrations"])

    @app.get("/")
    def health_check():
        return {"status": "active", "system": settings.PROJECT_NAME}

    return app


app = create_app()
