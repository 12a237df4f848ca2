import logging

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from app.api.routes_health import router as health_router
from app.api.routes_kakao import router as kakao_router
from app.core.config import settings
from app.core.errors import register_error_handlers
from app.core.logger import init_logging

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    init_logging()

    is_production = settings.ENV.lower() == "prod"
    app = FastAPI(
        title=settings.APP_NAME,
        debug=False,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
        openapi_url=None if is_production else "/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
        # Session credentials travel in response headers
        expose_headers=[settings.ACCESS_TOKEN_HEADER, settings.REFRESH_TOKEN_HEADER],
    )
    register_error_handlers(app)
    app.include_router(kakao_router)
    app.include_router(health_router)

    @app.on_event("shutdown")
    async def shutdown_event():
        from app.db.redis_client import close_redis_pool

        close_redis_pool()

    logger.info("%s started (env=%s)", settings.APP_NAME, settings.ENV)
    return app


app = create_app()
