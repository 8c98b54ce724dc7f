"""FastAPI application bootstrap: logging, backend client lifecycle, routers."""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from storefront.api.routers import health, pages
from storefront.core.config import Settings, get_settings
from storefront.services.magento_client import MagentoClient

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and elapsed time for each request."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        elapsed_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({elapsed_ms}ms)"
        )
        return response


def create_app(
    settings: Settings | None = None,
    magento_client: MagentoClient | None = None,
) -> FastAPI:
    """Instantiate the FastAPI app; the backend client lives for the app's lifetime."""
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = magento_client or MagentoClient.from_settings(settings)
        app.state.magento_client = client
        logger.info(
            f"Backend client ready: api={settings.magento_api_url} "
            f"media={settings.magento_base_url}"
        )
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)
    app.state.settings = settings

    logger.info(f"[CORS] Allowed origins: {settings.cors_origins}")
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(pages.router, tags=["pages"])

    return app


app = create_app()
