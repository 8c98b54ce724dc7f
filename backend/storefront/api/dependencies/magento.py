"""Request-scoped access to the objects built in ``create_app``."""

from fastapi import Request

from storefront.core.config import Settings
from storefront.services.magento_client import MagentoClient


def get_magento_client(request: Request) -> MagentoClient:
    """FastAPI dependency returning the process-wide client built at startup."""
    return request.app.state.magento_client


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
