"""Shared page-controller plumbing: view state, stale-fetch guard, cards."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from storefront.api.schemas.catalog import IMAGE_ATTRIBUTE, MagentoProduct
from storefront.api.schemas.pages import Chrome, NavLink, ProductCard
from storefront.services.magento_client import MagentoAPIError, MagentoClient

logger = logging.getLogger(__name__)

STORE_NAME = "ChillYourBeans"
PLACEHOLDER_IMAGE = "/placeholder-product.jpg"

NAV_ITEMS = (
    ("Products", "/products"),
    ("Categories", "/categories"),
)


def build_chrome(active_href: str | None = None) -> Chrome:
    return Chrome(
        store_name=STORE_NAME,
        nav=[
            NavLink(label=label, href=href, active=href == active_href)
            for label, href in NAV_ITEMS
        ],
        cart_count=0,
    )


def product_href(sku: str) -> str:
    return f"/products/{quote(sku, safe='')}"


def product_card(
    product: MagentoProduct,
    client: MagentoClient,
    placeholder_image: str = PLACEHOLDER_IMAGE,
) -> ProductCard:
    image_url = client.get_image_url(product.get_custom_attribute(IMAGE_ATTRIBUTE))
    return ProductCard(
        id=product.id,
        sku=product.sku,
        name=product.name,
        price=product.price,
        price_display=f"${product.price:.2f}",
        image_url=image_url or placeholder_image,
        href=product_href(product.sku),
    )


class PageController:
    """Local view state for one page plus a guard against stale responses.

    Each :meth:`refresh` bumps a generation counter; a fetch commits its
    result only if no newer fetch started while it was in flight.
    """

    fallback_error = "Failed to fetch data"

    def __init__(self, client: MagentoClient) -> None:
        self.client = client
        self.loading = True
        self.error: str | None = None
        self._generation = 0

    async def _fetch(self) -> Any:
        raise NotImplementedError

    def _apply(self, result: Any) -> None:
        raise NotImplementedError

    def _apply_error(self, message: str) -> None:
        self.error = message

    async def refresh(self) -> None:
        self._generation += 1
        generation = self._generation
        self.loading = True
        try:
            result = await self._fetch()
        except MagentoAPIError as e:
            if generation != self._generation:
                logger.debug(f"{type(self).__name__}: dropping stale error: {e}")
                return
            logger.warning(f"{type(self).__name__} fetch failed: {e}")
            self._apply_error(str(e) or self.fallback_error)
            self.loading = False
            return

        if generation != self._generation:
            logger.debug(
                f"{type(self).__name__}: dropping stale result "
                f"(generation {generation}, current {self._generation})"
            )
            return
        self.error = None
        self._apply(result)
        self.loading = False
