"""HTTP adapter for the commerce backend's single JSON endpoint.

Every call is a GET against ``magento_api_url`` with an ``action`` selector
(``products``, ``product`` or ``categories``). Raw items are mapped onto the
normalized records in ``storefront.api.schemas.catalog``; fields the backend
does not supply yet (weight, visibility, attribute_set_id) are constants.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any
from urllib.parse import quote, urlencode

import httpx
from pydantic import ValidationError

from storefront.api.schemas.catalog import (
    DESCRIPTION_ATTRIBUTE,
    IMAGE_ATTRIBUTE,
    SELLABLE_STATUS,
    SHORT_DESCRIPTION_ATTRIBUTE,
    CustomAttribute,
    MagentoCategory,
    MagentoProduct,
    ProductListResult,
    SearchCriteria,
)
from storefront.core.config import Settings

logger = logging.getLogger(__name__)

TIMEOUT_SECONDS = 10
MEDIA_PATH = "/pub/media/catalog/product"

DEFAULT_ATTRIBUTE_SET_ID = 4
DEFAULT_VISIBILITY = 4  # Catalog, Search
DEFAULT_TYPE_ID = "simple"
DEFAULT_WEIGHT = 1

# Characters encodeURIComponent leaves untouched besides alphanumerics and -_.
URI_COMPONENT_SAFE = "!~*'()"


class MagentoAPIError(Exception):
    """Any failure talking to the backend: transport, HTTP status, or body error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


_PRICE_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_price(raw: Any) -> float:
    """Read the leading number of a backend price, so "12.50 USD" is 12.5.

    Junk, negative and non-finite values fall back to 0.
    """
    if raw is None or isinstance(raw, bool):
        return 0.0
    match = _PRICE_PREFIX.match(str(raw))
    if match is None:
        return 0.0
    price = float(match.group(1))
    if not math.isfinite(price) or price < 0:
        return 0.0
    return price


def parse_status(raw: Any) -> int:
    if raw is None or raw == "":
        return SELLABLE_STATUS
    try:
        return int(raw)
    except (TypeError, ValueError):
        return SELLABLE_STATUS


def normalize_product(item: dict[str, Any]) -> MagentoProduct:
    """Map one raw backend item onto the normalized product shape.

    Image and descriptions are folded into ``custom_attributes`` so callers
    have a single lookup path regardless of the backend field names.
    """
    return MagentoProduct(
        id=item.get("id"),
        sku=item.get("sku"),
        name=item.get("name") or "",
        attribute_set_id=DEFAULT_ATTRIBUTE_SET_ID,
        price=parse_price(item.get("price")),
        status=parse_status(item.get("status")),
        visibility=DEFAULT_VISIBILITY,
        type_id=item.get("type_id") or DEFAULT_TYPE_ID,
        weight=DEFAULT_WEIGHT,
        custom_attributes=(
            CustomAttribute(
                attribute_code=IMAGE_ATTRIBUTE, value=item.get("image") or ""
            ),
            CustomAttribute(
                attribute_code=DESCRIPTION_ATTRIBUTE,
                value=item.get("description") or "",
            ),
            CustomAttribute(
                attribute_code=SHORT_DESCRIPTION_ATTRIBUTE,
                value=item.get("short_description") or "",
            ),
        ),
    )


def build_search_criteria(criteria: SearchCriteria) -> str:
    """Render criteria in Magento REST ``searchCriteria[...]`` query form.

    The simplified endpoint ignores these keys; they are kept for logging and
    for talking to a full REST backend.
    """
    params: list[tuple[str, str]] = []

    for group_index, group in enumerate(criteria.filter_groups or ()):
        for filter_index, search_filter in enumerate(group.filters):
            prefix = (
                f"searchCriteria[filterGroups][{group_index}]"
                f"[filters][{filter_index}]"
            )
            params.append((f"{prefix}[field]", search_filter.field))
            params.append((f"{prefix}[value]", search_filter.value))
            if search_filter.condition_type:
                params.append(
                    (f"{prefix}[condition_type]", search_filter.condition_type)
                )

    for index, sort in enumerate(criteria.sort_orders or ()):
        params.append((f"searchCriteria[sortOrders][{index}][field]", sort.field))
        params.append(
            (f"searchCriteria[sortOrders][{index}][direction]", sort.direction)
        )

    if criteria.page_size:
        params.append(("searchCriteria[pageSize]", str(criteria.page_size)))
    if criteria.current_page:
        params.append(("searchCriteria[currentPage]", str(criteria.current_page)))

    return urlencode(params)


class MagentoClient:
    """Async client for the storefront's commerce backend.

    Construct once per process (see ``storefront.main``) and close with
    :meth:`aclose` on shutdown. Pass ``client`` to reuse or mock the
    underlying ``httpx.AsyncClient``.
    """

    def __init__(
        self,
        api_url: str,
        base_url: str,
        timeout_seconds: float = TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_url = api_url
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._client = client or httpx.AsyncClient(
            timeout=timeout_seconds, follow_redirects=True
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, client: httpx.AsyncClient | None = None
    ) -> MagentoClient:
        return cls(
            api_url=settings.magento_api_url,
            base_url=settings.magento_base_url,
            timeout_seconds=settings.request_timeout_seconds,
            client=client,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _fetch_api(self, params: dict[str, str]) -> Any:
        """Issue the GET and unwrap the JSON envelope, raising on any failure."""
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": "ChillYourBeans-Storefront/1.0",
        }
        logger.debug(f"Backend request: action={params.get('action')} params={params}")

        try:
            response = await self._client.get(
                self.api_url, params=params, headers=headers
            )
        except httpx.TimeoutException as e:
            logger.warning(f"Backend timeout for action={params.get('action')}: {e}")
            raise MagentoAPIError(
                f"API Error: request timed out after {self.timeout_seconds}s"
            ) from e
        except httpx.RequestError as e:
            logger.warning(
                f"Backend request error for action={params.get('action')}: {e}"
            )
            raise MagentoAPIError(f"API Error: {e}") from e

        if not response.is_success:
            logger.warning(
                f"Backend returned HTTP {response.status_code} "
                f"for action={params.get('action')}"
            )
            raise MagentoAPIError(
                f"API Error: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(
                f"Backend returned invalid JSON for action={params.get('action')}",
                exc_info=True,
            )
            raise MagentoAPIError("API Error: invalid JSON response") from e

        if isinstance(data, dict) and data.get("error"):
            logger.warning(f"Backend reported error: {data['error']}")
            raise MagentoAPIError(
                f"API Error: {data['error']}", status_code=response.status_code
            )

        return data

    def _to_product_list(
        self, result: Any, criteria: SearchCriteria
    ) -> ProductListResult:
        raw_items = result.get("items") if isinstance(result, dict) else None
        if not isinstance(raw_items, list):
            raw_items = []
        total_count = result.get("total_count") if isinstance(result, dict) else None

        try:
            items = tuple(normalize_product(item) for item in raw_items)
            return ProductListResult(
                items=items,
                search_criteria=criteria,
                total_count=int(total_count or 0),
            )
        except (ValidationError, AttributeError, TypeError, ValueError) as e:
            logger.error(f"Malformed product list payload: {e}", exc_info=True)
            raise MagentoAPIError("API Error: malformed product list payload") from e

    async def get_products(
        self, criteria: SearchCriteria | None = None
    ) -> ProductListResult:
        """Return one page of products.

        Sort orders and filter groups are not sent (the backend ignores them)
        but are echoed back unchanged in ``search_criteria``.
        """
        criteria = criteria or SearchCriteria()
        params = {"action": "products"}
        if criteria.page_size:
            params["limit"] = str(criteria.page_size)
        if criteria.current_page:
            params["page"] = str(criteria.current_page)

        if criteria.sort_orders or criteria.filter_groups:
            logger.debug(
                f"Criteria not supported by backend, echoing only: "
                f"{build_search_criteria(criteria)}"
            )

        result = await self._fetch_api(params)
        return self._to_product_list(result, criteria)

    async def search_products(self, query: str, limit: int = 20) -> ProductListResult:
        """Free-text search; relevance and truncation are up to the backend."""
        result = await self._fetch_api(
            {"action": "products", "search": query, "limit": str(limit)}
        )
        return self._to_product_list(result, SearchCriteria(search=query))

    async def get_product_by_sku(self, sku: str) -> MagentoProduct:
        """Fetch one product; ``sku`` must already be percent-decoded."""
        item = await self._fetch_api(
            {"action": "product", "sku": quote(sku, safe=URI_COMPONENT_SAFE)}
        )
        if not isinstance(item, dict) or not item.get("sku"):
            raise MagentoAPIError("Product not found", status_code=404)
        try:
            return normalize_product(item)
        except ValidationError as e:
            logger.error(f"Malformed product payload for sku {sku}: {e}", exc_info=True)
            raise MagentoAPIError("API Error: malformed product payload") from e

    async def get_products_by_category(
        self, category_id: int, limit: int = 20, page: int = 1
    ) -> ProductListResult:
        """Return products for a category.

        The backend has no category filter yet, so this is the unfiltered
        paged list. Callers must not assume the result is scoped.
        """
        result = await self._fetch_api(
            {"action": "products", "limit": str(limit), "page": str(page)}
        )
        return self._to_product_list(result, SearchCriteria(category_id=category_id))

    async def get_categories(self) -> MagentoCategory:
        """Wrap the backend's top-level categories under a synthetic root."""
        result = await self._fetch_api({"action": "categories"})
        if isinstance(result, dict):
            # Tolerate an enveloped list as well as the bare one
            result = result.get("items") or result.get("children_data") or []
        if not isinstance(result, list):
            raise MagentoAPIError("API Error: malformed category payload")

        try:
            return MagentoCategory(
                id=1,
                parent_id=0,
                name="Root",
                is_active=True,
                position=0,
                level=0,
                product_count=0,
                children_data=tuple(
                    MagentoCategory.model_validate(child) for child in result
                ),
            )
        except ValidationError as e:
            logger.error(f"Malformed category payload: {e}", exc_info=True)
            raise MagentoAPIError("API Error: malformed category payload") from e

    async def get_category_by_id(self, category_id: int) -> MagentoCategory:
        """Placeholder lookup; the backend has no single-category action yet."""
        return MagentoCategory(
            id=category_id,
            parent_id=1,
            name=f"Category {category_id}",
            is_active=True,
            position=0,
            level=1,
            product_count=0,
        )

    def get_image_url(self, image_path: str) -> str:
        if not image_path:
            return ""
        if image_path.startswith("http"):
            return image_path
        return f"{self.base_url}{MEDIA_PATH}{image_path}"
