"""Product listing, product detail and featured-coffee page controllers."""

from __future__ import annotations

from storefront.api.schemas.catalog import (
    DESCRIPTION_ATTRIBUTE,
    SHORT_DESCRIPTION_ATTRIBUTE,
    MagentoProduct,
    ProductListResult,
    SearchCriteria,
    SortOrder,
)
from storefront.api.schemas.pages import ProductDetailView, ProductListView
from storefront.pages.base import (
    PLACEHOLDER_IMAGE,
    PageController,
    build_chrome,
    product_card,
)
from storefront.services.magento_client import MagentoAPIError, MagentoClient
from storefront.services.pagination import build_pagination, clamp_page, total_pages

PRODUCTS_PAGE_SIZE = 12
NO_DESCRIPTION = "No description available."


class ProductListPage(PageController):
    """Paged product grid with a search box.

    A non-empty trimmed search runs only the search call; otherwise the
    plain listing is fetched for the current page, sorted by name.
    """

    fallback_error = "Failed to fetch products"

    def __init__(
        self,
        client: MagentoClient,
        page_size: int = PRODUCTS_PAGE_SIZE,
        search: str = "",
        current_page: int = 1,
        placeholder_image: str = PLACEHOLDER_IMAGE,
    ) -> None:
        super().__init__(client)
        self.page_size = page_size
        self.search = search
        # Search results are not paged by the backend
        self.current_page = 1 if self.searching else max(1, current_page)
        self.placeholder_image = placeholder_image
        self.products: tuple[MagentoProduct, ...] = ()
        self.total_count = 0

    @property
    def searching(self) -> bool:
        return bool(self.search.strip())

    @property
    def total_pages(self) -> int:
        return total_pages(self.total_count, self.page_size)

    async def _fetch(self) -> ProductListResult:
        query = self.search.strip()
        if query:
            return await self.client.search_products(query, self.page_size)
        return await self.client.get_products(
            SearchCriteria(
                page_size=self.page_size,
                current_page=self.current_page,
                sort_orders=(SortOrder(field="name", direction="ASC"),),
            )
        )

    def _apply(self, result: ProductListResult) -> None:
        self.products = result.items
        self.total_count = result.total_count

    def _apply_error(self, message: str) -> None:
        self.error = message
        self.products = ()

    async def open(self) -> None:
        """Initial load; a requested page past the end is refetched as the last page."""
        await self.refresh()
        if self.searching:
            return
        last_page = self.total_pages
        if not self.error and last_page and self.current_page > last_page:
            self.current_page = last_page
            await self.refresh()

    async def go_to_page(self, page: int) -> None:
        if self.searching:
            self.current_page = 1
        else:
            self.current_page = clamp_page(page, self.total_pages)
        await self.refresh()

    async def submit_search(self, text: str) -> None:
        self.search = text
        self.current_page = 1
        await self.refresh()

    def view(self) -> ProductListView:
        summary = None
        empty_message = None
        pagination = None
        if not self.loading and not self.error:
            if self.products:
                pagination = build_pagination(
                    self.current_page, self.total_count, self.page_size
                )
                summary = (
                    f"Showing {len(self.products)} of {self.total_count} products"
                )
            else:
                empty_message = "No products found."

        return ProductListView(
            chrome=build_chrome("/products"),
            title="Products",
            search=self.search,
            loading=self.loading,
            error=self.error,
            empty_message=empty_message,
            products=[
                product_card(p, self.client, self.placeholder_image)
                for p in self.products
            ],
            total_count=self.total_count,
            pagination=pagination,
            summary=summary,
        )


class FeaturedProductsPage(PageController):
    """The coffee landing page: a single unpaged batch from one category."""

    fallback_error = "Failed to fetch coffee products"

    def __init__(
        self,
        client: MagentoClient,
        category_id: int,
        limit: int,
        placeholder_image: str = PLACEHOLDER_IMAGE,
    ) -> None:
        super().__init__(client)
        self.category_id = category_id
        self.limit = limit
        self.placeholder_image = placeholder_image
        self.products: tuple[MagentoProduct, ...] = ()

    async def _fetch(self) -> ProductListResult:
        return await self.client.get_products_by_category(
            self.category_id, self.limit, 1
        )

    def _apply(self, result: ProductListResult) -> None:
        self.products = result.items

    def _apply_error(self, message: str) -> None:
        self.error = message
        self.products = ()

    def view(self) -> ProductListView:
        empty = not self.loading and not self.error and not self.products
        return ProductListView(
            chrome=build_chrome(),
            title="Coffee",
            intro=(
                "Discover our premium selection of coffee beans, sourced "
                "directly from the finest farms around the world."
            ),
            loading=self.loading,
            error=self.error,
            empty_message="No coffee products found." if empty else None,
            products=[
                product_card(p, self.client, self.placeholder_image)
                for p in self.products
            ],
            total_count=len(self.products),
        )


class ProductDetailPage(PageController):
    fallback_error = "Failed to fetch product"

    def __init__(
        self,
        client: MagentoClient,
        sku: str,
        placeholder_image: str = PLACEHOLDER_IMAGE,
    ) -> None:
        super().__init__(client)
        # Already percent-decoded; the client re-encodes for transport
        self.sku = sku
        self.placeholder_image = placeholder_image
        self.product: MagentoProduct | None = None

    async def _fetch(self) -> MagentoProduct:
        if not self.sku:
            raise MagentoAPIError("Product not found")
        return await self.client.get_product_by_sku(self.sku)

    def _apply(self, result: MagentoProduct) -> None:
        self.product = result

    def _apply_error(self, message: str) -> None:
        self.error = message
        self.product = None

    def view(self) -> ProductDetailView:
        chrome = build_chrome("/products")
        if self.loading:
            return ProductDetailView(chrome=chrome, sku=self.sku, loading=True)
        if self.error or self.product is None:
            return ProductDetailView(
                chrome=chrome, sku=self.sku, error=self.error or "Product not found"
            )

        product = self.product
        in_stock = product.is_purchasable
        return ProductDetailView(
            chrome=chrome,
            sku=product.sku,
            product=product_card(product, self.client, self.placeholder_image),
            short_description=product.get_custom_attribute(SHORT_DESCRIPTION_ATTRIBUTE),
            description=(
                product.get_custom_attribute(DESCRIPTION_ATTRIBUTE) or NO_DESCRIPTION
            ),
            type_id=product.type_id,
            weight=product.weight,
            in_stock=in_stock,
            stock_label="In Stock" if in_stock else "Out of Stock",
            can_add_to_cart=in_stock,
            add_to_cart_label="Add to Cart" if in_stock else "Out of Stock",
        )
