"""Category tree and category detail page controllers."""

from __future__ import annotations

import asyncio

from storefront.api.schemas.catalog import (
    MagentoCategory,
    MagentoProduct,
    ProductListResult,
)
from storefront.api.schemas.pages import (
    CategoryDetailView,
    CategoryListView,
    CategoryNodeView,
)
from storefront.pages.base import (
    PLACEHOLDER_IMAGE,
    PageController,
    build_chrome,
    product_card,
)
from storefront.services.magento_client import MagentoClient
from storefront.services.pagination import build_pagination, clamp_page, total_pages

CATEGORY_PAGE_SIZE = 12


def visible_category_nodes(
    categories: tuple[MagentoCategory, ...] | None, depth: int = 0
) -> list[CategoryNodeView]:
    """Active categories as render nodes; an inactive node hides its subtree."""
    nodes = []
    for category in categories or ():
        if not category.is_active:
            continue
        nodes.append(
            CategoryNodeView(
                id=category.id,
                name=category.name,
                level=category.level,
                depth=depth,
                position=category.position,
                product_count=category.product_count,
                href=f"/categories/{category.id}",
                children=visible_category_nodes(category.children_data, depth + 1),
            )
        )
    return nodes


class CategoryListPage(PageController):
    fallback_error = "Failed to fetch categories"

    def __init__(self, client: MagentoClient) -> None:
        super().__init__(client)
        self.root: MagentoCategory | None = None

    async def _fetch(self) -> MagentoCategory:
        return await self.client.get_categories()

    def _apply(self, result: MagentoCategory) -> None:
        self.root = result

    def _apply_error(self, message: str) -> None:
        self.error = message
        self.root = None

    def view(self) -> CategoryListView:
        nodes: list[CategoryNodeView] = []
        empty_message = None
        if not self.loading and not self.error:
            if self.root is None:
                empty_message = "No categories available."
            else:
                nodes = visible_category_nodes(self.root.children_data)
                if not self.root.children_data:
                    empty_message = "No categories found."

        return CategoryListView(
            chrome=build_chrome("/categories"),
            intro=(
                "Browse our product categories to find exactly what "
                "you're looking for."
            ),
            loading=self.loading,
            error=self.error,
            empty_message=empty_message,
            categories=nodes,
        )


class CategoryDetailPage(PageController):
    """Category header plus a paged product grid.

    Product scoping depends on ``MagentoClient.get_products_by_category``,
    which does not filter by category yet.
    """

    fallback_error = "Failed to fetch category data"

    def __init__(
        self,
        client: MagentoClient,
        category_id: int,
        page_size: int = CATEGORY_PAGE_SIZE,
        current_page: int = 1,
        placeholder_image: str = PLACEHOLDER_IMAGE,
    ) -> None:
        super().__init__(client)
        self.category_id = category_id
        self.page_size = page_size
        self.current_page = max(1, current_page)
        self.placeholder_image = placeholder_image
        self.category: MagentoCategory | None = None
        self.products: tuple[MagentoProduct, ...] = ()
        self.total_count = 0

    @property
    def total_pages(self) -> int:
        return total_pages(self.total_count, self.page_size)

    async def _fetch(self) -> tuple[MagentoCategory, ProductListResult]:
        category, result = await asyncio.gather(
            self.client.get_category_by_id(self.category_id),
            self.client.get_products_by_category(
                self.category_id, self.page_size, self.current_page
            ),
        )
        return category, result

    def _apply(self, result: tuple[MagentoCategory, ProductListResult]) -> None:
        category, products = result
        self.category = category
        self.products = products.items
        self.total_count = products.total_count

    def _apply_error(self, message: str) -> None:
        self.error = message
        self.category = None
        self.products = ()

    async def open(self) -> None:
        await self.refresh()
        last_page = self.total_pages
        if not self.error and last_page and self.current_page > last_page:
            self.current_page = last_page
            await self.refresh()

    async def go_to_page(self, page: int) -> None:
        self.current_page = clamp_page(page, self.total_pages)
        await self.refresh()

    def view(self) -> CategoryDetailView:
        chrome = build_chrome("/categories")
        if self.loading:
            return CategoryDetailView(
                chrome=chrome, category_id=self.category_id, loading=True
            )
        if self.error or self.category is None:
            return CategoryDetailView(
                chrome=chrome,
                category_id=self.category_id,
                error=self.error or "Category not found",
            )

        category = self.category
        pagination = None
        summary = None
        empty_message = None
        if self.products:
            pagination = build_pagination(
                self.current_page, self.total_count, self.page_size
            )
            summary = (
                f"Showing {len(self.products)} of {self.total_count} "
                f"products in {category.name}"
            )
        else:
            empty_message = "No products found in this category."

        return CategoryDetailView(
            chrome=chrome,
            category_id=category.id,
            name=category.name,
            level=category.level,
            position=category.position,
            product_count=category.product_count,
            empty_message=empty_message,
            products=[
                product_card(p, self.client, self.placeholder_image)
                for p in self.products
            ],
            total_count=self.total_count,
            pagination=pagination,
            summary=summary,
        )
