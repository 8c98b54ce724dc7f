"""Storefront page endpoints returning JSON view models."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from storefront.api.dependencies.magento import get_app_settings, get_magento_client
from storefront.api.schemas.pages import (
    CategoryDetailView,
    CategoryListView,
    HomeView,
    ProductDetailView,
    ProductListView,
)
from storefront.core.config import Settings
from storefront.pages.categories import CategoryDetailPage, CategoryListPage
from storefront.pages.home import home_view
from storefront.pages.products import (
    FeaturedProductsPage,
    ProductDetailPage,
    ProductListPage,
)
from storefront.services.magento_client import MagentoClient

router = APIRouter()


@router.get("/", summary="Landing page", response_model=HomeView)
async def home() -> HomeView:
    return home_view()


@router.get("/coffee", summary="Featured coffee products", response_model=ProductListView)
async def coffee(
    client: MagentoClient = Depends(get_magento_client),
    settings: Settings = Depends(get_app_settings),
) -> ProductListView:
    page = FeaturedProductsPage(
        client,
        category_id=settings.featured_category_id,
        limit=settings.featured_limit,
        placeholder_image=settings.placeholder_image,
    )
    await page.refresh()
    return page.view()


@router.get(
    "/products",
    summary="Paged product listing with optional search",
    response_model=ProductListView,
)
async def list_products(
    page: int = Query(1, description="Page number; clamped into the available range"),
    search: str = Query("", description="Free-text search; blank falls back to listing"),
    client: MagentoClient = Depends(get_magento_client),
    settings: Settings = Depends(get_app_settings),
) -> ProductListView:
    """Return one page of products, or search results when ``search`` is set.

    Each request gets its own page state; nothing is shared across requests.
    """
    listing = ProductListPage(
        client,
        page_size=settings.products_page_size,
        search=search,
        current_page=page,
        placeholder_image=settings.placeholder_image,
    )
    await listing.open()
    return listing.view()


@router.get(
    "/products/{sku:path}",
    summary="Product detail by SKU",
    response_model=ProductDetailView,
)
async def product_detail(
    sku: str,
    client: MagentoClient = Depends(get_magento_client),
    settings: Settings = Depends(get_app_settings),
) -> ProductDetailView:
    # Starlette hands path params over percent-decoded
    detail = ProductDetailPage(client, sku, placeholder_image=settings.placeholder_image)
    await detail.refresh()
    return detail.view()


@router.get("/categories", summary="Category tree", response_model=CategoryListView)
async def list_categories(
    client: MagentoClient = Depends(get_magento_client),
) -> CategoryListView:
    page = CategoryListPage(client)
    await page.refresh()
    return page.view()


@router.get(
    "/categories/{category_id}",
    summary="Category detail with paged products",
    response_model=CategoryDetailView,
)
async def category_detail(
    category_id: int,
    page: int = Query(1, description="Page number; clamped into the available range"),
    client: MagentoClient = Depends(get_magento_client),
    settings: Settings = Depends(get_app_settings),
) -> CategoryDetailView:
    detail = CategoryDetailPage(
        client,
        category_id,
        page_size=settings.products_page_size,
        current_page=page,
        placeholder_image=settings.placeholder_image,
    )
    await detail.open()
    return detail.view()
