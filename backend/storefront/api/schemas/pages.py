"""View models returned by the storefront page routes."""

from __future__ import annotations

from pydantic import BaseModel, Field


class NavLink(BaseModel):
    label: str
    href: str
    active: bool = False


class Chrome(BaseModel):
    """Navigation shared by every page. The cart badge is decorative."""

    store_name: str
    nav: list[NavLink]
    cart_count: int = 0


class PaginationView(BaseModel):
    current_page: int
    total_pages: int
    page_size: int
    visible: bool = Field(..., description="Controls only render for more than one page")
    has_previous: bool
    has_next: bool
    previous_page: int
    next_page: int


class ProductCard(BaseModel):
    id: int
    sku: str
    name: str
    price: float
    price_display: str
    image_url: str
    href: str = Field(..., description="Detail link with the SKU percent-encoded")


class ProductListView(BaseModel):
    chrome: Chrome
    title: str
    intro: str | None = None
    search: str = ""
    loading: bool = False
    error: str | None = None
    empty_message: str | None = None
    products: list[ProductCard] = Field(default_factory=list)
    total_count: int = 0
    pagination: PaginationView | None = None
    summary: str | None = None


class ProductDetailView(BaseModel):
    chrome: Chrome
    sku: str
    loading: bool = False
    error: str | None = None
    back_href: str = "/products"
    product: ProductCard | None = None
    short_description: str = ""
    description: str = ""
    type_id: str | None = None
    weight: float | None = None
    in_stock: bool = False
    stock_label: str | None = None
    can_add_to_cart: bool = False
    add_to_cart_label: str | None = None


class CategoryNodeView(BaseModel):
    id: int
    name: str
    level: int
    depth: int = Field(..., description="Render depth below the root listing")
    position: int
    product_count: int
    href: str
    children: list[CategoryNodeView] = Field(default_factory=list)


class CategoryListView(BaseModel):
    chrome: Chrome
    title: str = "Categories"
    intro: str
    loading: bool = False
    error: str | None = None
    empty_message: str | None = None
    categories: list[CategoryNodeView] = Field(default_factory=list)


class CategoryDetailView(BaseModel):
    chrome: Chrome
    category_id: int
    loading: bool = False
    error: str | None = None
    back_href: str = "/categories"
    name: str | None = None
    level: int | None = None
    position: int | None = None
    product_count: int | None = None
    empty_message: str | None = None
    products: list[ProductCard] = Field(default_factory=list)
    total_count: int = 0
    pagination: PaginationView | None = None
    summary: str | None = None


class FeatureCard(BaseModel):
    title: str
    body: str


class HomeView(BaseModel):
    chrome: Chrome
    tagline: str
    hero_image: str
    calls_to_action: list[NavLink]
    features: list[FeatureCard]
