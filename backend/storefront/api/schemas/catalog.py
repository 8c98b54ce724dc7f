"""Pydantic models describing normalized catalog records."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

IMAGE_ATTRIBUTE = "image"
DESCRIPTION_ATTRIBUTE = "description"
SHORT_DESCRIPTION_ATTRIBUTE = "short_description"

SELLABLE_STATUS = 1


class CustomAttribute(BaseModel):
    attribute_code: str
    value: str | int | float | bool

    model_config = ConfigDict(frozen=True)


class MagentoProduct(BaseModel):
    """Normalized product record, independent of the backend's field names."""

    id: int
    sku: str = Field(..., description="Stable external key used in URLs")
    name: str = ""
    attribute_set_id: int
    price: float = Field(..., ge=0)
    status: int = Field(SELLABLE_STATUS, description="1 = sellable")
    visibility: int
    type_id: str
    weight: float
    custom_attributes: tuple[CustomAttribute, ...] = ()

    model_config = ConfigDict(frozen=True)

    def get_custom_attribute(self, attribute_code: str) -> str:
        """Return the attribute value as text, or an empty string when absent."""
        for attribute in self.custom_attributes:
            if attribute.attribute_code == attribute_code:
                return str(attribute.value)
        return ""

    @property
    def is_purchasable(self) -> bool:
        return self.status == SELLABLE_STATUS


class MagentoCategory(BaseModel):
    """Category node; children_data carries whatever depth the backend nests."""

    id: int
    parent_id: int = 0
    name: str = ""
    is_active: bool = True
    position: int = 0
    level: int = 0
    product_count: int = 0
    children_data: tuple[MagentoCategory, ...] | None = None

    model_config = ConfigDict(frozen=True)


class SearchFilter(BaseModel):
    field: str
    value: str
    condition_type: str | None = None

    model_config = ConfigDict(frozen=True)


class FilterGroup(BaseModel):
    filters: tuple[SearchFilter, ...] = ()

    model_config = ConfigDict(frozen=True)


class SortOrder(BaseModel):
    field: str
    direction: Literal["ASC", "DESC"] = "ASC"

    model_config = ConfigDict(frozen=True)


class SearchCriteria(BaseModel):
    filter_groups: tuple[FilterGroup, ...] | None = None
    sort_orders: tuple[SortOrder, ...] | None = None
    page_size: int | None = Field(None, ge=1)
    current_page: int | None = Field(None, ge=1)
    search: str | None = None
    category_id: int | None = None

    model_config = ConfigDict(frozen=True)


class ProductListResult(BaseModel):
    items: tuple[MagentoProduct, ...]
    search_criteria: SearchCriteria
    total_count: int = Field(0, ge=0)

    model_config = ConfigDict(frozen=True)
