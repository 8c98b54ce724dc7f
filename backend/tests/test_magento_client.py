import httpx
import pytest

from conftest import BASE_URL, HOUSE_BLEND
from storefront.api.schemas.catalog import (
    FilterGroup,
    SearchCriteria,
    SearchFilter,
    SortOrder,
)
from storefront.services.magento_client import (
    MagentoAPIError,
    build_search_criteria,
    normalize_product,
    parse_price,
)


def test_normalize_product_defaults_missing_status_to_sellable():
    product = normalize_product({"id": 5, "sku": "TEA-9", "name": "Green", "price": "3"})

    assert product.status == 1
    assert product.type_id == "simple"
    assert product.attribute_set_id == 4
    assert product.visibility == 4
    assert product.weight == 1


@pytest.mark.parametrize("raw", [None, "", "abc", "twelve", "-4.00", "nan", True])
def test_parse_price_falls_back_to_zero(raw):
    assert parse_price(raw) == 0


@pytest.mark.parametrize(
    "raw, expected",
    [("12.50 USD", 12.5), (" 7", 7.0), (".5", 0.5), ("3.", 3.0), (19, 19.0)],
)
def test_parse_price_reads_leading_number(raw, expected):
    assert parse_price(raw) == expected


def test_normalize_product_folds_fields_into_custom_attributes():
    product = normalize_product(
        {
            "id": 2,
            "sku": "COF-002",
            "name": "Espresso",
            "price": "9.99",
            "status": 2,
            "image": "/e/espresso.jpg",
            "description": "<p>Dark</p>",
        }
    )

    codes = [a.attribute_code for a in product.custom_attributes]
    assert codes == ["image", "description", "short_description"]
    assert product.get_custom_attribute("image") == "/e/espresso.jpg"
    assert product.get_custom_attribute("description") == "<p>Dark</p>"
    assert product.get_custom_attribute("short_description") == ""
    assert product.get_custom_attribute("color") == ""
    assert product.status == 2
    assert not product.is_purchasable


def test_get_image_url(magento_client):
    assert magento_client.get_image_url("") == ""
    assert magento_client.get_image_url("http://x/y.jpg") == "http://x/y.jpg"
    assert magento_client.get_image_url("https://cdn/y.jpg") == "https://cdn/y.jpg"
    assert (
        magento_client.get_image_url("/cache/a/b.jpg")
        == f"{BASE_URL}/pub/media/catalog/product/cache/a/b.jpg"
    )


@pytest.mark.asyncio
async def test_get_products_end_to_end(backend, magento_client):
    backend.respond("products", {"items": [HOUSE_BLEND], "total_count": 1})

    result = await magento_client.get_products(
        SearchCriteria(page_size=12, current_page=1)
    )

    assert result.total_count == 1
    assert len(result.items) == 1
    product = result.items[0]
    assert product.sku == "COF-001"
    assert product.price == 12.5
    assert product.status == 1
    assert product.custom_attributes[0].attribute_code == "image"
    assert product.custom_attributes[0].value == "/h/house.jpg"

    params = backend.params()
    assert params["action"] == "products"
    assert params["limit"] == "12"
    assert params["page"] == "1"


@pytest.mark.asyncio
async def test_get_products_echoes_sort_orders_without_sending_them(backend, magento_client):
    backend.respond("products", {"items": [], "total_count": 0})
    criteria = SearchCriteria(
        page_size=12,
        current_page=2,
        sort_orders=(SortOrder(field="name", direction="ASC"),),
    )

    result = await magento_client.get_products(criteria)

    assert result.search_criteria == criteria
    assert result.items == ()
    assert set(backend.params().keys()) == {"action", "limit", "page"}


@pytest.mark.asyncio
async def test_get_products_without_criteria_sends_only_action(backend, magento_client):
    backend.respond("products", {"items": [HOUSE_BLEND]})

    result = await magento_client.get_products()

    assert result.total_count == 0
    assert dict(backend.params()) == {"action": "products"}


@pytest.mark.asyncio
async def test_search_products_sends_search_and_limit(backend, magento_client):
    backend.respond("products", {"items": [HOUSE_BLEND], "total_count": 1})

    result = await magento_client.search_products("house", 12)

    assert result.search_criteria == SearchCriteria(search="house")
    params = backend.params()
    assert params["search"] == "house"
    assert params["limit"] == "12"
    assert "page" not in params


@pytest.mark.asyncio
async def test_get_products_by_category_is_unfiltered(backend, magento_client):
    backend.respond("products", {"items": [HOUSE_BLEND], "total_count": 30})

    result = await magento_client.get_products_by_category(3, 50, 1)

    assert result.search_criteria == SearchCriteria(category_id=3)
    assert result.total_count == 30
    params = backend.params()
    assert dict(params) == {"action": "products", "limit": "50", "page": "1"}


@pytest.mark.asyncio
async def test_get_product_by_sku_encodes_for_transport(backend, magento_client):
    backend.respond("product", {**HOUSE_BLEND, "sku": "COF 001/A"})

    product = await magento_client.get_product_by_sku("COF 001/A")

    assert product.sku == "COF 001/A"
    assert backend.params()["sku"] == "COF%20001%2FA"


@pytest.mark.asyncio
async def test_get_product_by_sku_without_item_is_not_found(backend, magento_client):
    backend.respond("product", {})

    with pytest.raises(MagentoAPIError, match="Product not found"):
        await magento_client.get_product_by_sku("NOPE")


@pytest.mark.asyncio
async def test_http_error_status_is_reported(backend, magento_client):
    backend.respond("products", {"message": "boom"}, status_code=500)

    with pytest.raises(MagentoAPIError) as excinfo:
        await magento_client.get_products()

    assert str(excinfo.value) == "API Error: 500 Internal Server Error"
    assert excinfo.value.status_code == 500


@pytest.mark.asyncio
async def test_error_field_fails_even_with_success_status(backend, magento_client):
    backend.respond("product", {"error": "Product not found"})

    with pytest.raises(MagentoAPIError, match="API Error: Product not found"):
        await magento_client.get_product_by_sku("COF-404")


@pytest.mark.asyncio
async def test_network_failure_is_reported(backend, magento_client):
    backend.fail("categories", httpx.ConnectError("connection refused"))

    with pytest.raises(MagentoAPIError, match="connection refused"):
        await magento_client.get_categories()


@pytest.mark.asyncio
async def test_timeout_is_reported(backend, magento_client):
    backend.fail("products", httpx.ReadTimeout("slow"))

    with pytest.raises(MagentoAPIError, match="timed out"):
        await magento_client.get_products()


@pytest.mark.asyncio
async def test_invalid_json_is_reported(backend, magento_client):
    backend.routes["products"] = lambda request: httpx.Response(200, text="<html>")

    with pytest.raises(MagentoAPIError, match="invalid JSON"):
        await magento_client.get_products()


@pytest.mark.asyncio
async def test_get_categories_wraps_children_in_synthetic_root(backend, magento_client):
    backend.respond(
        "categories",
        [
            {
                "id": 3,
                "parent_id": 1,
                "name": "Coffee",
                "is_active": True,
                "position": 1,
                "level": 1,
                "product_count": 8,
                "children_data": [
                    {"id": 6, "parent_id": 3, "name": "Decaf", "level": 2}
                ],
            },
            {"id": 4, "parent_id": 1, "name": "Equipment", "is_active": False},
        ],
    )

    root = await magento_client.get_categories()

    assert (root.id, root.parent_id, root.name, root.level) == (1, 0, "Root", 0)
    assert [c.name for c in root.children_data] == ["Coffee", "Equipment"]
    assert root.children_data[0].children_data[0].name == "Decaf"
    assert root.children_data[1].is_active is False
    assert dict(backend.params()) == {"action": "categories"}


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", ["oops", 42])
async def test_get_categories_rejects_non_list_payload(
    backend, magento_client, payload
):
    backend.respond("categories", payload)

    with pytest.raises(MagentoAPIError, match="malformed category payload"):
        await magento_client.get_categories()


@pytest.mark.asyncio
async def test_get_category_by_id_is_a_placeholder(backend, magento_client):
    category = await magento_client.get_category_by_id(7)

    assert category.name == "Category 7"
    assert category.product_count == 0
    assert category.parent_id == 1
    assert category.level == 1
    assert backend.requests == []


def test_build_search_criteria_renders_magento_keys():
    criteria = SearchCriteria(
        filter_groups=(
            FilterGroup(
                filters=(
                    SearchFilter(field="name", value="%House%", condition_type="like"),
                    SearchFilter(field="status", value="1"),
                )
            ),
        ),
        sort_orders=(SortOrder(field="price", direction="DESC"),),
        page_size=12,
        current_page=2,
    )

    query = httpx.QueryParams(build_search_criteria(criteria))

    assert query["searchCriteria[filterGroups][0][filters][0][field]"] == "name"
    assert query["searchCriteria[filterGroups][0][filters][0][value]"] == "%House%"
    assert query["searchCriteria[filterGroups][0][filters][0][condition_type]"] == "like"
    assert query["searchCriteria[filterGroups][0][filters][1][field]"] == "status"
    assert "searchCriteria[filterGroups][0][filters][1][condition_type]" not in query
    assert query["searchCriteria[sortOrders][0][direction]"] == "DESC"
    assert query["searchCriteria[pageSize]"] == "12"
    assert query["searchCriteria[currentPage]"] == "2"
