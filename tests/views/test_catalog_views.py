from __future__ import annotations

import asyncio
from urllib.parse import parse_qs, urlparse

import responses

from storefront_client_sdk.models import Product
from storefront_client_sdk.navigation import Route
from storefront_client_sdk.views import CatalogFilters, CatalogView, ProductDetailView, SearchView

from .helpers import BASE_URL, cart_payload, product_payload

PRODUCTS = {
    "content": [
        product_payload(1, "Standing Desk", brandName="Acme"),
        product_payload(2, "Desk Lamp", description="Warm light"),
        product_payload(3, "Office Chair", categoryName="Seating"),
    ]
}


def _query(index: int) -> dict[str, list[str]]:
    return parse_qs(urlparse(responses.calls[index].request.url).query)


@responses.activate
def test_catalog_load_fetches_products_and_facets(context) -> None:
    responses.add(responses.GET, f"{BASE_URL}/products", json=PRODUCTS)
    responses.add(responses.GET, f"{BASE_URL}/categories", json=[{"id": 4, "name": "Seating"}])
    responses.add(responses.GET, f"{BASE_URL}/brands", json=[{"id": 5, "name": "Acme"}])
    view = CatalogView(context)

    asyncio.run(view.load(CatalogFilters(category_id=4)))

    assert [product.id for product in view.products] == [1, 2, 3]
    assert view.categories[0].name == "Seating"
    assert view.brands[0].name == "Acme"
    product_calls = [call for call in responses.calls if urlparse(call.request.url).path == "/products"]
    query = parse_qs(urlparse(product_calls[0].request.url).query)
    assert query["categoryId"] == ["4"]
    assert query["size"] == ["50"]
    assert view.error is None


@responses.activate
def test_catalog_partial_failure_sets_error(context) -> None:
    responses.add(responses.GET, f"{BASE_URL}/products", json=PRODUCTS)
    responses.add(responses.GET, f"{BASE_URL}/categories", json=[])
    responses.add(responses.GET, f"{BASE_URL}/brands", json={"message": "Brands unavailable"}, status=500)
    view = CatalogView(context)

    asyncio.run(view.load())

    assert len(view.products) == 3
    assert view.brands == []
    assert view.error == "Brands unavailable"


@responses.activate
def test_featured_products_use_smaller_page(context) -> None:
    responses.add(responses.GET, f"{BASE_URL}/products", json=PRODUCTS)
    view = CatalogView(context)

    asyncio.run(view.load_featured())

    assert _query(0)["size"] == ["18"]
    assert len(view.products) == 3


@responses.activate
def test_add_to_cart_reconciles_counter(context, logged_in_session, notifier) -> None:
    responses.add(responses.POST, f"{BASE_URL}/cart/items", json=cart_payload((1, 2, "10.00"), (2, 1, "4.00")))
    view = CatalogView(context)
    product = Product.model_validate(product_payload(1, "Standing Desk"))

    outcome = asyncio.run(view.add_to_cart(product))

    assert outcome.succeeded
    assert context.cart.count == 3
    assert notifier.successes == ["Standing Desk added to cart!"]


@responses.activate
def test_forbidden_add_to_cart_rolls_back_and_prompts_login(context, logged_in_session, notifier, navigator) -> None:
    responses.add(responses.GET, f"{BASE_URL}/cart", json=cart_payload((7, 1, "3.00")))
    responses.add(responses.POST, f"{BASE_URL}/cart/items", json={"message": "Forbidden"}, status=403)
    asyncio.run(context.cart.resync())
    view = CatalogView(context)

    asyncio.run(view.add_to_cart(Product.model_validate(product_payload(1, "Desk"))))

    assert context.cart.count == 1
    assert notifier.errors == ["Please login to add items to cart"]
    assert navigator.is_at(Route.LOGIN)
    assert logged_in_session.is_logged_in


@responses.activate
def test_anonymous_add_to_cart_redirects_silently(context, session, notifier, navigator) -> None:
    session.initialize()
    responses.add(responses.POST, f"{BASE_URL}/cart/items", status=401)
    view = CatalogView(context)

    asyncio.run(view.add_to_cart(Product.model_validate(product_payload(1, "Desk"))))

    assert context.cart.count == 0
    assert notifier.notifications == []
    assert navigator.is_at(Route.LOGIN)


@responses.activate
def test_search_filters_first_page_locally(context) -> None:
    responses.add(responses.GET, f"{BASE_URL}/products", json=PRODUCTS)
    view = SearchView(context)

    assert [product.id for product in asyncio.run(view.search("desk"))] == [1, 2]
    assert [product.id for product in asyncio.run(view.search("ACME"))] == [1]
    assert [product.id for product in asyncio.run(view.search("seating"))] == [3]
    assert view.query == "seating"


@responses.activate
def test_search_failure_reports_error(context) -> None:
    responses.add(responses.GET, f"{BASE_URL}/products", body="", status=500)
    view = SearchView(context)

    assert asyncio.run(view.search("desk")) == []
    assert view.error == "Search failed"


@responses.activate
def test_product_detail_load_and_missing_product(context, navigator) -> None:
    responses.add(responses.GET, f"{BASE_URL}/products/1", json=product_payload(1, "Desk"))
    responses.add(responses.GET, f"{BASE_URL}/products/99", json={"message": "Not found"}, status=404)
    view = ProductDetailView(context)

    assert asyncio.run(view.load(1)).name == "Desk"
    assert asyncio.run(view.load(99)) is None
    assert navigator.is_at(Route.PRODUCTS)


@responses.activate
def test_product_detail_add_to_cart_bumps_counter_immediately(context, logged_in_session, notifier) -> None:
    responses.add(responses.GET, f"{BASE_URL}/products/1", json=product_payload(1, "Desk"))
    responses.add(responses.POST, f"{BASE_URL}/cart/items", json=cart_payload((1, 1, "10.00")))
    view = ProductDetailView(context)

    async def scenario():
        await view.load(1)
        task = view.add_to_cart()
        counted = context.cart.count
        outcome = await task
        return counted, outcome

    counted, outcome = asyncio.run(scenario())

    assert counted == 1
    assert outcome.succeeded
    assert context.cart.count == 1
    assert notifier.successes == ["Added to Cart"]


@responses.activate
def test_wishlist_conflict_keeps_saved_state(context, logged_in_session, notifier) -> None:
    responses.add(responses.GET, f"{BASE_URL}/products/1", json=product_payload(1, "Desk"))
    responses.add(responses.POST, f"{BASE_URL}/wishlist/1", json={"message": "exists"}, status=409)
    view = ProductDetailView(context)
    asyncio.run(view.load(1))

    asyncio.run(view.add_to_wishlist())

    assert view.wishlisted is True
    assert notifier.errors == ["Item already in wishlist"]


@responses.activate
def test_wishlist_failure_rolls_back(context, logged_in_session, notifier) -> None:
    responses.add(responses.GET, f"{BASE_URL}/products/1", json=product_payload(1, "Desk"))
    responses.add(responses.POST, f"{BASE_URL}/wishlist/1", status=500)
    view = ProductDetailView(context)
    asyncio.run(view.load(1))

    asyncio.run(view.add_to_wishlist())

    assert view.wishlisted is False
    assert notifier.errors == ["Failed to save to wishlist"]


@responses.activate
def test_product_detail_malformed_body_returns_to_catalog(context, navigator) -> None:
    responses.add(responses.GET, f"{BASE_URL}/products/5", json={"id": 5, "name": None})
    view = ProductDetailView(context)

    assert asyncio.run(view.load(5)) is None
    assert navigator.is_at(Route.PRODUCTS)
