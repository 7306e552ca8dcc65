from __future__ import annotations

import asyncio
from dataclasses import dataclass
from decimal import Decimal

from ..models import Brand, Category, Product, ProductQuery
from ..mutations import MutationOutcome
from .base import ViewController, add_to_cart_mutation

CATALOG_PAGE_SIZE = 50
FEATURED_PAGE_SIZE = 18


@dataclass
class CatalogFilters:
    category_id: int | None = None
    brand_id: int | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None

    def to_query(self, *, page: int = 0, size: int = CATALOG_PAGE_SIZE) -> ProductQuery:
        return ProductQuery(
            page=page,
            size=size,
            category_id=self.category_id or None,
            brand_id=self.brand_id or None,
            min_price=self.min_price,
            max_price=self.max_price,
        )


class CatalogView(ViewController):
    module = "catalog"

    def __init__(self, context) -> None:
        super().__init__(context)
        self.filters = CatalogFilters()
        self.products: list[Product] = []
        self.categories: list[Category] = []
        self.brands: list[Brand] = []

    async def load(self, filters: CatalogFilters | None = None) -> None:
        if filters is not None:
            self.filters = filters
        self.loading = True
        self.error = None
        try:
            page, categories, brands = await asyncio.gather(
                self.fetch(self.clients.products.list_products(self.filters.to_query()), what="products"),
                self.fetch(self.clients.catalog.categories(), what="categories"),
                self.fetch(self.clients.catalog.brands(), what="brands"),
            )
        finally:
            self.loading = False
        if not self.active:
            return
        self.products = page.content if page is not None else []
        self.categories = categories or []
        self.brands = brands or []

    async def load_featured(self) -> None:
        self.loading = True
        try:
            page = await self.fetch(
                self.clients.products.list_products(ProductQuery(page=0, size=FEATURED_PAGE_SIZE)),
                what="featured",
            )
        finally:
            self.loading = False
        if self.active:
            self.products = page.content if page is not None else []

    async def add_to_cart(self, product: Product) -> MutationOutcome:
        mutation = add_to_cart_mutation(self, product.id, success_message=f"{product.name} added to cart!")
        return await self.context.coordinator.run(mutation)


class SearchView(ViewController):
    """Client-side search over the first catalog page."""

    module = "search"

    def __init__(self, context) -> None:
        super().__init__(context)
        self.query = ""
        self.results: list[Product] = []

    async def search(self, query: str) -> list[Product]:
        self.query = query
        self.loading = True
        self.error = None
        try:
            page = await self.fetch(
                self.clients.products.list_products(ProductQuery(page=0, size=CATALOG_PAGE_SIZE)),
                what="search",
                fallback="Search failed",
            )
        finally:
            self.loading = False
        if not self.active:
            return self.results
        products = page.content if page is not None else []
        self.results = [product for product in products if product.matches(query)]
        return self.results

    async def add_to_cart(self, product: Product) -> MutationOutcome:
        return await self.context.coordinator.run(add_to_cart_mutation(self, product.id))
