from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..models import Brand, Category, Product, ProductPage, ProductQuery
from .base import BaseClient, expect_list, expect_object


@dataclass
class ProductsClient(BaseClient):
    module: str = "products"

    async def list_products(self, query: ProductQuery | Mapping[str, Any] | None = None) -> ProductPage:
        params = None
        if query is not None:
            product_query = query if isinstance(query, ProductQuery) else ProductQuery.model_validate(query)
            params = product_query.to_payload()
        data = await self._request("GET", "/products", params=params, operation="list_products")
        return ProductPage.model_validate(expect_object(data, "product list"))

    async def get_product(self, product_id: int) -> Product:
        data = await self._request("GET", f"/products/{product_id}", operation="get_product")
        return Product.model_validate(expect_object(data, "product"))


@dataclass
class CatalogClient(BaseClient):
    module: str = "catalog"

    async def categories(self) -> list[Category]:
        data = await self._request("GET", "/categories", operation="categories")
        return [Category.model_validate(row) for row in expect_list(data, "categories")]

    async def brands(self) -> list[Brand]:
        data = await self._request("GET", "/brands", operation="brands")
        return [Brand.model_validate(row) for row in expect_list(data, "brands")]
