from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for wire models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class UserIdentity(ApiModel):
    username: str
    email: str | None = None


class AuthResponse(ApiModel):
    access_token: str
    token_type: str = "Bearer"
    user: Optional[UserIdentity] = None


class LoginRequest(ApiModel):
    username_or_email: str
    password: str


class RegisterRequest(ApiModel):
    username: str
    email: str
    password: str
    first_name: str
    last_name: str
    phone_number: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = "United States"


class UserProfile(ApiModel):
    id: int | None = None
    username: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None

    def identity(self) -> UserIdentity:
        return UserIdentity(username=self.username, email=self.email)


class Product(ApiModel):
    id: int
    name: str
    description: str | None = None
    price: Decimal
    image_url: str | None = None
    category_id: int | None = None
    category_name: str | None = None
    brand_id: int | None = None
    brand_name: str | None = None
    is_active: bool | None = None

    def matches(self, query: str) -> bool:
        needle = query.strip().lower()
        if not needle:
            return True
        haystacks = (self.name, self.description, self.category_name, self.brand_name)
        return any(needle in value.lower() for value in haystacks if value)


class ProductPage(ApiModel):
    content: List[Product] = Field(default_factory=list)
    total_elements: int | None = None
    total_pages: int | None = None
    number: int | None = None
    size: int | None = None

    @field_validator("content", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return value if value is not None else []


class ProductQuery(ApiModel):
    page: int = 0
    size: int = 50
    category_id: int | None = None
    brand_id: int | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None


class Category(ApiModel):
    id: int
    name: str


class Brand(ApiModel):
    id: int
    name: str


class CartItem(ApiModel):
    id: int
    product_id: int
    product_name: str | None = None
    quantity: int
    unit_price: Decimal | None = None
    subtotal: Decimal | None = None
    product_image_url: str | None = None


class Cart(ApiModel):
    id: int | None = None
    items: List[CartItem] = Field(default_factory=list)
    total_amount: Decimal | None = None

    @field_validator("items", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return value if value is not None else []

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def recalculate_total(self) -> Cart:
        """Rough local total; the server stays the source of truth."""
        total = sum(
            ((item.unit_price or Decimal("0")) * item.quantity for item in self.items),
            Decimal("0"),
        )
        return self.model_copy(update={"total_amount": total})


class OrderItem(ApiModel):
    id: int | None = None
    product_id: int | None = None
    product_name: str | None = None
    quantity: int = 0
    unit_price: Decimal | None = None
    subtotal: Decimal | None = None


class Order(ApiModel):
    id: int
    user_id: int | None = None
    items: List[OrderItem] = Field(default_factory=list)
    total_amount: Decimal | None = None
    status: str | None = None
    created_at: datetime | None = None
    estimated_delivery_date: datetime | None = None


class WishlistEntry(ApiModel):
    id: int | None = None
    product: Optional[Product] = None
    created_at: datetime | None = None
