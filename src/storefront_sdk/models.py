from __future__ import annotations

import math
from typing import Annotated, Any, Generic, List, Optional, TypeVar

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator

T = TypeVar("T")

CartKey = tuple[str, Optional[str]]


def _as_str(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


EntityId = Annotated[str, BeforeValidator(_as_str)]


class UserRecord(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: EntityId = Field(validation_alias=AliasChoices("id", "_id"))
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    email: str | None = None
    role: str | None = None
    phone: str | None = None
    address: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class LoginResponse(BaseModel):
    """Flat user record with the bearer credential, as returned by /auth/login."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    token: str
    user: UserRecord

    @model_validator(mode="before")
    @classmethod
    def _split_user(cls, data: Any) -> Any:
        if isinstance(data, dict) and "user" not in data:
            user = {key: value for key, value in data.items() if key != "token"}
            return {"token": data.get("token"), "user": user}
        return data


class SessionIdentity(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    access_token: str
    user: UserRecord
    env_name: str | None = None

    @property
    def user_id(self) -> str:
        return self.user.id


class Product(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: EntityId = Field(validation_alias=AliasChoices("id", "_id"))
    name: str = Field(default="", validation_alias=AliasChoices("name", "title"))
    description: str | None = None
    price: float = 0.0
    regular_price: float | None = Field(default=None, alias="regularPrice")
    sale_price: float | None = Field(default=None, alias="salePrice")
    stock: int | None = None
    category: str | None = None
    brand: str | None = None
    colors: List[str] = Field(default_factory=list)
    image: str | None = None
    additional_images: List[str] = Field(default_factory=list, alias="additionalImages")

    @field_validator("colors", "additional_images", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def base_price(self) -> float:
        return self.regular_price if self.regular_price is not None else self.price

    @property
    def effective_price(self) -> float:
        base = self.base_price
        if self.sale_price is not None and self.sale_price < base:
            return self.sale_price
        return base

    @property
    def image_urls(self) -> list[str]:
        urls = [self.image] if self.image else []
        return urls + [url for url in self.additional_images if url and url != self.image]


class CartLine(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: EntityId | None = Field(default=None, alias="_id")
    product: Product
    quantity: int = 1
    selected_color: str | None = Field(default=None, alias="selectedColor")

    @property
    def key(self) -> CartKey:
        return (self.product.id, self.selected_color)

    @property
    def line_total(self) -> float:
        return self.product.effective_price * self.quantity


class Cart(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: EntityId | None = Field(default=None, alias="_id")
    user_id: EntityId | None = Field(default=None, alias="userId")
    items: List[CartLine] = Field(default_factory=list)

    @field_validator("items", mode="before")
    @classmethod
    def _drop_orphan_lines(cls, value: Any) -> Any:
        # lines whose product was deleted come back without product data
        if isinstance(value, list):
            return [item for item in value if not isinstance(item, dict) or item.get("product")]
        return [] if value is None else value


class WishlistItem(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    product: Product
    added_at: str | None = Field(default=None, validation_alias=AliasChoices("added_at", "addedAt"))

    @property
    def key(self) -> str:
        return self.product.id


class WishlistResponse(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    items: List[WishlistItem] = Field(default_factory=list)
    total_items: int | None = Field(default=None, alias="totalItems")

    @field_validator("items", mode="before")
    @classmethod
    def _drop_missing_products(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [item for item in value if item is not None and (not isinstance(item, dict) or item.get("product"))]
        return [] if value is None else value


class Page(BaseModel, Generic[T]):
    items: List[T] = Field(default_factory=list)
    page: int = 1
    page_size: int = 10
    total: int = 0

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total / self.page_size)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages
