# app/schemas/sweet.py
import math

from pydantic import (
    AnyHttpUrl,
    ConfigDict,
    TypeAdapter,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel
from sqlmodel import SQLModel, Field

from app.models.sweet import MAX_QUANTITY


_url_adapter = TypeAdapter(AnyHttpUrl)


def _check_url(v: str | None) -> str | None:
    """
    Blank means "no image"; anything else must be an http(s) URL.

    The original string is kept, pydantic's normalised form is only used
    as a validity check.
    """
    if v is None:
        return None
    v = v.strip()
    if not v:
        return None
    try:
        _url_adapter.validate_python(v)
    except ValidationError:
        raise ValueError("must be a valid http(s) URL")
    return v


def _check_not_blank(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("field cannot be empty")
    return v


def _check_finite(v: float | None) -> float | None:
    if v is not None and not math.isfinite(v):
        raise ValueError("must be a finite number")
    return v


class SweetWriteBase(SQLModel):
    """
    Shared config for sweet payloads.

    - JSON uses camelCase (imageUrl), attributes snake_case (image_url).
    - Unknown keys (id, adminId, ...) are dropped, not rejected.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class SweetCreate(SweetWriteBase):
    """
    Payload for creating a sweet (admin only).

    `id` and `adminId` are assigned server-side.
    """

    name: str = Field(max_length=100)
    category: str
    price: float = Field(gt=0)
    quantity: int = Field(default=0, ge=0, le=MAX_QUANTITY)
    image_url: str | None = None
    description: str | None = Field(default=None, max_length=500)

    @field_validator("name", "category")
    @classmethod
    def not_empty(cls, v: str) -> str:
        return _check_not_blank(v)

    @field_validator("price")
    @classmethod
    def finite_price(cls, v: float) -> float:
        return _check_finite(v)

    @field_validator("image_url")
    @classmethod
    def valid_url(cls, v: str | None) -> str | None:
        return _check_url(v)


class SweetUpdate(SweetWriteBase):
    """
    Partial update payload for sweets.
    All fields are optional; only the ones sent are applied.
    """

    name: str | None = Field(default=None, max_length=100)
    category: str | None = None
    price: float | None = Field(default=None, gt=0)
    quantity: int | None = Field(default=None, ge=0, le=MAX_QUANTITY)
    image_url: str | None = None
    description: str | None = Field(default=None, max_length=500)

    @field_validator("name", "category")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        return _check_not_blank(v)

    @field_validator("price")
    @classmethod
    def finite_price(cls, v: float | None) -> float | None:
        return _check_finite(v)

    @field_validator("image_url")
    @classmethod
    def valid_url(cls, v: str | None) -> str | None:
        return _check_url(v)

    def changes(self) -> dict:
        """
        Fields explicitly sent by the client.

        Required columns cannot be cleared with null, so those are dropped.
        """
        data = self.model_dump(exclude_unset=True)
        for key in ("name", "category", "price", "quantity"):
            if key in data and data[key] is None:
                del data[key]
        return data


class SweetRead(SQLModel):
    """
    Sweet representation for clients.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: str
    name: str
    category: str
    price: float
    quantity: int
    image_url: str | None = None
    description: str | None = None
    admin_id: str


class RestockRequest(SQLModel):
    """Restock payload. Floats, strings and booleans are rejected."""

    model_config = ConfigDict(extra="ignore")

    amount: int = Field(gt=0, le=MAX_QUANTITY)

    @field_validator("amount", mode="before")
    @classmethod
    def whole_number(cls, v):
        # bool is a subclass of int
        if isinstance(v, bool) or not isinstance(v, int):
            raise ValueError("amount must be an integer")
        return v


class MessageResponse(SQLModel):
    message: str
