"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.  DTOs are
immutable (``frozen=True``) and reject unknown fields.

Product input is a tagged union keyed on ``type``:

- ``CreatePhysicalProductDTO`` may carry ``shipping_model`` and never
  ``file_url``;
- ``CreateDigitalProductDTO`` may carry ``file_url`` and never
  ``shipping_model``.

``CreateProductDTO`` is the discriminated union of both; parse it with
``parse_create_product``.  The same union is the candidate the validation
engine checks, for creates and for merged updates alike.

- ``UpdateProductDTO``: partial update; only supplied fields change.
- ``UpdateSkusDTO``: list of SKU patches matched by variant combination.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    TypeAdapter,
    field_validator,
)

from modules.products.models import ProductStatus

NonNegative = Annotated[float, Field(ge=0)]


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


class VariantDTO(BaseModel):
    """One variant axis, e.g. ``{"name": "color", "values": ["red", "blue"]}``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    values: List[str] = Field(min_length=1)

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Variant name must not be empty.")
        return v.strip()

    @field_validator("values")
    @classmethod
    def values_must_not_be_empty(cls, v: List[str]) -> List[str]:
        if any(not value.strip() for value in v):
            raise ValueError("Variant values must not be empty.")
        return [value.strip() for value in v]


class PackageDimensionsDTO(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    width: NonNegative
    height: NonNegative
    length: NonNegative


class ShippingModelDTO(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    description: Optional[str] = None
    weight: Optional[NonNegative] = None
    dimensions: Optional[PackageDimensionsDTO] = None


class SkuDimensionsDTO(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    width: NonNegative
    height: NonNegative
    length: NonNegative
    weight: NonNegative


# ---------------------------------------------------------------------------
# Product input (tagged union on ``type``)
# ---------------------------------------------------------------------------


class _ProductFieldsDTO(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    title: str
    description: Optional[str] = None
    status: ProductStatus
    collection_id: Optional[str] = None
    variants: List[VariantDTO] = []

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return v.strip()


class CreatePhysicalProductDTO(_ProductFieldsDTO):
    type: Literal["physical"]
    shipping_model: Optional[ShippingModelDTO] = None


class CreateDigitalProductDTO(_ProductFieldsDTO):
    type: Literal["digital"]
    file_url: Optional[HttpUrl] = None


CreateProductDTO = Annotated[
    Union[CreatePhysicalProductDTO, CreateDigitalProductDTO],
    Field(discriminator="type"),
]

_create_product_adapter: TypeAdapter = TypeAdapter(CreateProductDTO)


def parse_create_product(
    data: Any,
) -> Union[CreatePhysicalProductDTO, CreateDigitalProductDTO]:
    """Validate raw input into the physical or digital DTO.

    Raises:
        pydantic.ValidationError: malformed input, unknown ``type``, or a
            field that belongs to the other product type.
    """
    return _create_product_adapter.validate_python(data)


class UpdateProductDTO(BaseModel):
    """All fields optional; read the patch with ``model_dump(exclude_unset=True)``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[Literal["physical", "digital"]] = None
    status: Optional[ProductStatus] = None
    collection_id: Optional[str] = None
    shipping_model: Optional[ShippingModelDTO] = None
    file_url: Optional[HttpUrl] = None
    variants: Optional[List[VariantDTO]] = None

    def patch(self) -> Dict[str, Any]:
        """Supplied fields only, as plain JSON-compatible values."""
        return self.model_dump(exclude_unset=True, mode="json")


# ---------------------------------------------------------------------------
# SKU input
# ---------------------------------------------------------------------------


class SkuPatchDTO(BaseModel):
    """Target a SKU by its combination; unset fields are left untouched."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    variant_combination: Dict[str, str]
    price: Optional[Decimal] = Field(
        default=None, ge=0, max_digits=12, decimal_places=2
    )
    quantity: Optional[int] = Field(default=None, ge=0)
    dimensions: Optional[SkuDimensionsDTO] = None


class UpdateSkusDTO(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    skus: List[SkuPatchDTO] = Field(min_length=1)
