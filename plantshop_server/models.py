"""Data models for the plant shop catalog and cart."""

from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field


class Plant(BaseModel):
    """Represents a plant from the remote catalog."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(description="Plant ID")
    name: str = Field(description="Plant name")
    description: str = Field(default="", description="Full description")
    small_description: str = Field(default="", description="Short description shown on cards")
    category: str = Field(default="", description="Category label")
    category_name: str = Field(default="", description="Category display name")
    price: Decimal = Field(default=Decimal("0"), ge=0, description="Unit price in BDT")
    image_url: str = Field(default="", description="Plant image URL")


class Category(BaseModel):
    """Represents a plant category."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Category ID")
    name: str = Field(default="", description="Category name")


class CartLine(BaseModel):
    """Represents one aggregated line in the shopping cart."""

    plant_id: int = Field(description="ID of the plant this line was added for")
    name: str = Field(description="Plant name at the time it was added")
    unit_price: Decimal = Field(ge=0, description="Plant price at the time it was added")
    quantity: int = Field(default=1, ge=1, description="Number of units")

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


class CartSummary(BaseModel):
    """Read-only snapshot of the shopping cart."""

    lines: list[CartLine] = Field(default_factory=list, description="Cart lines in insertion order")
    total: Decimal = Field(default=Decimal("0"), description="Total cart value")
    display_total: str = Field(default="0", description="Total formatted for display")
    item_count: int = Field(default=0, description="Total number of units")
