"""Purchase schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PurchaseCreate(BaseModel):
    """Record the list's checked items as a purchase."""

    purchased_at: datetime | None = None
    notes: str | None = Field(None, max_length=2000)


class PurchaseItemUpdate(BaseModel):
    """Correct the quantity or price of one purchased line."""

    id: int
    purchased_quantity: float | None = Field(None, gt=0)
    price: float | None = Field(None, ge=0)


class PurchaseUpdate(BaseModel):
    """Update a recorded purchase."""

    purchased_at: datetime | None = None
    notes: str | None = Field(None, max_length=2000)
    items: list[PurchaseItemUpdate] = Field(default_factory=list)


class PurchaseItemResponse(BaseModel):
    """Purchased line."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    item_id: int | None
    name: str
    quantity: float | None
    purchased_quantity: float | None
    unit_id: str | None
    price: float
    subtotal: float
    store_id: int | None


class PurchaseResponse(BaseModel):
    """Purchase with its lines."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    list_id: int
    recorded_by: int | None
    purchased_at: datetime
    total_paid: float | None
    notes: str | None
    items: list[PurchaseItemResponse]
    created_at: datetime
