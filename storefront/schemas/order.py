"""Order Schemas — checkout payload, order responses and the order filter.

Invariants:
    - customer_name non-empty after strip, customer_email email-formatted
    - price and total_amount are finite and non-negative
    - Cart emptiness and quantity rules are left to OrderWorkflow so callers
      receive the domain messages ("Cart cannot be empty", ...)

Design Decisions:
    - StrictInt | StrictFloat for quantity: "2" or true are rejected here,
      fractional or non-positive numbers by the workflow
    - to_draft() converts to the frozen domain OrderDraft
"""

from datetime import datetime
from uuid import UUID

from pydantic import (
    BaseModel, ConfigDict, EmailStr, Field, StrictFloat, StrictInt, field_validator,
)

from storefront.core.domain_types import CartLine, OrderDraft, OrderStatus
from storefront.schemas.common import EntityFilter


class CartItem(BaseModel):
    """One submitted cart entry; price is the price shown at checkout."""
    product_id: UUID
    title: str = Field(max_length=200)
    price: float = Field(ge=0, allow_inf_nan=False)
    quantity: StrictInt | StrictFloat


class OrderCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    customer_name: str = Field(min_length=1, max_length=200)
    customer_email: EmailStr
    items: list[CartItem] = Field(default_factory=list)
    total_amount: float = Field(ge=0, allow_inf_nan=False)

    @field_validator("customer_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("customer_name cannot be empty or whitespace")
        return v

    def to_draft(self) -> OrderDraft:
        return OrderDraft(
            customer_name=self.customer_name,
            customer_email=str(self.customer_email),
            total_amount=self.total_amount,
            items=[
                CartLine(
                    product_id=item.product_id,
                    title=item.title,
                    price=item.price,
                    quantity=item.quantity,
                )
                for item in self.items
            ],
        )


class OrderUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    customer_name: str | None = Field(None, min_length=1, max_length=200)
    customer_email: EmailStr | None = None
    card_number: str | None = Field(None, max_length=32)
    expiry: str | None = Field(None, max_length=8)
    cvv: str | None = Field(None, max_length=8)
    phone_number: str | None = Field(None, max_length=32)
    payment_method: str | None = Field(None, max_length=50)


class OrderLineItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    order_id: UUID
    product_id: UUID
    quantity: int
    created_at: datetime
    updated_at: datetime


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    customer_name: str
    customer_email: str
    card_number: str | None
    expiry: str | None
    cvv: str | None
    phone_number: str | None
    payment_method: str | None
    code: str
    total_amount: float
    assigned_to: str
    created_at: datetime
    updated_at: datetime
    items: list[OrderLineItemResponse]
    status: OrderStatus = OrderStatus.CREATED


class OrderCreated(BaseModel):
    success: bool = True
    order_id: UUID
    message: str = "Order created successfully"
    order: OrderResponse


class OrderFilter(EntityFilter):
    customer_name: str | None = None
    customer_email: str | None = None
    payment_method: str | None = None
    code: str | None = None
    total_amount: float | None = None
    assigned_to: str | None = None
