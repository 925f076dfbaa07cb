"""
Order Domain Models

An Order is written once per successful Braintree sale and never
mutated by the checkout flow afterwards.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CartLineItem(BaseModel):
    """
    Client-held cart entry

    Only `price` is read by checkout; everything else the client sends
    (product id, name, ...) is kept and stored on the order as-is.
    """
    price: Union[int, float] = Field(..., description="Price snapshot taken when the item was added")

    model_config = ConfigDict(extra="allow")


class CheckoutRequest(BaseModel):
    """Body of POST /braintree/payment"""
    nonce: str = Field(..., min_length=1, description="Payment method nonce from the client SDK")
    cart: List[CartLineItem] = Field(..., description="Cart line items")

    @property
    def total(self) -> float:
        total = 0
        for item in self.cart:
            total += item.price
        return total


class Order(BaseModel):
    """
    Order domain model

    Fields:
        id: Order identity
        products: Cart entries as submitted by the buyer
        payment: Gateway receipt
        buyer: Identity of the authenticated requester
        status: Fulfilment status
        created_at: When the order was stored
    """

    id: Optional[UUID] = Field(None, description="Order ID")
    products: List[Dict[str, Any]] = Field(default_factory=list)
    payment: Dict[str, Any] = Field(default_factory=dict)
    buyer: str = Field(..., description="Buyer user id")
    status: str = Field("Not Process", description="Fulfilment status")
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        data = self.model_dump()
        data["id"] = str(self.id) if self.id else None
        data["created_at"] = self.created_at.isoformat() if self.created_at else None
        return data
