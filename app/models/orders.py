import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, field_validator

from app.models.tier import Plan


class OrderStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"

    def __str__(self):
        return self.value


class Order(BaseModel):
    id: str
    plan: Plan
    email: Optional[str] = None
    payment_address: str
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime.datetime
    api_key: Optional[str] = None
    txid: Optional[str] = None
    completed_at: Optional[datetime.datetime] = None


class CreateOrderDTO(BaseModel):
    plan: Optional[str] = None
    email: Optional[EmailStr] = None

    @field_validator("plan", mode="before")
    @classmethod
    def _plan_selector(cls, value):
        # anything but a string selects the default plan
        return value if isinstance(value, str) else None


class PaymentInstructions(BaseModel):
    address: str
    amount: float
    currency: str
    network: str
    minimum_transaction: Optional[float] = None


class OrderCreatedResDTO(BaseModel):
    order_id: str
    status: OrderStatus
    plan: Plan
    payment: PaymentInstructions
    status_url: str


class OrderStatusResDTO(BaseModel):
    order_id: str
    status: OrderStatus
    plan: str
    api_key: Optional[str] = None
    usage: Optional[str] = None
    payment_address: Optional[str] = None
    price: Optional[float] = None
    message: Optional[str] = None
