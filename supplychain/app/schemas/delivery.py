from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from supplychain.app.db.models.core_types import CustomerOrderStatus, DeliveryStatus
from supplychain.app.schemas.common import ORMModel


# ---------- CUSTOMERS ----------
class CustomerCreate(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    address: str = Field(min_length=1, max_length=255)
    city: str = Field(min_length=1, max_length=100)


class CustomerUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=2, max_length=100)
    address: str | None = Field(default=None, min_length=1, max_length=255)
    city: str | None = Field(default=None, min_length=1, max_length=100)


class CustomerRead(ORMModel):
    id: int
    name: str
    address: str | None
    city: str | None
    active_orders_count: int


# ---------- DELIVERIES ----------
class DeliveryCreate(BaseModel):
    order_id: int
    vehicle: str | None = Field(default=None, max_length=100)
    driver: str | None = Field(default=None, max_length=100)
    status: DeliveryStatus | None = None
    delivery_date: date | None = None
    cost: Decimal | None = Field(default=None, ge=0)


class DeliveryUpdate(BaseModel):
    vehicle: str | None = Field(default=None, max_length=100)
    driver: str | None = Field(default=None, max_length=100)
    status: DeliveryStatus | None = None
    delivery_date: date | None = None
    cost: Decimal | None = Field(default=None, ge=0)


class DeliveryRead(ORMModel):
    id: int
    order_id: int
    order_details: str | None
    vehicle: str | None
    driver: str | None
    status: DeliveryStatus
    delivery_date: date | None
    cost: float | None


class DeliveryCostRead(BaseModel):
    delivery_id: int
    cost: float


# ---------- CUSTOMER ORDERS ----------
class CustomerOrderCreate(BaseModel):
    customer_id: int
    product_id: int
    quantity: int = Field(ge=1)
    status: CustomerOrderStatus | None = None


class CustomerOrderUpdate(BaseModel):
    customer_id: int | None = None
    product_id: int | None = None
    quantity: int | None = Field(default=None, ge=1)
    status: CustomerOrderStatus | None = None


class CustomerOrderRead(ORMModel):
    id: int
    customer_id: int
    customer_name: str | None
    product_id: int
    product_name: str | None
    quantity: int
    status: CustomerOrderStatus
    delivery: DeliveryRead | None = None
