from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

from supplychain.app.db.models.core_types import SupplyOrderStatus
from supplychain.app.schemas.common import ORMModel


# ---------- SUPPLIERS ----------
class SupplierCreate(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    contact: str = Field(min_length=1, max_length=200)
    rating: float | None = Field(default=None, ge=0, le=5)
    lead_time: int = Field(ge=1)


class SupplierUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=2, max_length=100)
    contact: str | None = Field(default=None, min_length=1, max_length=200)
    rating: float | None = Field(default=None, ge=0, le=5)
    lead_time: int | None = Field(default=None, ge=1)


class SupplierRead(ORMModel):
    id: int
    name: str
    contact: str
    rating: float | None
    lead_time: int
    active_orders_count: int


# ---------- RAW MATERIALS ----------
class RawMaterialCreate(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    stock: int = Field(ge=0)
    stock_min: int = Field(ge=0)
    unit: str = Field(min_length=1, max_length=20)
    supplier_ids: set[int] = Field(default_factory=set)


class RawMaterialUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=2, max_length=100)
    stock: int | None = Field(default=None, ge=0)
    stock_min: int | None = Field(default=None, ge=0)
    unit: str | None = Field(default=None, min_length=1, max_length=20)
    supplier_ids: set[int] | None = None


class RawMaterialRead(ORMModel):
    id: int
    name: str
    stock: int
    stock_min: int
    unit: str
    supplier_ids: list[int]
    is_below_minimum: bool


# ---------- SUPPLY ORDERS ----------
class SupplyOrderCreate(BaseModel):
    supplier_id: int
    material_ids: set[int] = Field(min_length=1)
    order_date: date
    status: SupplyOrderStatus = SupplyOrderStatus.en_attente
    expected_delivery_date: date | None = None


class SupplyOrderUpdate(BaseModel):
    supplier_id: int | None = None
    material_ids: set[int] | None = Field(default=None, min_length=1)
    order_date: date | None = None
    status: SupplyOrderStatus | None = None
    expected_delivery_date: date | None = None


class SupplyOrderStatusUpdate(BaseModel):
    status: SupplyOrderStatus


class SupplyOrderRead(ORMModel):
    id: int
    supplier_id: int
    supplier_name: str | None
    material_ids: list[int]
    order_date: date
    status: SupplyOrderStatus
    expected_delivery_date: date | None
