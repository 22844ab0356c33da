from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from supplychain.app.db.models.core_types import ProductionOrderStatus
from supplychain.app.schemas.common import ORMModel


# ---------- PRODUCTS ----------
class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    production_time: int = Field(ge=1)  # heures / unité
    cost: Decimal = Field(ge=0)
    stock: int = Field(ge=0)


class ProductUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    production_time: int | None = Field(default=None, ge=1)
    cost: Decimal | None = Field(default=None, ge=0)
    stock: int | None = Field(default=None, ge=0)


class ProductRead(ORMModel):
    id: int
    name: str
    production_time: int | None
    cost: float
    stock: int
    bill_of_material_ids: list[int]
    active_orders_count: int


# ---------- BILL OF MATERIALS ----------
class BillOfMaterialCreate(BaseModel):
    product_id: int
    material_id: int
    quantity: int = Field(ge=1)


class BillOfMaterialUpdate(BaseModel):
    quantity: int = Field(ge=1)


class BillOfMaterialRead(ORMModel):
    id: int
    product_id: int
    product_name: str | None
    material_id: int
    material_name: str | None
    quantity: int
    material_available: bool


class AvailabilityRead(BaseModel):
    product_id: int
    quantity: int
    available: bool


# ---------- PRODUCTION ORDERS ----------
class ProductionOrderCreate(BaseModel):
    product_id: int
    quantity: int = Field(ge=1)
    status: ProductionOrderStatus = ProductionOrderStatus.en_attente
    start_date: date
    end_date: date | None = None
    is_priority: bool | None = None


class ProductionOrderUpdate(BaseModel):
    quantity: int | None = Field(default=None, ge=1)
    status: ProductionOrderStatus | None = None
    start_date: date | None = None
    end_date: date | None = None
    is_priority: bool | None = None


class ProductionOrderStatusUpdate(BaseModel):
    status: ProductionOrderStatus


class ProductionOrderRead(ORMModel):
    id: int
    product_id: int
    product_name: str | None
    quantity: int
    status: ProductionOrderStatus
    start_date: date
    end_date: date | None
    is_priority: bool
    estimated_production_time: int | None
    materials_available: bool | None = None


class ProductionTimeEstimate(BaseModel):
    product_id: int
    quantity: int
    estimated_hours: int | None
