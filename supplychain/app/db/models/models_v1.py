from __future__ import annotations

import enum
from datetime import datetime, date, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Column,
    String,
    Integer,
    DateTime,
    Date,
    Boolean,
    ForeignKey,
    Numeric,
    Enum,
    Table,
    Index,
    CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from werkzeug.security import check_password_hash, generate_password_hash

from supplychain.app.db.base import Base, BigIntPK
from supplychain.app.db.models.core_types import (
    Role,
    SupplyOrderStatus,
    ProductionOrderStatus,
    CustomerOrderStatus,
    DeliveryStatus,
    ACTIVE_SUPPLY_ORDER_STATUSES,
    ACTIVE_PRODUCTION_ORDER_STATUSES,
    ACTIVE_CUSTOMER_ORDER_STATUSES,
)


def _enum(enum_cls: type[enum.Enum], name: str) -> Enum:
    # stocke la valeur métier ("EN_ATTENTE"), pas le nom python
    return Enum(enum_cls, name=name, values_callable=lambda e: [m.value for m in e])


# ---------- PROCUREMENT ----------
material_suppliers = Table(
    "material_suppliers",
    Base.metadata,
    Column("material_id", ForeignKey("raw_materials.id", ondelete="CASCADE"), primary_key=True),
    Column("supplier_id", ForeignKey("suppliers.id", ondelete="CASCADE"), primary_key=True),
)

supply_order_materials = Table(
    "supply_order_materials",
    Base.metadata,
    Column("order_id", ForeignKey("supply_orders.id", ondelete="CASCADE"), primary_key=True),
    Column("material_id", ForeignKey("raw_materials.id", ondelete="CASCADE"), primary_key=True),
)


class Supplier(Base):
    __tablename__ = "suppliers"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    contact: Mapped[str] = mapped_column(String(200), nullable=False)
    rating: Mapped[float | None] = mapped_column(Numeric(3, 2, asdecimal=False))  # 0..5
    lead_time: Mapped[int] = mapped_column(Integer, nullable=False)  # jours

    orders: Mapped[list["SupplyOrder"]] = relationship(back_populates="supplier", cascade="all, delete-orphan")
    materials: Mapped[list["RawMaterial"]] = relationship(secondary=material_suppliers, back_populates="suppliers")

    __table_args__ = (
        CheckConstraint("rating IS NULL OR (rating >= 0 AND rating <= 5)", name="ck_supplier_rating_0_5"),
        CheckConstraint("lead_time >= 1", name="ck_supplier_lead_time_pos"),
    )

    @property
    def active_orders_count(self) -> int:
        return sum(1 for o in self.orders if o.status in ACTIVE_SUPPLY_ORDER_STATUSES)


class RawMaterial(Base):
    __tablename__ = "raw_materials"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    stock: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    stock_min: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    unit: Mapped[str] = mapped_column(String(20), nullable=False)

    suppliers: Mapped[list[Supplier]] = relationship(secondary=material_suppliers, back_populates="materials")

    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_raw_material_stock_nonneg"),
        CheckConstraint("stock_min >= 0", name="ck_raw_material_stock_min_nonneg"),
    )

    @property
    def is_below_minimum(self) -> bool:
        return self.stock < self.stock_min

    @property
    def deficit(self) -> int:
        return max(self.stock_min - self.stock, 0)

    @property
    def supplier_ids(self) -> list[int]:
        return sorted(s.id for s in self.suppliers)


class SupplyOrder(Base):
    __tablename__ = "supply_orders"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    supplier_id: Mapped[int] = mapped_column(ForeignKey("suppliers.id", ondelete="CASCADE"), nullable=False, index=True)
    order_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[SupplyOrderStatus] = mapped_column(
        _enum(SupplyOrderStatus, "supply_order_status"),
        default=SupplyOrderStatus.en_attente,
        nullable=False,
    )
    expected_delivery_date: Mapped[date | None] = mapped_column(Date)

    supplier: Mapped[Supplier] = relationship(back_populates="orders")
    materials: Mapped[list[RawMaterial]] = relationship(secondary=supply_order_materials)

    @property
    def supplier_name(self) -> str | None:
        return self.supplier.name if self.supplier else None

    @property
    def material_ids(self) -> list[int]:
        return sorted(m.id for m in self.materials)

    @property
    def can_be_deleted(self) -> bool:
        return self.status == SupplyOrderStatus.en_attente


# ---------- PRODUCTION ----------
class Product(Base):
    __tablename__ = "products"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    production_time: Mapped[int | None] = mapped_column(Integer)  # heures / unité
    cost: Mapped[Decimal] = mapped_column(Numeric(14, 4), nullable=False)
    stock: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    bill_of_materials: Mapped[list["BillOfMaterial"]] = relationship(
        back_populates="product", cascade="all, delete-orphan"
    )
    production_orders: Mapped[list["ProductionOrder"]] = relationship(
        back_populates="product", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_product_stock_nonneg"),
        CheckConstraint("cost >= 0", name="ck_product_cost_nonneg"),
    )

    @property
    def active_orders_count(self) -> int:
        return sum(1 for o in self.production_orders if o.status in ACTIVE_PRODUCTION_ORDER_STATUSES)

    @property
    def bill_of_material_ids(self) -> list[int]:
        return [b.id for b in self.bill_of_materials]


class BillOfMaterial(Base):
    __tablename__ = "bill_of_materials"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    material_id: Mapped[int] = mapped_column(ForeignKey("raw_materials.id", ondelete="RESTRICT"), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)  # unités de matière par unité produite

    product: Mapped[Product] = relationship(back_populates="bill_of_materials")
    material: Mapped[RawMaterial] = relationship()

    __table_args__ = (CheckConstraint("quantity > 0", name="ck_bom_qty_pos"),)

    @property
    def material_available(self) -> bool:
        return self.material is not None and self.material.stock >= self.quantity

    @property
    def product_name(self) -> str | None:
        return self.product.name if self.product else None

    @property
    def material_name(self) -> str | None:
        return self.material.name if self.material else None


class ProductionOrder(Base):
    __tablename__ = "production_orders"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[ProductionOrderStatus] = mapped_column(
        _enum(ProductionOrderStatus, "production_order_status"),
        default=ProductionOrderStatus.en_attente,
        nullable=False,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date)
    is_priority: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    product: Mapped[Product] = relationship(back_populates="production_orders")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_production_order_qty_pos"),
        Index("ix_production_orders_status", "status"),
    )

    @property
    def can_be_cancelled(self) -> bool:
        return self.status == ProductionOrderStatus.en_attente

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_PRODUCTION_ORDER_STATUSES

    @property
    def product_name(self) -> str | None:
        return self.product.name if self.product else None

    @property
    def estimated_production_time(self) -> int | None:
        if self.product is None or self.product.production_time is None:
            return None
        return self.product.production_time * self.quantity


# ---------- DELIVERY ----------
class Customer(Base):
    __tablename__ = "customers"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    address: Mapped[str | None] = mapped_column(String(255))
    city: Mapped[str | None] = mapped_column(String(100))

    orders: Mapped[list["CustomerOrder"]] = relationship(back_populates="customer", cascade="all, delete-orphan")

    @property
    def active_orders_count(self) -> int:
        return sum(1 for o in self.orders if o.status in ACTIVE_CUSTOMER_ORDER_STATUSES)


class CustomerOrder(Base):
    __tablename__ = "customer_orders"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id", ondelete="RESTRICT"), nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[CustomerOrderStatus] = mapped_column(
        _enum(CustomerOrderStatus, "customer_order_status"),
        default=CustomerOrderStatus.en_preparation,
        nullable=False,
    )

    customer: Mapped[Customer] = relationship(back_populates="orders")
    product: Mapped[Product] = relationship()
    delivery: Mapped[Optional["Delivery"]] = relationship(
        back_populates="order", cascade="all, delete-orphan", uselist=False
    )

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_customer_order_qty_pos"),
        Index("ix_customer_orders_status", "status"),
    )

    @property
    def customer_name(self) -> str | None:
        return self.customer.name if self.customer else None

    @property
    def product_name(self) -> str | None:
        return self.product.name if self.product else None


class Delivery(Base):
    __tablename__ = "deliveries"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    order_id: Mapped[int] = mapped_column(
        ForeignKey("customer_orders.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    vehicle: Mapped[str | None] = mapped_column(String(100))
    driver: Mapped[str | None] = mapped_column(String(100))
    status: Mapped[DeliveryStatus] = mapped_column(
        _enum(DeliveryStatus, "delivery_status"),
        default=DeliveryStatus.planifiee,
        nullable=False,
    )
    delivery_date: Mapped[date | None] = mapped_column(Date)
    cost: Mapped[Decimal | None] = mapped_column(Numeric(14, 2))

    order: Mapped[CustomerOrder] = relationship(back_populates="delivery")

    __table_args__ = (CheckConstraint("cost IS NULL OR cost >= 0", name="ck_delivery_cost_nonneg"),)

    @property
    def order_details(self) -> str | None:
        if self.order is None:
            return None
        return f"Order #{self.order.id} - {self.order.product_name} x{self.order.quantity}"


# ---------- AUTH ----------
class User(Base):
    __tablename__ = "users"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[Role] = mapped_column(_enum(Role, "role"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)
