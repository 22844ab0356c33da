"""
Procurement service.

Fournisseurs, matières premières et commandes d'approvisionnement.
Ce module ne modifie jamais un stock par delta : la logique stock est
centralisée dans ``supplychain.services.inventory``.
"""

from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from supplychain.app.core.errors import (
    RawMaterialNotFoundError,
    SupplierHasActiveOrdersError,
    SupplierNotFoundError,
    SupplyOrderCannotBeDeletedError,
    SupplyOrderNotFoundError,
)
from supplychain.app.db.models.core_types import ACTIVE_SUPPLY_ORDER_STATUSES, SupplyOrderStatus
from supplychain.app.db.models.models_v1 import RawMaterial, Supplier, SupplyOrder
from supplychain.app.schemas.common import Page, updated_fields
from supplychain.app.schemas.procurement import (
    RawMaterialCreate,
    RawMaterialUpdate,
    SupplierCreate,
    SupplierUpdate,
    SupplyOrderCreate,
    SupplyOrderUpdate,
)
from supplychain.services.pagination import contains_ignore_case, paginate, sorted_by

logger = logging.getLogger(__name__)


# ---------- SUPPLIERS ----------
def get_supplier(db: Session, supplier_id: int) -> Supplier:
    supplier = db.get(Supplier, supplier_id)
    if not supplier:
        raise SupplierNotFoundError(supplier_id)
    return supplier


def _suppliers(db: Session, supplier_ids: Iterable[int]) -> list[Supplier]:
    return [get_supplier(db, sid) for sid in sorted(supplier_ids)]


def create_supplier(db: Session, payload: SupplierCreate) -> Supplier:
    logger.info("Creating new supplier: %s", payload.name)
    supplier = Supplier(**payload.model_dump())
    db.add(supplier)
    db.flush()
    logger.info("Supplier created successfully with ID: %s", supplier.id)
    return supplier


def update_supplier(db: Session, supplier_id: int, payload: SupplierUpdate) -> Supplier:
    logger.info("Updating supplier with ID: %s", supplier_id)
    supplier = get_supplier(db, supplier_id)
    for name, value in updated_fields(payload).items():
        setattr(supplier, name, value)
    db.flush()
    return supplier


def list_suppliers(
    db: Session, page: int = 0, size: int = 10, sort_by: str | None = None, direction: str = "asc"
) -> Page:
    return paginate(db, sorted_by(select(Supplier), Supplier, sort_by, direction), page, size)


def search_suppliers(db: Session, name: str, page: int = 0, size: int = 10) -> Page:
    logger.info("Searching suppliers by name: %s", name)
    stmt = select(Supplier).where(contains_ignore_case(Supplier.name, name))
    return paginate(db, sorted_by(stmt, Supplier), page, size)


def delete_supplier(db: Session, supplier_id: int) -> None:
    logger.info("Attempting to delete supplier with ID: %s", supplier_id)
    supplier = get_supplier(db, supplier_id)

    active = db.execute(
        select(func.count(SupplyOrder.id))
        .where(SupplyOrder.supplier_id == supplier_id)
        .where(SupplyOrder.status.in_(ACTIVE_SUPPLY_ORDER_STATUSES))
    ).scalar_one()
    if active:
        logger.warning("Cannot delete supplier with ID: %s. Has %s active order(s)", supplier_id, active)
        raise SupplierHasActiveOrdersError(supplier_id, int(active))

    db.delete(supplier)
    db.flush()
    logger.info("Supplier deleted successfully with ID: %s", supplier_id)


# ---------- RAW MATERIALS ----------
def get_raw_material(db: Session, material_id: int) -> RawMaterial:
    material = db.get(RawMaterial, material_id)
    if not material:
        raise RawMaterialNotFoundError(material_id)
    return material


def create_raw_material(db: Session, payload: RawMaterialCreate) -> RawMaterial:
    logger.info("Creating new raw material: %s", payload.name)
    material = RawMaterial(**payload.model_dump(exclude={"supplier_ids"}))
    material.suppliers = _suppliers(db, payload.supplier_ids)
    db.add(material)
    db.flush()
    logger.info("Raw material created successfully with ID: %s", material.id)
    return material


def update_raw_material(db: Session, material_id: int, payload: RawMaterialUpdate) -> RawMaterial:
    logger.info("Updating raw material with ID: %s", material_id)
    material = get_raw_material(db, material_id)

    fields = updated_fields(payload)
    supplier_ids = fields.pop("supplier_ids", None)
    for name, value in fields.items():
        setattr(material, name, value)
    if supplier_ids is not None:
        material.suppliers = _suppliers(db, supplier_ids)

    db.flush()
    return material


def list_raw_materials(
    db: Session, page: int = 0, size: int = 10, sort_by: str | None = None, direction: str = "asc"
) -> Page:
    return paginate(db, sorted_by(select(RawMaterial), RawMaterial, sort_by, direction), page, size)


def search_raw_materials(db: Session, name: str, page: int = 0, size: int = 10) -> Page:
    logger.info("Searching raw materials by name: %s", name)
    stmt = select(RawMaterial).where(contains_ignore_case(RawMaterial.name, name))
    return paginate(db, sorted_by(stmt, RawMaterial), page, size)


def _below_minimum():
    return select(RawMaterial).where(RawMaterial.stock < RawMaterial.stock_min)


def list_raw_materials_below_minimum(db: Session, page: int = 0, size: int = 10) -> Page:
    return paginate(db, sorted_by(_below_minimum(), RawMaterial), page, size)


def all_raw_materials_below_minimum(db: Session) -> list[RawMaterial]:
    return list(db.execute(sorted_by(_below_minimum(), RawMaterial)).scalars().all())


def delete_raw_material(db: Session, material_id: int) -> None:
    logger.info("Attempting to delete raw material with ID: %s", material_id)
    material = get_raw_material(db, material_id)
    db.delete(material)
    db.flush()
    logger.info("Raw material deleted successfully with ID: %s", material_id)


def add_supplier_to_material(db: Session, material_id: int, supplier_id: int) -> RawMaterial:
    logger.info("Adding supplier %s to raw material %s", supplier_id, material_id)
    material = get_raw_material(db, material_id)
    supplier = get_supplier(db, supplier_id)
    if supplier not in material.suppliers:
        material.suppliers.append(supplier)
    db.flush()
    return material


def remove_supplier_from_material(db: Session, material_id: int, supplier_id: int) -> RawMaterial:
    logger.info("Removing supplier %s from raw material %s", supplier_id, material_id)
    material = get_raw_material(db, material_id)
    supplier = get_supplier(db, supplier_id)
    if supplier in material.suppliers:
        material.suppliers.remove(supplier)
    db.flush()
    return material


# ---------- SUPPLY ORDERS ----------
def get_supply_order(db: Session, order_id: int) -> SupplyOrder:
    order = db.get(SupplyOrder, order_id)
    if not order:
        raise SupplyOrderNotFoundError(order_id)
    return order


def create_supply_order(db: Session, payload: SupplyOrderCreate) -> SupplyOrder:
    logger.info("Creating new supply order for supplier ID: %s", payload.supplier_id)
    supplier = get_supplier(db, payload.supplier_id)
    materials = [get_raw_material(db, mid) for mid in sorted(payload.material_ids)]

    order = SupplyOrder(
        supplier=supplier,
        materials=materials,
        order_date=payload.order_date,
        status=payload.status or SupplyOrderStatus.en_attente,
        expected_delivery_date=payload.expected_delivery_date,
    )
    db.add(order)
    db.flush()
    logger.info("Supply order created successfully with ID: %s", order.id)
    return order


def update_supply_order(db: Session, order_id: int, payload: SupplyOrderUpdate) -> SupplyOrder:
    logger.info("Updating supply order with ID: %s", order_id)
    order = get_supply_order(db, order_id)

    fields = updated_fields(payload)
    supplier_id = fields.pop("supplier_id", None)
    if supplier_id is not None and supplier_id != order.supplier_id:
        order.supplier = get_supplier(db, supplier_id)
    material_ids = fields.pop("material_ids", None)
    if material_ids:
        order.materials = [get_raw_material(db, mid) for mid in sorted(material_ids)]
    for name, value in fields.items():
        setattr(order, name, value)

    db.flush()
    return order


def update_supply_order_status(db: Session, order_id: int, status: SupplyOrderStatus) -> SupplyOrder:
    logger.info("Updating status of supply order %s to %s", order_id, status.value)
    order = get_supply_order(db, order_id)
    order.status = status
    db.flush()
    return order


def list_supply_orders(
    db: Session, page: int = 0, size: int = 10, sort_by: str | None = None, direction: str = "asc"
) -> Page:
    return paginate(db, sorted_by(select(SupplyOrder), SupplyOrder, sort_by, direction), page, size)


def list_supply_orders_by_status(db: Session, status: SupplyOrderStatus, page: int = 0, size: int = 10) -> Page:
    stmt = select(SupplyOrder).where(SupplyOrder.status == status)
    return paginate(db, sorted_by(stmt, SupplyOrder), page, size)


def list_supply_orders_by_supplier(db: Session, supplier_id: int, page: int = 0, size: int = 10) -> Page:
    get_supplier(db, supplier_id)
    stmt = select(SupplyOrder).where(SupplyOrder.supplier_id == supplier_id)
    return paginate(db, sorted_by(stmt, SupplyOrder), page, size)


def delete_supply_order(db: Session, order_id: int) -> None:
    logger.info("Attempting to delete supply order with ID: %s", order_id)
    order = get_supply_order(db, order_id)
    if not order.can_be_deleted:
        logger.warning("Cannot delete supply order with ID: %s. Status is: %s", order_id, order.status.value)
        raise SupplyOrderCannotBeDeletedError(order_id, order.status.value)

    db.delete(order)
    db.flush()
    logger.info("Supply order deleted successfully with ID: %s", order_id)
