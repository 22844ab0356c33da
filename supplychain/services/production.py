"""
Production service : produits, nomenclatures, ordres de fabrication.

La création d'un ordre de fabrication est une porte de faisabilité
(nomenclature couverte) ; elle ne réserve aucune matière première.
"""

from __future__ import annotations

import logging

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from supplychain.app.core.errors import (
    BillOfMaterialNotFoundError,
    InsufficientMaterialsError,
    ProductHasActiveOrdersError,
    ProductNameAlreadyExistsError,
    ProductNotFoundError,
    ProductionOrderCannotBeCancelledError,
    ProductionOrderNotFoundError,
    RawMaterialNotFoundError,
)
from supplychain.app.db.models.core_types import (
    ACTIVE_PRODUCTION_ORDER_STATUSES,
    ProductionOrderStatus,
)
from supplychain.app.db.models.models_v1 import (
    BillOfMaterial,
    Product,
    ProductionOrder,
    RawMaterial,
)
from supplychain.app.schemas.common import Page, updated_fields
from supplychain.app.schemas.production import (
    BillOfMaterialCreate,
    BillOfMaterialUpdate,
    ProductCreate,
    ProductUpdate,
    ProductionOrderCreate,
    ProductionOrderUpdate,
)
from supplychain.services.inventory import check_materials_availability, missing_materials
from supplychain.services.pagination import contains_ignore_case, paginate, sorted_by

logger = logging.getLogger(__name__)


# ---------- PRODUCTS ----------
def get_product(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if not product:
        raise ProductNotFoundError(product_id)
    return product


def _ensure_unique_name(db: Session, name: str, exclude_id: int | None = None) -> None:
    stmt = select(Product.id).where(Product.name == name)
    if exclude_id is not None:
        stmt = stmt.where(Product.id != exclude_id)
    if db.execute(stmt).first():
        raise ProductNameAlreadyExistsError(name)


def create_product(db: Session, payload: ProductCreate) -> Product:
    logger.info("Creating new product: %s", payload.name)
    _ensure_unique_name(db, payload.name)

    product = Product(**payload.model_dump())
    db.add(product)
    db.flush()
    logger.info("Product created successfully with ID: %s", product.id)
    return product


def update_product(db: Session, product_id: int, payload: ProductUpdate) -> Product:
    logger.info("Updating product with ID: %s", product_id)
    product = get_product(db, product_id)

    fields = updated_fields(payload)
    if "name" in fields and fields["name"] != product.name:
        _ensure_unique_name(db, fields["name"], exclude_id=product.id)
    for name, value in fields.items():
        setattr(product, name, value)

    db.flush()
    logger.info("Product updated successfully with ID: %s", product_id)
    return product


def list_products(
    db: Session, page: int = 0, size: int = 10, sort_by: str | None = None, direction: str = "asc"
) -> Page:
    return paginate(db, sorted_by(select(Product), Product, sort_by, direction), page, size)


def search_products(db: Session, name: str, page: int = 0, size: int = 10) -> Page:
    logger.info("Searching products by name: %s", name)
    stmt = select(Product).where(contains_ignore_case(Product.name, name))
    return paginate(db, sorted_by(stmt, Product), page, size)


def delete_product(db: Session, product_id: int) -> None:
    logger.info("Attempting to delete product with ID: %s", product_id)
    product = get_product(db, product_id)

    active = db.execute(
        select(func.count(ProductionOrder.id))
        .where(ProductionOrder.product_id == product_id)
        .where(ProductionOrder.status.in_(ACTIVE_PRODUCTION_ORDER_STATUSES))
    ).scalar_one()
    if active:
        logger.warning("Cannot delete product with ID: %s. Has %s active production order(s)", product_id, active)
        raise ProductHasActiveOrdersError(product_id, int(active))

    db.delete(product)
    db.flush()
    logger.info("Product deleted successfully with ID: %s", product_id)


# ---------- BILL OF MATERIALS ----------
def get_bill_of_material(db: Session, bom_id: int) -> BillOfMaterial:
    bom = db.get(BillOfMaterial, bom_id)
    if not bom:
        raise BillOfMaterialNotFoundError(bom_id)
    return bom


def create_bill_of_material(db: Session, payload: BillOfMaterialCreate) -> BillOfMaterial:
    logger.info("Creating bill of material for product ID: %s", payload.product_id)
    product = get_product(db, payload.product_id)
    material = db.get(RawMaterial, payload.material_id)
    if not material:
        raise RawMaterialNotFoundError(payload.material_id)

    bom = BillOfMaterial(product=product, material=material, quantity=payload.quantity)
    db.add(bom)
    db.flush()
    logger.info("Bill of material created successfully with ID: %s", bom.id)
    return bom


def update_bill_of_material(db: Session, bom_id: int, payload: BillOfMaterialUpdate) -> BillOfMaterial:
    logger.info("Updating bill of material with ID: %s", bom_id)
    bom = get_bill_of_material(db, bom_id)
    bom.quantity = payload.quantity
    db.flush()
    return bom


def list_bills_of_material(db: Session, page: int = 0, size: int = 10) -> Page:
    return paginate(db, sorted_by(select(BillOfMaterial), BillOfMaterial), page, size)


def list_bills_of_material_by_product(db: Session, product_id: int) -> list[BillOfMaterial]:
    get_product(db, product_id)
    return list(
        db.execute(
            select(BillOfMaterial)
            .where(BillOfMaterial.product_id == product_id)
            .order_by(BillOfMaterial.id.asc())
        )
        .scalars()
        .all()
    )


def delete_bill_of_material(db: Session, bom_id: int) -> None:
    logger.info("Deleting bill of material with ID: %s", bom_id)
    bom = get_bill_of_material(db, bom_id)
    db.delete(bom)
    db.flush()


# ---------- PRODUCTION ORDERS ----------
def get_production_order(db: Session, order_id: int) -> ProductionOrder:
    order = db.get(ProductionOrder, order_id)
    if not order:
        raise ProductionOrderNotFoundError(order_id)
    return order


def create_production_order(db: Session, payload: ProductionOrderCreate) -> ProductionOrder:
    logger.info("Creating production order for product ID: %s", payload.product_id)
    product = get_product(db, payload.product_id)

    if not check_materials_availability(db, product.id, payload.quantity):
        missing = missing_materials(db, product.id, payload.quantity)
        logger.warning("Insufficient materials for product ID: %s", product.id)
        raise InsufficientMaterialsError(product.id, missing)

    order = ProductionOrder(
        product=product,
        quantity=payload.quantity,
        status=payload.status or ProductionOrderStatus.en_attente,
        start_date=payload.start_date,
        end_date=payload.end_date,
        is_priority=bool(payload.is_priority),
    )
    db.add(order)
    db.flush()
    logger.info("Production order created successfully with ID: %s", order.id)
    return order


def update_production_order(db: Session, order_id: int, payload: ProductionOrderUpdate) -> ProductionOrder:
    logger.info("Updating production order with ID: %s", order_id)
    order = get_production_order(db, order_id)
    for name, value in updated_fields(payload).items():
        setattr(order, name, value)
    db.flush()
    return order


def update_production_order_status(
    db: Session, order_id: int, status: ProductionOrderStatus
) -> ProductionOrder:
    logger.info("Updating production order status for ID: %s to: %s", order_id, status.value)
    order = get_production_order(db, order_id)
    order.status = status
    db.flush()
    return order


def cancel_production_order(db: Session, order_id: int) -> None:
    logger.info("Attempting to cancel production order with ID: %s", order_id)
    order = get_production_order(db, order_id)
    if not order.can_be_cancelled:
        logger.warning("Cannot cancel production order with ID: %s. Current status: %s", order_id, order.status.value)
        raise ProductionOrderCannotBeCancelledError(order_id, order.status.value)

    db.delete(order)
    db.flush()
    logger.info("Production order cancelled successfully with ID: %s", order_id)


def list_production_orders(
    db: Session, page: int = 0, size: int = 10, sort_by: str | None = None, direction: str = "asc"
) -> Page:
    stmt = sorted_by(select(ProductionOrder), ProductionOrder, sort_by, direction)
    return paginate(db, stmt, page, size)


def list_production_orders_by_status(
    db: Session, status: ProductionOrderStatus, page: int = 0, size: int = 10
) -> Page:
    stmt = select(ProductionOrder).where(ProductionOrder.status == status)
    return paginate(db, sorted_by(stmt, ProductionOrder), page, size)


def list_production_orders_by_product(db: Session, product_id: int, page: int = 0, size: int = 10) -> Page:
    get_product(db, product_id)
    stmt = select(ProductionOrder).where(ProductionOrder.product_id == product_id)
    return paginate(db, sorted_by(stmt, ProductionOrder), page, size)


def list_priority_production_orders(db: Session, page: int = 0, size: int = 10) -> Page:
    stmt = select(ProductionOrder).where(ProductionOrder.is_priority.is_(True))
    return paginate(db, sorted_by(stmt, ProductionOrder), page, size)


def estimate_production_time(db: Session, product_id: int, quantity: int) -> int | None:
    """Heures = temps unitaire x quantité ; None si le produit n'a pas de temps."""
    product = get_product(db, product_id)
    if product.production_time is None:
        logger.warning("Product ID: %s does not have production time configured", product_id)
        return None
    return product.production_time * quantity
