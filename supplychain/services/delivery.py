"""
Delivery service : clients, commandes clients, livraisons.

Règles stock :
    - création d'une commande  -> stock produit décrémenté (réservation)
    - modification             -> changement de produit puis delta de quantité
    - annulation               -> stock restitué, commande supprimée

Toutes les écritures de stock passent par ``supplychain.services.inventory``.
"""

from __future__ import annotations

import logging
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from supplychain.app.core.errors import (
    CustomerHasActiveOrdersError,
    CustomerNotFoundError,
    CustomerOrderCannotBeCancelledError,
    CustomerOrderNotFoundError,
    DeliveryAlreadyExistsError,
    DeliveryNotFoundError,
)
from supplychain.app.db.models.core_types import (
    ACTIVE_CUSTOMER_ORDER_STATUSES,
    CustomerOrderStatus,
    DeliveryStatus,
)
from supplychain.app.db.models.models_v1 import Customer, CustomerOrder, Delivery
from supplychain.app.schemas.common import Page, updated_fields
from supplychain.app.schemas.delivery import (
    CustomerCreate,
    CustomerOrderCreate,
    CustomerOrderUpdate,
    CustomerUpdate,
    DeliveryCreate,
    DeliveryUpdate,
)
from supplychain.services.inventory import (
    lock_product,
    release_product_stock,
    reserve_product_stock,
)
from supplychain.services.pagination import contains_ignore_case, paginate, sorted_by

logger = logging.getLogger(__name__)

BASE_DELIVERY_FEE = Decimal("50.0")
PRODUCT_VALUE_RATE = Decimal("0.10")
CENT = Decimal("0.01")


# ---------- CUSTOMERS ----------
def get_customer(db: Session, customer_id: int) -> Customer:
    customer = db.get(Customer, customer_id)
    if not customer:
        raise CustomerNotFoundError(customer_id)
    return customer


def create_customer(db: Session, payload: CustomerCreate) -> Customer:
    logger.info("Creating new customer: %s", payload.name)
    customer = Customer(**payload.model_dump())
    db.add(customer)
    db.flush()
    logger.info("Customer created successfully with ID: %s", customer.id)
    return customer


def update_customer(db: Session, customer_id: int, payload: CustomerUpdate) -> Customer:
    logger.info("Updating customer with ID: %s", customer_id)
    customer = get_customer(db, customer_id)
    for name, value in updated_fields(payload).items():
        setattr(customer, name, value)
    db.flush()
    return customer


def list_customers(
    db: Session, page: int = 0, size: int = 10, sort_by: str | None = None, direction: str = "asc"
) -> Page:
    return paginate(db, sorted_by(select(Customer), Customer, sort_by, direction), page, size)


def search_customers(db: Session, name: str, page: int = 0, size: int = 10) -> Page:
    logger.info("Searching customers by name: %s", name)
    stmt = select(Customer).where(contains_ignore_case(Customer.name, name))
    return paginate(db, sorted_by(stmt, Customer), page, size)


def delete_customer(db: Session, customer_id: int) -> None:
    logger.info("Attempting to delete customer with ID: %s", customer_id)
    customer = get_customer(db, customer_id)

    active = db.execute(
        select(func.count(CustomerOrder.id))
        .where(CustomerOrder.customer_id == customer_id)
        .where(CustomerOrder.status.in_(ACTIVE_CUSTOMER_ORDER_STATUSES))
    ).scalar_one()
    if active:
        logger.warning("Cannot delete customer with ID: %s. Has %s active order(s)", customer_id, active)
        raise CustomerHasActiveOrdersError(customer_id, int(active))

    db.delete(customer)
    db.flush()
    logger.info("Customer deleted successfully with ID: %s", customer_id)


# ---------- CUSTOMER ORDERS ----------
def get_customer_order(db: Session, order_id: int) -> CustomerOrder:
    order = db.get(CustomerOrder, order_id)
    if not order:
        raise CustomerOrderNotFoundError(order_id)
    return order


def create_customer_order(db: Session, payload: CustomerOrderCreate) -> CustomerOrder:
    logger.info("Creating new customer order for customer ID: %s", payload.customer_id)
    customer = get_customer(db, payload.customer_id)
    product = lock_product(db, payload.product_id)

    reserve_product_stock(db, product, payload.quantity)

    order = CustomerOrder(
        customer=customer,
        product=product,
        quantity=payload.quantity,
        status=payload.status or CustomerOrderStatus.en_preparation,
    )
    db.add(order)
    db.flush()
    logger.info("Customer order created successfully with ID: %s", order.id)
    return order


def update_customer_order(db: Session, order_id: int, payload: CustomerOrderUpdate) -> CustomerOrder:
    """
    Mise à jour partielle, dans cet ordre :
    client, produit, quantité, statut.

    Changer de produit rend la réservation à l'ancien produit et réserve sur
    le nouveau la quantité demandée (ou la quantité actuelle). Le delta de
    quantité est ensuite calculé contre le produit courant.
    """
    logger.info("Updating customer order with ID: %s", order_id)
    order = get_customer_order(db, order_id)
    fields = updated_fields(payload)

    customer_id = fields.get("customer_id")
    if customer_id is not None and customer_id != order.customer_id:
        order.customer = get_customer(db, customer_id)

    product_id = fields.get("product_id")
    if product_id is not None and product_id != order.product_id:
        release_product_stock(db, order.product, order.quantity)
        new_product = lock_product(db, product_id)
        target = fields.get("quantity", order.quantity)
        reserve_product_stock(db, new_product, target)
        order.product = new_product
        order.quantity = target

    quantity = fields.get("quantity")
    if quantity is not None and quantity != order.quantity:
        delta = quantity - order.quantity
        reserve_product_stock(db, order.product, delta)
        order.quantity = quantity

    if "status" in fields:
        order.status = fields["status"]

    db.flush()
    logger.info("Customer order updated successfully with ID: %s", order_id)
    return order


def cancel_customer_order(db: Session, order_id: int) -> None:
    logger.info("Attempting to cancel customer order with ID: %s", order_id)
    order = get_customer_order(db, order_id)

    if order.status in (CustomerOrderStatus.en_route, CustomerOrderStatus.livree):
        logger.warning("Cannot cancel customer order with ID: %s. Status: %s", order_id, order.status.value)
        raise CustomerOrderCannotBeCancelledError(order_id)

    release_product_stock(db, order.product, order.quantity)
    db.delete(order)
    db.flush()
    logger.info("Customer order cancelled successfully with ID: %s", order_id)


def list_customer_orders(
    db: Session, page: int = 0, size: int = 10, sort_by: str | None = None, direction: str = "asc"
) -> Page:
    stmt = sorted_by(select(CustomerOrder), CustomerOrder, sort_by, direction)
    return paginate(db, stmt, page, size)


def list_customer_orders_by_customer(db: Session, customer_id: int, page: int = 0, size: int = 10) -> Page:
    get_customer(db, customer_id)
    stmt = select(CustomerOrder).where(CustomerOrder.customer_id == customer_id)
    return paginate(db, sorted_by(stmt, CustomerOrder), page, size)


def list_customer_orders_by_status(
    db: Session, status: CustomerOrderStatus, page: int = 0, size: int = 10
) -> Page:
    stmt = select(CustomerOrder).where(CustomerOrder.status == status)
    return paginate(db, sorted_by(stmt, CustomerOrder), page, size)


# ---------- DELIVERIES ----------
def calculate_cost(order: CustomerOrder) -> Decimal:
    """50 + 10% de la valeur produit, arrondi au centime (half-up)."""
    value = Decimal(str(order.product.cost)) * order.quantity * PRODUCT_VALUE_RATE
    return (BASE_DELIVERY_FEE + value).quantize(CENT, rounding=ROUND_HALF_UP)


def get_delivery(db: Session, delivery_id: int) -> Delivery:
    delivery = db.get(Delivery, delivery_id)
    if not delivery:
        raise DeliveryNotFoundError(delivery_id)
    return delivery


def get_delivery_by_order(db: Session, order_id: int) -> Delivery:
    delivery = db.execute(select(Delivery).where(Delivery.order_id == order_id)).scalar_one_or_none()
    if not delivery:
        raise DeliveryNotFoundError(message=f"Delivery not found for order ID: {order_id}")
    return delivery


def create_delivery(db: Session, payload: DeliveryCreate) -> Delivery:
    logger.info("Creating new delivery for order ID: %s", payload.order_id)
    order = get_customer_order(db, payload.order_id)
    # une seule livraison par commande
    if db.execute(select(Delivery.id).where(Delivery.order_id == order.id)).first() is not None:
        logger.warning("Delivery already exists for order ID: %s", order.id)
        raise DeliveryAlreadyExistsError(order.id)

    delivery = Delivery(
        order=order,
        vehicle=payload.vehicle,
        driver=payload.driver,
        status=payload.status or DeliveryStatus.planifiee,
        delivery_date=payload.delivery_date,
        cost=payload.cost,
    )
    if not delivery.cost:
        delivery.cost = calculate_cost(order)

    if order.status == CustomerOrderStatus.en_preparation:
        order.status = CustomerOrderStatus.en_route

    db.add(delivery)
    db.flush()
    logger.info("Delivery created successfully with ID: %s", delivery.id)
    return delivery


def update_delivery(db: Session, delivery_id: int, payload: DeliveryUpdate) -> Delivery:
    logger.info("Updating delivery with ID: %s", delivery_id)
    delivery = get_delivery(db, delivery_id)

    for name, value in updated_fields(payload).items():
        setattr(delivery, name, value)

    # statut livraison -> statut commande
    if payload.status == DeliveryStatus.livree:
        delivery.order.status = CustomerOrderStatus.livree
    elif payload.status == DeliveryStatus.en_cours:
        delivery.order.status = CustomerOrderStatus.en_route

    db.flush()
    logger.info("Delivery updated successfully with ID: %s", delivery_id)
    return delivery


def calculate_delivery_cost(db: Session, delivery_id: int) -> Decimal:
    logger.info("Calculating cost for delivery ID: %s", delivery_id)
    delivery = get_delivery(db, delivery_id)
    delivery.cost = calculate_cost(delivery.order)
    db.flush()
    logger.info("Calculated cost for delivery ID %s: %s", delivery_id, delivery.cost)
    return delivery.cost


def list_deliveries(
    db: Session, page: int = 0, size: int = 10, sort_by: str | None = None, direction: str = "asc"
) -> Page:
    return paginate(db, sorted_by(select(Delivery), Delivery, sort_by, direction), page, size)


def list_deliveries_by_status(db: Session, status: DeliveryStatus, page: int = 0, size: int = 10) -> Page:
    stmt = select(Delivery).where(Delivery.status == status)
    return paginate(db, sorted_by(stmt, Delivery), page, size)


def delete_delivery(db: Session, delivery_id: int) -> None:
    logger.info("Deleting delivery with ID: %s", delivery_id)
    delivery = get_delivery(db, delivery_id)
    order = delivery.order
    db.delete(delivery)
    db.flush()
    db.expire(order, ["delivery"])
