from decimal import Decimal

import pytest

from supplychain.app.core.errors import (
    CustomerOrderNotFoundError,
    DeliveryAlreadyExistsError,
    DeliveryNotFoundError,
)
from supplychain.app.db.models.core_types import CustomerOrderStatus, DeliveryStatus
from supplychain.app.db.models.models_v1 import Customer, CustomerOrder, Product
from supplychain.app.schemas.delivery import CustomerOrderCreate, DeliveryCreate, DeliveryUpdate
from supplychain.services import delivery


def _order(db_session, make_customer, make_product, cost="100.0", quantity=2):
    product = make_product(stock=50, cost=cost)
    return delivery.create_customer_order(
        db_session,
        CustomerOrderCreate(customer_id=make_customer().id, product_id=product.id, quantity=quantity),
    )


@pytest.mark.parametrize(
    "unit_cost, quantity, expected",
    [
        ("100.0", 10, Decimal("150.00")),
        ("100.0", 2, Decimal("70.00")),
        ("33.333", 3, Decimal("60.00")),
        ("12.345", 1, Decimal("51.23")),
        ("0", 5, Decimal("50.00")),
    ],
)
def test_calculate_cost(unit_cost, quantity, expected):
    order = CustomerOrder(product=Product(name="P", cost=Decimal(unit_cost), stock=0), customer=Customer(name="C"), quantity=quantity)
    assert delivery.calculate_cost(order) == expected


def test_create_defaults_cost_status_and_ships_order(db_session, make_customer, make_product):
    """
    GIVEN commande coût unitaire 100, quantité 2, EN_PREPARATION
    WHEN livraison sans coût
    THEN coût 70.00, statut PLANIFIEE, commande EN_ROUTE
    """
    order = _order(db_session, make_customer, make_product)

    d = delivery.create_delivery(db_session, DeliveryCreate(order_id=order.id, vehicle="VAN-12", driver="Marc"))

    assert d.cost == Decimal("70.00")
    assert d.status == DeliveryStatus.planifiee
    assert order.status == CustomerOrderStatus.en_route


def test_create_keeps_explicit_cost(db_session, make_customer, make_product):
    order = _order(db_session, make_customer, make_product)
    d = delivery.create_delivery(db_session, DeliveryCreate(order_id=order.id, cost=Decimal("12.50")))
    assert d.cost == Decimal("12.50")


def test_create_zero_cost_is_recomputed(db_session, make_customer, make_product):
    order = _order(db_session, make_customer, make_product)
    d = delivery.create_delivery(db_session, DeliveryCreate(order_id=order.id, cost=Decimal("0")))
    assert d.cost == Decimal("70.00")


def test_create_does_not_touch_delivered_order(db_session, make_customer, make_product):
    order = _order(db_session, make_customer, make_product)
    order.status = CustomerOrderStatus.livree
    db_session.flush()

    delivery.create_delivery(db_session, DeliveryCreate(order_id=order.id))
    assert order.status == CustomerOrderStatus.livree


def test_create_unknown_order(db_session):
    with pytest.raises(CustomerOrderNotFoundError):
        delivery.create_delivery(db_session, DeliveryCreate(order_id=77))


@pytest.mark.parametrize(
    "new_status, order_status",
    [
        (DeliveryStatus.livree, CustomerOrderStatus.livree),
        (DeliveryStatus.en_cours, CustomerOrderStatus.en_route),
    ],
)
def test_update_status_syncs_order(db_session, make_customer, make_product, new_status, order_status):
    order = _order(db_session, make_customer, make_product)
    d = delivery.create_delivery(db_session, DeliveryCreate(order_id=order.id))

    delivery.update_delivery(db_session, d.id, DeliveryUpdate(status=new_status))

    assert d.status == new_status
    assert order.status == order_status


def test_update_planifiee_leaves_order(db_session, make_customer, make_product):
    order = _order(db_session, make_customer, make_product)
    d = delivery.create_delivery(db_session, DeliveryCreate(order_id=order.id))

    delivery.update_delivery(db_session, d.id, DeliveryUpdate(status=DeliveryStatus.planifiee, driver="Léa"))

    assert d.driver == "Léa"
    assert order.status == CustomerOrderStatus.en_route


def test_update_partial_keeps_other_fields(db_session, make_customer, make_product):
    order = _order(db_session, make_customer, make_product)
    d = delivery.create_delivery(db_session, DeliveryCreate(order_id=order.id, vehicle="VAN-1", driver="Marc"))

    delivery.update_delivery(db_session, d.id, DeliveryUpdate(vehicle="VAN-2"))

    assert d.vehicle == "VAN-2"
    assert d.driver == "Marc"
    assert d.cost == Decimal("70.00")


def test_calculate_delivery_cost_uses_current_order(db_session, make_customer, make_product):
    order = _order(db_session, make_customer, make_product)
    d = delivery.create_delivery(db_session, DeliveryCreate(order_id=order.id, cost=Decimal("5")))

    order.quantity = 10
    db_session.flush()

    assert delivery.calculate_delivery_cost(db_session, d.id) == Decimal("150.00")
    assert d.cost == Decimal("150.00")


def test_get_by_order_and_delete(db_session, make_customer, make_product):
    order = _order(db_session, make_customer, make_product)
    d = delivery.create_delivery(db_session, DeliveryCreate(order_id=order.id))

    assert delivery.get_delivery_by_order(db_session, order.id).id == d.id

    delivery.delete_delivery(db_session, d.id)
    with pytest.raises(DeliveryNotFoundError):
        delivery.get_delivery(db_session, d.id)
    with pytest.raises(DeliveryNotFoundError):
        delivery.get_delivery_by_order(db_session, order.id)


def test_second_delivery_for_order_rejected(db_session, make_customer, make_product):
    """
    GIVEN une commande déjà couverte par une livraison
    WHEN seconde livraison sur la même commande
    THEN DeliveryAlreadyExists, la première livraison reste en place
    """
    order = _order(db_session, make_customer, make_product)
    first = delivery.create_delivery(db_session, DeliveryCreate(order_id=order.id, vehicle="Camion 1"))

    with pytest.raises(DeliveryAlreadyExistsError) as exc:
        delivery.create_delivery(db_session, DeliveryCreate(order_id=order.id, vehicle="Camion 2"))

    assert exc.value.message == f"Delivery already exists for order ID: {order.id}"
    assert delivery.get_delivery_by_order(db_session, order.id).id == first.id
    assert first.vehicle == "Camion 1"


def test_delete_then_recreate_delivery(db_session, make_customer, make_product):
    order = _order(db_session, make_customer, make_product)
    first = delivery.create_delivery(db_session, DeliveryCreate(order_id=order.id))

    delivery.delete_delivery(db_session, first.id)
    assert order.delivery is None

    second = delivery.create_delivery(db_session, DeliveryCreate(order_id=order.id))
    assert delivery.get_delivery_by_order(db_session, order.id).id == second.id
