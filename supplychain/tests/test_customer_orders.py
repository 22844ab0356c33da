import pytest

from supplychain.app.core.errors import (
    CustomerNotFoundError,
    CustomerOrderCannotBeCancelledError,
    CustomerOrderNotFoundError,
    InsufficientStockError,
    ProductNotFoundError,
)
from supplychain.app.db.models.core_types import CustomerOrderStatus
from supplychain.app.db.models.models_v1 import CustomerOrder
from supplychain.app.schemas.delivery import CustomerOrderCreate, CustomerOrderUpdate
from supplychain.services import delivery


def _order(db_session, customer, product, quantity, status=None):
    return delivery.create_customer_order(
        db_session,
        CustomerOrderCreate(customer_id=customer.id, product_id=product.id, quantity=quantity, status=status),
    )


def test_create_reserves_stock(db_session, make_customer, make_product):
    product = make_product(stock=50)
    order = _order(db_session, make_customer(), product, 10)

    assert product.stock == 40
    assert order.status == CustomerOrderStatus.en_preparation


def test_create_keeps_explicit_status(db_session, make_customer, make_product):
    order = _order(db_session, make_customer(), make_product(), 1, status=CustomerOrderStatus.en_route)
    assert order.status == CustomerOrderStatus.en_route


def test_cancel_restores_stock_and_deletes(db_session, make_customer, make_product):
    product = make_product(stock=50)
    order = _order(db_session, make_customer(), product, 10)
    order_id = order.id

    delivery.cancel_customer_order(db_session, order_id)

    assert product.stock == 50
    assert db_session.get(CustomerOrder, order_id) is None


def test_create_insufficient_stock_no_write(db_session, make_customer, make_product):
    """
    GIVEN un second produit à 40 en stock
    WHEN commande de 41
    THEN InsufficientStock, stock toujours 40, aucune commande
    """
    customer = make_customer()
    _order(db_session, customer, make_product(name="A", stock=50), 10)
    second = make_product(name="B", stock=40)

    with pytest.raises(InsufficientStockError):
        _order(db_session, customer, second, 41)

    assert second.stock == 40
    assert db_session.query(CustomerOrder).filter_by(product_id=second.id).count() == 0


def test_create_unknown_customer_or_product(db_session, make_customer, make_product):
    product = make_product()
    with pytest.raises(CustomerNotFoundError):
        delivery.create_customer_order(
            db_session, CustomerOrderCreate(customer_id=404, product_id=product.id, quantity=1)
        )

    customer = make_customer()
    with pytest.raises(ProductNotFoundError):
        delivery.create_customer_order(
            db_session, CustomerOrderCreate(customer_id=customer.id, product_id=404, quantity=1)
        )
    assert product.stock == 50


@pytest.mark.parametrize("status", [CustomerOrderStatus.en_route, CustomerOrderStatus.livree])
def test_cancel_guard(db_session, make_customer, make_product, status):
    product = make_product(stock=50)
    order = _order(db_session, make_customer(), product, 10)
    order.status = status
    db_session.flush()

    with pytest.raises(CustomerOrderCannotBeCancelledError):
        delivery.cancel_customer_order(db_session, order.id)

    assert product.stock == 40
    assert db_session.get(CustomerOrder, order.id) is not None


def test_quantity_update_delta(db_session, make_customer, make_product):
    """
    GIVEN stock 50, commande de 10 (stock 40)
    WHEN quantité -> 15
    THEN delta 5, stock 35 ; puis quantité -> 5 rend 10 unités
    """
    product = make_product(stock=50)
    order = _order(db_session, make_customer(), product, 10)

    delivery.update_customer_order(db_session, order.id, CustomerOrderUpdate(quantity=15))
    assert product.stock == 35
    assert order.quantity == 15

    delivery.update_customer_order(db_session, order.id, CustomerOrderUpdate(quantity=5))
    assert product.stock == 45
    assert order.quantity == 5


def test_quantity_update_from_stock_50(db_session, make_customer, make_product):
    """
    GIVEN stock courant 50, commande existante de 10
    WHEN quantité -> 15
    THEN stock 45
    """
    product = make_product(stock=60)
    order = _order(db_session, make_customer(), product, 10)
    assert product.stock == 50

    delivery.update_customer_order(db_session, order.id, CustomerOrderUpdate(quantity=15))
    assert product.stock == 45


def test_quantity_update_delta_insufficient(db_session, make_customer, make_product):
    product = make_product(stock=14)
    order = _order(db_session, make_customer(), product, 10)  # stock 4

    with pytest.raises(InsufficientStockError):
        delivery.update_customer_order(db_session, order.id, CustomerOrderUpdate(quantity=15))

    assert product.stock == 4
    assert order.quantity == 10


def test_product_swap_moves_reservation(db_session, make_customer, make_product):
    old = make_product(name="Old", stock=50)
    new = make_product(name="New", stock=30)
    order = _order(db_session, make_customer(), old, 10)

    delivery.update_customer_order(db_session, order.id, CustomerOrderUpdate(product_id=new.id))

    assert old.stock == 50
    assert new.stock == 20
    assert order.product_id == new.id
    assert order.quantity == 10


def test_product_swap_with_new_quantity(db_session, make_customer, make_product):
    old = make_product(name="Old", stock=50)
    new = make_product(name="New", stock=30)
    order = _order(db_session, make_customer(), old, 10)

    delivery.update_customer_order(db_session, order.id, CustomerOrderUpdate(product_id=new.id, quantity=25))

    # réservation unique sur le nouveau produit
    assert old.stock == 50
    assert new.stock == 5
    assert order.quantity == 25


def test_product_swap_insufficient_on_new_product(db_session, make_customer, make_product):
    old = make_product(name="Old", stock=50)
    new = make_product(name="New", stock=5)
    order = _order(db_session, make_customer(), old, 10)
    db_session.commit()

    with pytest.raises(InsufficientStockError):
        delivery.update_customer_order(db_session, order.id, CustomerOrderUpdate(product_id=new.id))

    # l'endpoint ne commit pas : le rollback annule aussi la restitution
    db_session.rollback()
    assert old.stock == 40
    assert new.stock == 5
    assert order.product_id == old.id


def test_update_customer_and_status(db_session, make_customer, make_product):
    product = make_product(stock=50)
    order = _order(db_session, make_customer(name="A"), product, 10)
    other = make_customer(name="B")

    delivery.update_customer_order(
        db_session,
        order.id,
        CustomerOrderUpdate(customer_id=other.id, status=CustomerOrderStatus.livree),
    )

    assert order.customer_id == other.id
    assert order.status == CustomerOrderStatus.livree
    assert product.stock == 40


def test_update_unknown_order(db_session):
    with pytest.raises(CustomerOrderNotFoundError):
        delivery.update_customer_order(db_session, 1, CustomerOrderUpdate(quantity=2))


def test_stock_never_negative_over_sequence(db_session, make_customer, make_product):
    product = make_product(stock=12)
    customer = make_customer()
    orders = []
    for qty in (5, 4, 3, 2):
        try:
            orders.append(_order(db_session, customer, product, qty))
        except InsufficientStockError:
            pass
        assert product.stock >= 0

    for order in orders:
        try:
            delivery.update_customer_order(db_session, order.id, CustomerOrderUpdate(quantity=order.quantity + 3))
        except InsufficientStockError:
            pass
        assert product.stock >= 0

    for order in orders:
        delivery.cancel_customer_order(db_session, order.id)
    assert product.stock == 12


def test_list_by_customer_unknown(db_session):
    with pytest.raises(CustomerNotFoundError):
        delivery.list_customer_orders_by_customer(db_session, 42)


def test_list_by_status(db_session, make_customer, make_product):
    customer = make_customer()
    product = make_product()
    _order(db_session, customer, product, 1)
    _order(db_session, customer, product, 1, status=CustomerOrderStatus.en_route)

    page = delivery.list_customer_orders_by_status(db_session, CustomerOrderStatus.en_route)
    assert page.total == 1
    assert page.items[0].status == CustomerOrderStatus.en_route
