from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from supplychain.app.api.deps import PageParams, get_db, page_params
from supplychain.app.db.models.core_types import CustomerOrderStatus
from supplychain.app.schemas.common import Page
from supplychain.app.schemas.delivery import CustomerOrderCreate, CustomerOrderRead, CustomerOrderUpdate
from supplychain.services import delivery

router = APIRouter(prefix="/customer-orders")


@router.get("", response_model=Page[CustomerOrderRead])
def list_orders(p: PageParams = Depends(page_params), db: Session = Depends(get_db)):
    return delivery.list_customer_orders(db, p.page, p.size, p.sort_by, p.direction).convert(CustomerOrderRead)


@router.get("/customer/{customer_id}", response_model=Page[CustomerOrderRead])
def list_by_customer(customer_id: int, p: PageParams = Depends(page_params), db: Session = Depends(get_db)):
    return delivery.list_customer_orders_by_customer(db, customer_id, p.page, p.size).convert(CustomerOrderRead)


@router.get("/status/{status}", response_model=Page[CustomerOrderRead])
def list_by_status(status: CustomerOrderStatus, p: PageParams = Depends(page_params), db: Session = Depends(get_db)):
    return delivery.list_customer_orders_by_status(db, status, p.page, p.size).convert(CustomerOrderRead)


@router.get("/{order_id}", response_model=CustomerOrderRead)
def get_order(order_id: int, db: Session = Depends(get_db)):
    return CustomerOrderRead.model_validate(delivery.get_customer_order(db, order_id))


@router.post("", response_model=CustomerOrderRead, status_code=201)
def create_order(payload: CustomerOrderCreate, db: Session = Depends(get_db)):
    order = delivery.create_customer_order(db, payload)
    db.commit()
    db.refresh(order)
    return CustomerOrderRead.model_validate(order)


@router.put("/{order_id}", response_model=CustomerOrderRead)
def update_order(order_id: int, payload: CustomerOrderUpdate, db: Session = Depends(get_db)):
    order = delivery.update_customer_order(db, order_id, payload)
    db.commit()
    db.refresh(order)
    return CustomerOrderRead.model_validate(order)


@router.delete("/{order_id}", status_code=204)
def cancel_order(order_id: int, db: Session = Depends(get_db)):
    delivery.cancel_customer_order(db, order_id)
    db.commit()
