from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from supplychain.app.api.deps import PageParams, get_db, page_params
from supplychain.app.schemas.common import Page
from supplychain.app.schemas.delivery import CustomerCreate, CustomerRead, CustomerUpdate
from supplychain.services import delivery

router = APIRouter(prefix="/customers")


@router.get("", response_model=Page[CustomerRead])
def list_customers(p: PageParams = Depends(page_params), db: Session = Depends(get_db)):
    return delivery.list_customers(db, p.page, p.size, p.sort_by, p.direction).convert(CustomerRead)


@router.get("/search", response_model=Page[CustomerRead])
def search_customers(
    name: str = Query(min_length=1),
    p: PageParams = Depends(page_params),
    db: Session = Depends(get_db),
):
    return delivery.search_customers(db, name, p.page, p.size).convert(CustomerRead)


@router.get("/{customer_id}", response_model=CustomerRead)
def get_customer(customer_id: int, db: Session = Depends(get_db)):
    return CustomerRead.model_validate(delivery.get_customer(db, customer_id))


@router.post("", response_model=CustomerRead, status_code=201)
def create_customer(payload: CustomerCreate, db: Session = Depends(get_db)):
    c = delivery.create_customer(db, payload)
    db.commit()
    db.refresh(c)
    return CustomerRead.model_validate(c)


@router.put("/{customer_id}", response_model=CustomerRead)
def update_customer(customer_id: int, payload: CustomerUpdate, db: Session = Depends(get_db)):
    c = delivery.update_customer(db, customer_id, payload)
    db.commit()
    db.refresh(c)
    return CustomerRead.model_validate(c)


@router.delete("/{customer_id}", status_code=204)
def delete_customer(customer_id: int, db: Session = Depends(get_db)):
    delivery.delete_customer(db, customer_id)
    db.commit()
