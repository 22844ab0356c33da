from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from supplychain.app.api.deps import PageParams, get_db, page_params
from supplychain.app.db.models.core_types import SupplyOrderStatus
from supplychain.app.schemas.common import Page
from supplychain.app.schemas.procurement import (
    SupplyOrderCreate,
    SupplyOrderRead,
    SupplyOrderStatusUpdate,
    SupplyOrderUpdate,
)
from supplychain.services import procurement

router = APIRouter(prefix="/supply-orders")


@router.get("", response_model=Page[SupplyOrderRead])
def list_supply_orders(p: PageParams = Depends(page_params), db: Session = Depends(get_db)):
    return procurement.list_supply_orders(db, p.page, p.size, p.sort_by, p.direction).convert(SupplyOrderRead)


@router.get("/status/{status}", response_model=Page[SupplyOrderRead])
def list_by_status(status: SupplyOrderStatus, p: PageParams = Depends(page_params), db: Session = Depends(get_db)):
    return procurement.list_supply_orders_by_status(db, status, p.page, p.size).convert(SupplyOrderRead)


@router.get("/supplier/{supplier_id}", response_model=Page[SupplyOrderRead])
def list_by_supplier(supplier_id: int, p: PageParams = Depends(page_params), db: Session = Depends(get_db)):
    return procurement.list_supply_orders_by_supplier(db, supplier_id, p.page, p.size).convert(SupplyOrderRead)


@router.get("/{order_id}", response_model=SupplyOrderRead)
def get_supply_order(order_id: int, db: Session = Depends(get_db)):
    return SupplyOrderRead.model_validate(procurement.get_supply_order(db, order_id))


@router.post("", response_model=SupplyOrderRead, status_code=201)
def create_supply_order(payload: SupplyOrderCreate, db: Session = Depends(get_db)):
    o = procurement.create_supply_order(db, payload)
    db.commit()
    db.refresh(o)
    return SupplyOrderRead.model_validate(o)


@router.put("/{order_id}", response_model=SupplyOrderRead)
def update_supply_order(order_id: int, payload: SupplyOrderUpdate, db: Session = Depends(get_db)):
    o = procurement.update_supply_order(db, order_id, payload)
    db.commit()
    db.refresh(o)
    return SupplyOrderRead.model_validate(o)


@router.patch("/{order_id}/status", response_model=SupplyOrderRead)
def update_status(order_id: int, payload: SupplyOrderStatusUpdate, db: Session = Depends(get_db)):
    o = procurement.update_supply_order_status(db, order_id, payload.status)
    db.commit()
    db.refresh(o)
    return SupplyOrderRead.model_validate(o)


@router.delete("/{order_id}", status_code=204)
def delete_supply_order(order_id: int, db: Session = Depends(get_db)):
    procurement.delete_supply_order(db, order_id)
    db.commit()
