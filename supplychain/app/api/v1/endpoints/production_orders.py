from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from supplychain.app.api.deps import PageParams, get_db, page_params
from supplychain.app.db.models.core_types import ProductionOrderStatus
from supplychain.app.schemas.common import Page
from supplychain.app.schemas.production import (
    ProductionOrderCreate,
    ProductionOrderRead,
    ProductionOrderStatusUpdate,
    ProductionOrderUpdate,
    ProductionTimeEstimate,
)
from supplychain.services import production
from supplychain.services.inventory import check_materials_availability

router = APIRouter(prefix="/production-orders")


@router.get("", response_model=Page[ProductionOrderRead])
def list_orders(p: PageParams = Depends(page_params), db: Session = Depends(get_db)):
    return production.list_production_orders(db, p.page, p.size, p.sort_by, p.direction).convert(ProductionOrderRead)


@router.get("/status/{status}", response_model=Page[ProductionOrderRead])
def list_by_status(status: ProductionOrderStatus, p: PageParams = Depends(page_params), db: Session = Depends(get_db)):
    return production.list_production_orders_by_status(db, status, p.page, p.size).convert(ProductionOrderRead)


@router.get("/product/{product_id}", response_model=Page[ProductionOrderRead])
def list_by_product(product_id: int, p: PageParams = Depends(page_params), db: Session = Depends(get_db)):
    return production.list_production_orders_by_product(db, product_id, p.page, p.size).convert(ProductionOrderRead)


@router.get("/priority", response_model=Page[ProductionOrderRead])
def list_priority(p: PageParams = Depends(page_params), db: Session = Depends(get_db)):
    return production.list_priority_production_orders(db, p.page, p.size).convert(ProductionOrderRead)


@router.get("/estimate-time", response_model=ProductionTimeEstimate)
def estimate_time(product_id: int, quantity: int = Query(ge=1), db: Session = Depends(get_db)):
    hours = production.estimate_production_time(db, product_id, quantity)
    return ProductionTimeEstimate(product_id=product_id, quantity=quantity, estimated_hours=hours)


@router.get("/{order_id}", response_model=ProductionOrderRead)
def get_order(order_id: int, db: Session = Depends(get_db)):
    order = production.get_production_order(db, order_id)
    available = check_materials_availability(db, order.product_id, order.quantity)
    return ProductionOrderRead.model_validate(order).model_copy(update={"materials_available": available})


@router.post("", response_model=ProductionOrderRead, status_code=201)
def create_order(payload: ProductionOrderCreate, db: Session = Depends(get_db)):
    order = production.create_production_order(db, payload)
    db.commit()
    db.refresh(order)
    return ProductionOrderRead.model_validate(order)


@router.put("/{order_id}", response_model=ProductionOrderRead)
def update_order(order_id: int, payload: ProductionOrderUpdate, db: Session = Depends(get_db)):
    order = production.update_production_order(db, order_id, payload)
    db.commit()
    db.refresh(order)
    return ProductionOrderRead.model_validate(order)


@router.patch("/{order_id}/status", response_model=ProductionOrderRead)
def update_status(order_id: int, payload: ProductionOrderStatusUpdate, db: Session = Depends(get_db)):
    order = production.update_production_order_status(db, order_id, payload.status)
    db.commit()
    db.refresh(order)
    return ProductionOrderRead.model_validate(order)


@router.delete("/{order_id}", status_code=204)
def cancel_order(order_id: int, db: Session = Depends(get_db)):
    production.cancel_production_order(db, order_id)
    db.commit()
