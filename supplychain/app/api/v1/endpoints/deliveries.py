from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from supplychain.app.api.deps import PageParams, get_db, page_params
from supplychain.app.db.models.core_types import DeliveryStatus
from supplychain.app.schemas.common import Page
from supplychain.app.schemas.delivery import DeliveryCostRead, DeliveryCreate, DeliveryRead, DeliveryUpdate
from supplychain.services import delivery as deliveries

router = APIRouter(prefix="/deliveries")


@router.get("", response_model=Page[DeliveryRead])
def list_deliveries(p: PageParams = Depends(page_params), db: Session = Depends(get_db)):
    return deliveries.list_deliveries(db, p.page, p.size, p.sort_by, p.direction).convert(DeliveryRead)


@router.get("/order/{order_id}", response_model=DeliveryRead)
def get_by_order(order_id: int, db: Session = Depends(get_db)):
    return DeliveryRead.model_validate(deliveries.get_delivery_by_order(db, order_id))


@router.get("/status/{status}", response_model=Page[DeliveryRead])
def list_by_status(status: DeliveryStatus, p: PageParams = Depends(page_params), db: Session = Depends(get_db)):
    return deliveries.list_deliveries_by_status(db, status, p.page, p.size).convert(DeliveryRead)


@router.get("/{delivery_id}", response_model=DeliveryRead)
def get_delivery(delivery_id: int, db: Session = Depends(get_db)):
    return DeliveryRead.model_validate(deliveries.get_delivery(db, delivery_id))


@router.post("", response_model=DeliveryRead, status_code=201)
def create_delivery(payload: DeliveryCreate, db: Session = Depends(get_db)):
    d = deliveries.create_delivery(db, payload)
    db.commit()
    db.refresh(d)
    return DeliveryRead.model_validate(d)


@router.put("/{delivery_id}", response_model=DeliveryRead)
def update_delivery(delivery_id: int, payload: DeliveryUpdate, db: Session = Depends(get_db)):
    d = deliveries.update_delivery(db, delivery_id, payload)
    db.commit()
    db.refresh(d)
    return DeliveryRead.model_validate(d)


@router.post("/{delivery_id}/calculate-cost", response_model=DeliveryCostRead)
def calculate_cost(delivery_id: int, db: Session = Depends(get_db)):
    cost = deliveries.calculate_delivery_cost(db, delivery_id)
    db.commit()
    return DeliveryCostRead(delivery_id=delivery_id, cost=float(cost))


@router.delete("/{delivery_id}", status_code=204)
def delete_delivery(delivery_id: int, db: Session = Depends(get_db)):
    deliveries.delete_delivery(db, delivery_id)
    db.commit()
