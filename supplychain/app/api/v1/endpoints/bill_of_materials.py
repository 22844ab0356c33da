from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from supplychain.app.api.deps import PageParams, get_db, page_params
from supplychain.app.schemas.common import Page
from supplychain.app.schemas.production import (
    AvailabilityRead,
    BillOfMaterialCreate,
    BillOfMaterialRead,
    BillOfMaterialUpdate,
)
from supplychain.services import production
from supplychain.services.inventory import check_materials_availability

router = APIRouter(prefix="/bill-of-materials")


@router.get("", response_model=Page[BillOfMaterialRead])
def list_boms(p: PageParams = Depends(page_params), db: Session = Depends(get_db)):
    return production.list_bills_of_material(db, p.page, p.size).convert(BillOfMaterialRead)


@router.get("/check-availability", response_model=AvailabilityRead)
def check_availability(
    product_id: int,
    quantity: int = Query(ge=1),
    db: Session = Depends(get_db),
):
    available = check_materials_availability(db, product_id, quantity)
    return AvailabilityRead(product_id=product_id, quantity=quantity, available=available)


@router.get("/product/{product_id}", response_model=list[BillOfMaterialRead])
def list_by_product(product_id: int, db: Session = Depends(get_db)):
    return [BillOfMaterialRead.model_validate(b) for b in production.list_bills_of_material_by_product(db, product_id)]


@router.get("/{bom_id}", response_model=BillOfMaterialRead)
def get_bom(bom_id: int, db: Session = Depends(get_db)):
    return BillOfMaterialRead.model_validate(production.get_bill_of_material(db, bom_id))


@router.post("", response_model=BillOfMaterialRead, status_code=201)
def create_bom(payload: BillOfMaterialCreate, db: Session = Depends(get_db)):
    bom = production.create_bill_of_material(db, payload)
    db.commit()
    db.refresh(bom)
    return BillOfMaterialRead.model_validate(bom)


@router.put("/{bom_id}", response_model=BillOfMaterialRead)
def update_bom(bom_id: int, payload: BillOfMaterialUpdate, db: Session = Depends(get_db)):
    bom = production.update_bill_of_material(db, bom_id, payload)
    db.commit()
    db.refresh(bom)
    return BillOfMaterialRead.model_validate(bom)


@router.delete("/{bom_id}", status_code=204)
def delete_bom(bom_id: int, db: Session = Depends(get_db)):
    production.delete_bill_of_material(db, bom_id)
    db.commit()
