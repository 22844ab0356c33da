from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from supplychain.app.api.deps import PageParams, get_db, page_params
from supplychain.app.schemas.common import Page
from supplychain.app.schemas.procurement import SupplierCreate, SupplierRead, SupplierUpdate
from supplychain.services import procurement

router = APIRouter(prefix="/suppliers")


@router.get("", response_model=Page[SupplierRead])
def list_suppliers(p: PageParams = Depends(page_params), db: Session = Depends(get_db)):
    return procurement.list_suppliers(db, p.page, p.size, p.sort_by, p.direction).convert(SupplierRead)


@router.get("/search", response_model=Page[SupplierRead])
def search_suppliers(
    name: str = Query(min_length=1),
    p: PageParams = Depends(page_params),
    db: Session = Depends(get_db),
):
    return procurement.search_suppliers(db, name, p.page, p.size).convert(SupplierRead)


@router.get("/{supplier_id}", response_model=SupplierRead)
def get_supplier(supplier_id: int, db: Session = Depends(get_db)):
    return SupplierRead.model_validate(procurement.get_supplier(db, supplier_id))


@router.post("", response_model=SupplierRead, status_code=201)
def create_supplier(payload: SupplierCreate, db: Session = Depends(get_db)):
    s = procurement.create_supplier(db, payload)
    db.commit()
    db.refresh(s)
    return SupplierRead.model_validate(s)


@router.put("/{supplier_id}", response_model=SupplierRead)
def update_supplier(supplier_id: int, payload: SupplierUpdate, db: Session = Depends(get_db)):
    s = procurement.update_supplier(db, supplier_id, payload)
    db.commit()
    db.refresh(s)
    return SupplierRead.model_validate(s)


@router.delete("/{supplier_id}", status_code=204)
def delete_supplier(supplier_id: int, db: Session = Depends(get_db)):
    procurement.delete_supplier(db, supplier_id)
    db.commit()
