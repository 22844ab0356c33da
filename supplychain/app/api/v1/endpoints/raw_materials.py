from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from supplychain.app.api.deps import PageParams, get_db, page_params
from supplychain.app.schemas.common import Page
from supplychain.app.schemas.procurement import RawMaterialCreate, RawMaterialRead, RawMaterialUpdate
from supplychain.services import procurement

router = APIRouter(prefix="/raw-materials")


@router.get("", response_model=Page[RawMaterialRead])
def list_raw_materials(p: PageParams = Depends(page_params), db: Session = Depends(get_db)):
    return procurement.list_raw_materials(db, p.page, p.size, p.sort_by, p.direction).convert(RawMaterialRead)


@router.get("/search", response_model=Page[RawMaterialRead])
def search_raw_materials(
    name: str = Query(min_length=1),
    p: PageParams = Depends(page_params),
    db: Session = Depends(get_db),
):
    return procurement.search_raw_materials(db, name, p.page, p.size).convert(RawMaterialRead)


@router.get("/below-minimum", response_model=Page[RawMaterialRead])
def list_below_minimum(p: PageParams = Depends(page_params), db: Session = Depends(get_db)):
    return procurement.list_raw_materials_below_minimum(db, p.page, p.size).convert(RawMaterialRead)


@router.get("/below-minimum/all", response_model=list[RawMaterialRead])
def list_all_below_minimum(db: Session = Depends(get_db)):
    return [RawMaterialRead.model_validate(m) for m in procurement.all_raw_materials_below_minimum(db)]


@router.get("/{material_id}", response_model=RawMaterialRead)
def get_raw_material(material_id: int, db: Session = Depends(get_db)):
    return RawMaterialRead.model_validate(procurement.get_raw_material(db, material_id))


@router.post("", response_model=RawMaterialRead, status_code=201)
def create_raw_material(payload: RawMaterialCreate, db: Session = Depends(get_db)):
    m = procurement.create_raw_material(db, payload)
    db.commit()
    db.refresh(m)
    return RawMaterialRead.model_validate(m)


@router.put("/{material_id}", response_model=RawMaterialRead)
def update_raw_material(material_id: int, payload: RawMaterialUpdate, db: Session = Depends(get_db)):
    m = procurement.update_raw_material(db, material_id, payload)
    db.commit()
    db.refresh(m)
    return RawMaterialRead.model_validate(m)


@router.delete("/{material_id}", status_code=204)
def delete_raw_material(material_id: int, db: Session = Depends(get_db)):
    procurement.delete_raw_material(db, material_id)
    db.commit()


@router.post("/{material_id}/suppliers/{supplier_id}", response_model=RawMaterialRead)
def add_supplier(material_id: int, supplier_id: int, db: Session = Depends(get_db)):
    m = procurement.add_supplier_to_material(db, material_id, supplier_id)
    db.commit()
    db.refresh(m)
    return RawMaterialRead.model_validate(m)


@router.delete("/{material_id}/suppliers/{supplier_id}", response_model=RawMaterialRead)
def remove_supplier(material_id: int, supplier_id: int, db: Session = Depends(get_db)):
    m = procurement.remove_supplier_from_material(db, material_id, supplier_id)
    db.commit()
    db.refresh(m)
    return RawMaterialRead.model_validate(m)
