from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from supplychain.app.api.deps import PageParams, get_db, page_params
from supplychain.app.core.security import require_roles
from supplychain.app.db.models.core_types import Role
from supplychain.app.schemas.common import Page
from supplychain.app.schemas.production import ProductCreate, ProductRead, ProductUpdate
from supplychain.services import production

router = APIRouter(prefix="/products")

WRITE_ROLES = (Role.admin, Role.chef_production)
READ_ROLES = WRITE_ROLES + (Role.superviseur_production, Role.planificateur)

can_read = require_roles(*READ_ROLES)
can_write = require_roles(*WRITE_ROLES)


@router.get("", response_model=Page[ProductRead], dependencies=[Depends(can_read)])
def list_products(p: PageParams = Depends(page_params), db: Session = Depends(get_db)):
    return production.list_products(db, p.page, p.size, p.sort_by, p.direction).convert(ProductRead)


@router.get("/search", response_model=Page[ProductRead], dependencies=[Depends(can_read)])
def search_products(
    name: str = Query(min_length=1),
    p: PageParams = Depends(page_params),
    db: Session = Depends(get_db),
):
    return production.search_products(db, name, p.page, p.size).convert(ProductRead)


@router.get("/{product_id}", response_model=ProductRead, dependencies=[Depends(can_read)])
def get_product(product_id: int, db: Session = Depends(get_db)):
    return ProductRead.model_validate(production.get_product(db, product_id))


@router.post("", response_model=ProductRead, status_code=201, dependencies=[Depends(can_write)])
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    product = production.create_product(db, payload)
    db.commit()
    db.refresh(product)
    return ProductRead.model_validate(product)


@router.put("/{product_id}", response_model=ProductRead, dependencies=[Depends(can_write)])
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    product = production.update_product(db, product_id, payload)
    db.commit()
    db.refresh(product)
    return ProductRead.model_validate(product)


@router.delete("/{product_id}", status_code=204, dependencies=[Depends(can_write)])
def delete_product(product_id: int, db: Session = Depends(get_db)):
    production.delete_product(db, product_id)
    db.commit()
