from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from supplychain.app.api.deps import PageParams, get_db, page_params
from supplychain.app.schemas.common import Page
from supplychain.app.schemas.user import UserCreate, UserRead, UserUpdate
from supplychain.services import users

router = APIRouter(prefix="/users")


@router.get("", response_model=Page[UserRead])
def list_users(p: PageParams = Depends(page_params), db: Session = Depends(get_db)):
    return users.list_users(db, p.page, p.size, p.sort_by, p.direction).convert(UserRead)


@router.get("/search", response_model=Page[UserRead])
def search_users(
    name: str = Query(min_length=1),
    p: PageParams = Depends(page_params),
    db: Session = Depends(get_db),
):
    return users.search_users(db, name, p.page, p.size).convert(UserRead)


@router.get("/email/{email}", response_model=UserRead)
def get_user_by_email(email: str, db: Session = Depends(get_db)):
    return UserRead.model_validate(users.get_user_by_email(db, email))


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return UserRead.model_validate(users.get_user(db, user_id))


@router.post("", response_model=UserRead, status_code=201)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    u = users.create_user(db, payload)
    db.commit()
    db.refresh(u)
    return UserRead.model_validate(u)


@router.put("/{user_id}", response_model=UserRead)
def update_user(user_id: int, payload: UserUpdate, db: Session = Depends(get_db)):
    u = users.update_user(db, user_id, payload)
    db.commit()
    db.refresh(u)
    return UserRead.model_validate(u)


@router.delete("/{user_id}", status_code=204)
def delete_user(user_id: int, db: Session = Depends(get_db)):
    users.delete_user(db, user_id)
    db.commit()
