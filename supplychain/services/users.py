from __future__ import annotations

import logging

from sqlalchemy import select, or_
from sqlalchemy.orm import Session

from supplychain.app.core.errors import EmailAlreadyExistsError, UserNotFoundError
from supplychain.app.db.models.models_v1 import User
from supplychain.app.schemas.common import Page, updated_fields
from supplychain.app.schemas.user import UserCreate, UserUpdate
from supplychain.services.pagination import contains_ignore_case, paginate, sorted_by

logger = logging.getLogger(__name__)


def _email_taken(db: Session, email: str) -> bool:
    return db.execute(select(User.id).where(User.email == email)).first() is not None


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise UserNotFoundError(user_id)
    return user


def get_user_by_email(db: Session, email: str) -> User:
    user = db.execute(select(User).where(User.email == email)).scalar_one_or_none()
    if not user:
        raise UserNotFoundError(message=f"User not found with email: {email}")
    return user


def create_user(db: Session, payload: UserCreate) -> User:
    logger.info("Creating new user with email: %s", payload.email)
    if _email_taken(db, payload.email):
        logger.warning("Email already exists: %s", payload.email)
        raise EmailAlreadyExistsError(payload.email)

    user = User(
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        role=payload.role,
    )
    user.set_password(payload.password)
    db.add(user)
    db.flush()
    logger.info("User created successfully with ID: %s", user.id)
    return user


def update_user(db: Session, user_id: int, payload: UserUpdate) -> User:
    logger.info("Updating user with ID: %s", user_id)
    user = get_user(db, user_id)

    fields = updated_fields(payload)
    email = fields.get("email")
    if email is not None and email != user.email and _email_taken(db, email):
        logger.warning("Email already exists: %s", email)
        raise EmailAlreadyExistsError(email)

    # mot de passe vide = inchangé
    password = fields.pop("password", None)
    if password:
        user.set_password(password)
    for name, value in fields.items():
        setattr(user, name, value)

    db.flush()
    logger.info("User updated successfully with ID: %s", user_id)
    return user


def list_users(
    db: Session, page: int = 0, size: int = 10, sort_by: str | None = None, direction: str = "asc"
) -> Page:
    return paginate(db, sorted_by(select(User), User, sort_by, direction), page, size)


def search_users(db: Session, name: str, page: int = 0, size: int = 10) -> Page:
    logger.info("Searching users by name: %s", name)
    stmt = select(User).where(
        or_(contains_ignore_case(User.first_name, name), contains_ignore_case(User.last_name, name))
    )
    return paginate(db, sorted_by(stmt, User), page, size)


def delete_user(db: Session, user_id: int) -> None:
    logger.info("Deleting user with ID: %s", user_id)
    user = get_user(db, user_id)
    db.delete(user)
    db.flush()
