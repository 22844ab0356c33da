import pytest

from supplychain.app.core.errors import EmailAlreadyExistsError, UserNotFoundError
from supplychain.app.db.models.core_types import Role
from supplychain.app.schemas.user import UserCreate, UserRead, UserUpdate
from supplychain.services import users


def _create(db_session, email="alice@supplychainx.com", first_name="Alice", last_name="Martin"):
    return users.create_user(
        db_session,
        UserCreate(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password="s3cret-pass",
            role=Role.chef_production,
        ),
    )


def test_create_hashes_password(db_session):
    user = _create(db_session)

    assert user.password_hash != "s3cret-pass"
    assert user.check_password("s3cret-pass")
    assert not user.check_password("wrong")
    assert "password_hash" not in UserRead.model_validate(user).model_dump()


def test_email_unique_on_create(db_session):
    _create(db_session)
    with pytest.raises(EmailAlreadyExistsError) as exc:
        _create(db_session, first_name="Bob")
    assert exc.value.message == "Email already exists: alice@supplychainx.com"


def test_email_unique_on_update(db_session):
    _create(db_session)
    bob = _create(db_session, email="bob@supplychainx.com", first_name="Bob")

    with pytest.raises(EmailAlreadyExistsError):
        users.update_user(db_session, bob.id, UserUpdate(email="alice@supplychainx.com"))

    # même email : pas de conflit avec soi-même
    users.update_user(db_session, bob.id, UserUpdate(email="bob@supplychainx.com", last_name="Durand"))
    assert bob.last_name == "Durand"


def test_update_password_only_when_non_empty(db_session):
    user = _create(db_session)
    old_hash = user.password_hash

    users.update_user(db_session, user.id, UserUpdate(password=""))
    assert user.password_hash == old_hash

    users.update_user(db_session, user.id, UserUpdate(password="new-password"))
    assert user.check_password("new-password")


def test_search_and_lookup(db_session):
    _create(db_session)
    _create(db_session, email="bob@supplychainx.com", first_name="Bob", last_name="Alison")
    _create(db_session, email="carl@supplychainx.com", first_name="Carl", last_name="Petit")

    assert users.search_users(db_session, "ali").total == 2
    assert users.get_user_by_email(db_session, "carl@supplychainx.com").first_name == "Carl"
    with pytest.raises(UserNotFoundError):
        users.get_user_by_email(db_session, "nobody@supplychainx.com")


def test_delete_user(db_session):
    user = _create(db_session)
    users.delete_user(db_session, user.id)
    with pytest.raises(UserNotFoundError):
        users.get_user(db_session, user.id)
