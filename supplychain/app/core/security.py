"""
Authentification par en-têtes.

Chaque requête protégée porte ``X-User-Email`` et ``X-User-Password`` ;
l'utilisateur est relu en base, son mot de passe vérifié puis son rôle
comparé aux rôles autorisés de la route.
"""

from __future__ import annotations

import logging

from fastapi import Depends, Header
from sqlalchemy import select
from sqlalchemy.orm import Session

from supplychain.app.api.deps import get_db
from supplychain.app.core.config import Settings, get_settings
from supplychain.app.core.errors import ForbiddenError, UnauthorizedError
from supplychain.app.db.models.core_types import Role
from supplychain.app.db.models.models_v1 import User

logger = logging.getLogger(__name__)


def require_roles(*roles: Role):
    """
    Dépendance FastAPI : 401 sans identifiants valides, 403 si le rôle
    n'est pas dans ``roles`` (aucun rôle = tout utilisateur authentifié).
    Renvoie l'utilisateur, ou None quand l'authentification est coupée.
    """
    allowed = set(roles)

    def guard(
        x_user_email: str | None = Header(default=None),
        x_user_password: str | None = Header(default=None),
        db: Session = Depends(get_db),
        settings: Settings = Depends(get_settings),
    ):
        if not settings.AUTH_ENABLED:
            return None

        if not x_user_email or not x_user_password:
            raise UnauthorizedError(
                "Authentication headers missing. Please provide X-User-Email and X-User-Password headers."
            )

        user = db.execute(select(User).where(User.email == x_user_email)).scalar_one_or_none()
        if user is None or not user.check_password(x_user_password):
            logger.warning("Authentication failed for %s", x_user_email)
            raise UnauthorizedError("Invalid credentials")

        if allowed and user.role not in allowed:
            required = ", ".join(sorted(r.value for r in allowed))
            logger.warning("Access denied for %s (role %s)", x_user_email, user.role.value)
            raise ForbiddenError(f"Access denied. Required roles: [{required}]")

        logger.debug("User %s authenticated with role %s", x_user_email, user.role.value)
        return user

    return guard
