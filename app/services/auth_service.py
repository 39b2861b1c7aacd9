from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Annotated

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AuthenticationError, ConflictError, PermissionDeniedError
from app.core.security import create_access_token, hash_password, verify_password
from app.db.session import get_db
from app.models import models, schemas
from app.services.audit_service import record_audit

logger = logging.getLogger(__name__)


@dataclass
class TokenBundle:
    access_token: str
    access_expires_at: datetime
    user: models.User


class AuthService:
    def __init__(self, db: Session):
        self.db = db

    # ----------------------------- Register -----------------------------

    def register(self, payload: schemas.RegisterRequest, actor: models.User | None = None) -> TokenBundle:
        """Create a user. Only an admin may hand out a role other than ``user``."""
        role = payload.role.value
        if role != models.UserRole.USER.value and (actor is None or not actor.is_admin):
            raise PermissionDeniedError(
                "Only administrators can register users with elevated roles",
                required_roles=[models.UserRole.ADMIN.value],
            )

        username = payload.username.strip()
        existing = self.db.scalar(select(models.User.id).where(models.User.username == username))
        if existing is not None:
            raise ConflictError("Username already exists", {"username": username})

        try:
            user = models.User(
                username=username,
                hashed_password=hash_password(payload.password),
                role=role,
            )
            self.db.add(user)
            self.db.flush()
            record_audit(
                self.db, "create", "user", user.id,
                actor.id if actor else user.id,
                username=username, role=role,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info("Registered user %s (id=%s, role=%s)", user.username, user.id, user.role)
        return self._issue_token(user)

    # ----------------------------- Login -----------------------------

    def authenticate(self, payload: schemas.LoginRequest) -> TokenBundle:
        user = self.db.scalar(select(models.User).where(models.User.username == payload.username))
        if user is None or not verify_password(payload.password, user.hashed_password):
            raise AuthenticationError("Invalid credentials")
        if not user.is_active:
            raise AuthenticationError("User account is disabled")
        return self._issue_token(user)

    def _issue_token(self, user: models.User) -> TokenBundle:
        expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        token = create_access_token(str(user.id), user.role)
        return TokenBundle(access_token=token, access_expires_at=expires_at, user=user)


def get_auth_service(db: Annotated[Session, Depends(get_db)]) -> AuthService:
    return AuthService(db)
