from typing import Annotated

from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.orm import Session

from app import metrics
from app.api.rate_limit import RATE_LIMITS, limiter
from app.core.audit import log_audit_event, log_failure
from app.core.exceptions import AuthenticationError, InventoryError
from app.core.security import TokenExpiredError, TokenValidationError, decode_token
from app.db.session import get_db
from app.models import models, schemas
from app.services.auth_service import AuthService, TokenBundle, get_auth_service

router = APIRouter()

AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization or not authorization.lower().startswith("bearer "):
        return None
    return authorization.split(" ", 1)[1].strip() or None


def get_current_user_id(authorization: str | None = Header(None)) -> int:
    token = _bearer_token(authorization)
    if token is None:
        log_failure("auth.token.parse", user_id=None, error="missing_token")
        raise AuthenticationError("Missing token")
    try:
        payload = decode_token(token)
        return int(payload["sub"])
    except TokenExpiredError as exc:
        log_failure("auth.token.expired", user_id=None, error="expired")
        raise AuthenticationError("Token expired") from exc
    except (TokenValidationError, ValueError) as exc:
        log_failure("auth.token.invalid", user_id=None, error="invalid")
        raise AuthenticationError("Invalid token") from exc


def get_current_user(
    user_id: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[Session, Depends(get_db)],
) -> models.User:
    user = db.get(models.User, user_id)
    if user is None or not user.is_active:
        log_failure("auth.token.user", user_id=user_id, error="unknown_or_inactive_user")
        raise AuthenticationError("Invalid user")
    return user


def get_optional_user(
    db: Annotated[Session, Depends(get_db)],
    authorization: str | None = Header(None),
) -> models.User | None:
    """The bearer's user when a valid token is sent, otherwise None."""
    token = _bearer_token(authorization)
    if token is None:
        return None
    try:
        payload = decode_token(token)
        user = db.get(models.User, int(payload["sub"]))
    except (TokenValidationError, ValueError):
        return None
    if user is None or not user.is_active:
        return None
    return user


def _token_out(bundle: TokenBundle) -> schemas.TokenOut:
    return schemas.TokenOut(
        access=bundle.access_token,
        access_expires_at=bundle.access_expires_at,
        user=schemas.UserOut.model_validate(bundle.user),
    )


@router.post("/register", response_model=schemas.TokenOut, status_code=201)
@limiter.limit(RATE_LIMITS["register"])
def register(
    request: Request,
    payload: schemas.RegisterRequest,
    svc: AuthServiceDep,
    actor: Annotated[models.User | None, Depends(get_optional_user)],
):
    try:
        bundle = svc.register(payload, actor=actor)
    except InventoryError as exc:
        log_failure(
            "auth.register",
            user_id=actor.id if actor else None,
            error=exc.message,
            username=payload.username,
            role=payload.role.value,
        )
        raise
    log_audit_event(
        "auth.register",
        user_id=bundle.user.id,
        username=bundle.user.username,
        role=bundle.user.role,
        by=actor.id if actor else None,
    )
    return _token_out(bundle)


@router.post("/login", response_model=schemas.TokenOut)
@limiter.limit(RATE_LIMITS["login"])
def login(request: Request, payload: schemas.LoginRequest, svc: AuthServiceDep):
    try:
        bundle = svc.authenticate(payload)
    except AuthenticationError as exc:
        metrics.login_failed()
        log_failure("auth.login", user_id=None, error=exc.message, username=payload.username)
        raise
    metrics.login_succeeded()
    log_audit_event("auth.login", user_id=bundle.user.id, username=bundle.user.username)
    return _token_out(bundle)


@router.get("/me", response_model=schemas.UserDetailOut)
def me(user: Annotated[models.User, Depends(get_current_user)]):
    return user
