from __future__ import annotations

import logging
import os
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from pydantic import BaseModel, Field
from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models
from ..core.access import RequestContext
from ..core.auth_utils import (
    generate_token,
    hash_token,
    parse_iso,
    session_expiry,
    to_iso,
    utcnow,
    verify_password,
)
from ..database import get_db

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)

SESSION_TTL_HOURS = max(1, int(os.getenv("AUTH_SESSION_TTL_HOURS", "24")))


class LoginRequest(BaseModel):
    login: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


def serialize_user(user: models.User) -> dict:
    return {
        "id": int(user.id),
        "login": user.login,
        "name": user.name,
        "email": user.email or "",
        "is_admin": bool(user.is_admin),
    }


def _extract_bearer_token(authorization: str) -> str:
    value = (authorization or "").strip()
    if not value:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required.")
    parts = value.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid authorization header.")
    return parts[1].strip()


def _resolve_session(token: str, db: Session) -> models.AuthSession:
    session = (
        db.query(models.AuthSession)
        .filter(models.AuthSession.token_hash == hash_token(token))
        .first()
    )
    if not session:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Session not found.")
    if session.revoked_at:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Session is revoked.")
    if parse_iso(session.expires_at) <= utcnow():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Session expired.")
    return session


def _load_session_user(session: models.AuthSession, db: Session) -> models.User:
    user = db.query(models.User).filter(models.User.id == session.user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found.")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User is inactive.")
    return user


def get_current_user(authorization: str = Header(default=""), db: Session = Depends(get_db)) -> models.User:
    token = _extract_bearer_token(authorization)
    return _load_session_user(_resolve_session(token, db), db)


def get_optional_user(
    authorization: str = Header(default=""),
    db: Session = Depends(get_db),
) -> Optional[models.User]:
    """Like ``get_current_user`` but anonymous callers get ``None``."""
    if not (authorization or "").strip():
        return None
    return get_current_user(authorization=authorization, db=db)


def get_request_context(
    project_id: Optional[int] = Query(default=None, ge=1),
    user: Optional[models.User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
) -> RequestContext:
    project = None
    if project_id is not None:
        project = db.query(models.Project).filter(models.Project.id == int(project_id)).first()
        if project is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found.")
    return RequestContext(user=user, project=project)


@router.post("/login")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    login_name = payload.login.strip().lower()
    user = db.query(models.User).filter(func.lower(models.User.login) == login_name).first()
    if not user or user.user_type != models.USER_TYPE_USER:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid login or password.")

    if not verify_password(payload.password, user.password_hash or ""):
        logger.info("failed login attempt for %s", login_name)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid login or password.")

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User is inactive.")

    raw_token = generate_token()
    session = models.AuthSession(
        user_id=user.id,
        token_hash=hash_token(raw_token),
        expires_at=to_iso(session_expiry(SESSION_TTL_HOURS)),
        revoked_at=None,
        created_at=to_iso(utcnow()),
    )
    db.add(session)
    db.commit()

    return {
        "access_token": raw_token,
        "token_type": "bearer",
        "expires_at": session.expires_at,
        "user": serialize_user(user),
    }


@router.get("/me")
def me(user: models.User = Depends(get_current_user)):
    return serialize_user(user)


@router.post("/logout")
def logout(
    authorization: str = Header(default=""),
    db: Session = Depends(get_db),
    _: models.User = Depends(get_current_user),
):
    session = _resolve_session(_extract_bearer_token(authorization), db)
    session.revoked_at = to_iso(utcnow())
    db.commit()
    return {"message": "Logged out."}
