"""
UGP — Security Layer
JWT creation/verification and the caller identity dependency.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from app.config import get_settings
from app.core.exceptions import AuthenticationError, PermissionDeniedError

settings = get_settings()

bearer_scheme = HTTPBearer()


# ─── JWT ──────────────────────────────────────────────────────────────────────


def create_access_token(
    subject: int,
    role: str,
    extra: Optional[Dict[str, Any]] = None,
    expires_minutes: Optional[int] = None,
) -> str:
    """
    Create a signed JWT access token.

    :param subject: The back-office user id.
    :param role: User type alias, e.g. 'admin' or 'editor'.
    :param extra: Additional claims to embed.
    :param expires_minutes: Override default expiry from settings.
    """
    expiry = expires_minutes or settings.JWT_EXPIRY_MINUTES
    now = datetime.now(tz=timezone.utc)
    expire = now + timedelta(minutes=expiry)

    payload: Dict[str, Any] = {
        "sub": str(subject),
        "role": role,
        "iat": now,
        "exp": expire,
    }
    if extra:
        payload.update(extra)

    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate a JWT access token.
    Raises AuthenticationError (401) on any failure.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
        return payload
    except JWTError as exc:
        raise AuthenticationError(f"Invalid or expired token: {exc}") from exc


# ─── FastAPI dependencies ─────────────────────────────────────────────────────


class CurrentUser:
    """Represents the authenticated user extracted from JWT."""

    def __init__(self, user_id: int, role: str, raw_claims: Dict[str, Any]) -> None:
        self.user_id = user_id
        self.role = role
        self.raw_claims = raw_claims

    def __repr__(self) -> str:
        return f"CurrentUser(user_id={self.user_id!r}, role={self.role!r})"


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> CurrentUser:
    """
    FastAPI dependency: extracts and validates the Bearer JWT,
    returning a CurrentUser with user_id and role.
    """
    payload = decode_access_token(credentials.credentials)
    subject: Optional[str] = payload.get("sub")
    role: Optional[str] = payload.get("role")

    if not subject or not role:
        raise AuthenticationError("Token missing 'sub' or 'role' claim")
    try:
        user_id = int(subject)
    except ValueError as exc:
        raise AuthenticationError("Token 'sub' claim must be a user id") from exc

    return CurrentUser(user_id=user_id, role=role, raw_claims=payload)


def require_permission_manager(
    current_user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """Only user types listed in PERMISSION_MANAGER_ROLES may manage group permissions."""
    allowed = {r.casefold() for r in get_settings().PERMISSION_MANAGER_ROLES}
    if current_user.role.casefold() not in allowed:
        raise PermissionDeniedError(current_user.role, "manage group permissions")
    return current_user
