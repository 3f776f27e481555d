"""HTTP Basic-auth gate backed by the ADMIN_* settings."""

import base64
import binascii
import hashlib
import hmac
import logging
from typing import Optional, Tuple

from fastapi import Depends, HTTPException
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from .config import settings

logger = logging.getLogger("catalog_api.security")

basic_scheme = HTTPBasic(auto_error=False)

_CHALLENGE = {"WWW-Authenticate": "Basic"}


def _digest(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def check_credentials(username: Optional[str], password: Optional[str]) -> bool:
    if username is None or password is None:
        return False
    user_ok = hmac.compare_digest(username.encode("utf-8"), settings.ADMIN_USERNAME.encode("utf-8"))
    pass_ok = hmac.compare_digest(_digest(password), _digest(settings.ADMIN_PASSWORD))
    return user_ok and pass_ok


def make_token(username: str, password: str) -> str:
    """The value a client puts after ``Basic `` in its Authorization header."""
    return base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")


def decode_token(token: str) -> Tuple[str, str]:
    """Split a body-supplied ``user:pass`` token. Raises ValueError when malformed."""
    try:
        decoded = base64.b64decode(token, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise ValueError("Invalid token format") from exc
    username, sep, password = decoded.partition(":")
    if not sep:
        raise ValueError("Invalid token format")
    return username, password


def require_auth(credentials: Optional[HTTPBasicCredentials] = Depends(basic_scheme)) -> str:
    """FastAPI dependency: returns the authenticated username or raises 401.

    A ``Basic`` header whose payload cannot be decoded is rejected by
    ``HTTPBasic`` itself.
    """
    if credentials is None:
        raise HTTPException(
            status_code=401,
            detail="Authentication required: missing or invalid authorization header",
            headers=_CHALLENGE,
        )
    if not check_credentials(credentials.username, credentials.password):
        logger.warning("Rejected credentials for user %r", credentials.username)
        raise HTTPException(
            status_code=401,
            detail="Authentication failed: invalid username or password",
            headers=_CHALLENGE,
        )
    return credentials.username
