import logging

from fastapi import APIRouter, HTTPException

from ..schemas.auth import LoginRequest, LoginResponse, ValidateSessionRequest, ValidateSessionResponse
from ..security import check_credentials, decode_token, make_token

logger = logging.getLogger("catalog_api.routers.auth_router")

router = APIRouter(tags=["Auth"])


@router.post("/login", response_model=LoginResponse)
def login(req: LoginRequest):
    """Check credentials and return the Basic-auth token for later requests."""
    if not req.username or not req.password:
        raise HTTPException(status_code=400, detail="Username and password are required")
    if not check_credentials(req.username, req.password):
        logger.warning("Failed login for %r", req.username)
        raise HTTPException(status_code=401, detail="Invalid username or password")
    return LoginResponse(message="Authentication successful", token=make_token(req.username, req.password))


@router.post("/validate-session", response_model=ValidateSessionResponse)
def validate_session(req: ValidateSessionRequest):
    if not req.token:
        raise HTTPException(status_code=401, detail="No token provided")
    try:
        username, password = decode_token(req.token)
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid token format")
    if not check_credentials(username, password):
        raise HTTPException(status_code=401, detail="Invalid session")
    return ValidateSessionResponse(message="Session valid")
