from typing import Optional

from pydantic import BaseModel


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(BaseModel):
    success: bool = True
    message: str
    token: str


class ValidateSessionRequest(BaseModel):
    token: Optional[str] = None


class ValidateSessionResponse(BaseModel):
    success: bool = True
    message: str
