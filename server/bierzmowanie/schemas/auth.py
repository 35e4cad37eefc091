from typing import Optional

from pydantic import BaseModel

from bierzmowanie.auth.tokens import TokenClaims


class LoginRequest(BaseModel):
    identifier: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(BaseModel):
    success: bool = True
    message: str
    user: TokenClaims


class SessionResponse(BaseModel):
    success: bool = True
    isLoggedIn: bool = True
    user: TokenClaims


class MessageResponse(BaseModel):
    success: bool = True
    message: str
