import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from bierzmowanie.auth.deps import get_current_identity, get_token
from bierzmowanie.auth.passwords import verify_password
from bierzmowanie.auth.tokens import TokenClaims, clear_auth_cookie, issue_token, refresh_token, set_auth_cookie
from bierzmowanie.core.db import get_db
from bierzmowanie.core.errors import AuthenticationError, ValidationError
from bierzmowanie.schemas.auth import LoginRequest, LoginResponse, MessageResponse, SessionResponse
from bierzmowanie.services.accounts import find_account_by_identifier

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)) -> LoginResponse:
    if not payload.identifier or not payload.password:
        raise ValidationError("Email/username and password are required")

    account = find_account_by_identifier(db, payload.identifier)
    if account is None or not verify_password(payload.password, account.password_hash):
        logger.info("login_failed", extra={"identifier": payload.identifier})
        raise AuthenticationError("Invalid login/email or password")

    claims = TokenClaims.for_account(account)
    set_auth_cookie(response, issue_token(claims))
    logger.info("login_succeeded", extra={"account_id": account.id, "roles": claims.roles})
    return LoginResponse(message="Logged in", user=claims)


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response) -> MessageResponse:
    clear_auth_cookie(response)
    return MessageResponse(message="Logged out")


@router.get("/check-session", response_model=SessionResponse)
def check_session(identity: TokenClaims = Depends(get_current_identity)) -> SessionResponse:
    return SessionResponse(user=identity)


@router.post("/refresh-token", response_model=LoginResponse)
def refresh(
    response: Response,
    token: str | None = Depends(get_token),
    db: Session = Depends(get_db),
) -> LoginResponse:
    if not token:
        raise ValidationError("No token to refresh")
    new_token, claims = refresh_token(db, token)
    set_auth_cookie(response, new_token)
    return LoginResponse(message="Token refreshed", user=claims)
