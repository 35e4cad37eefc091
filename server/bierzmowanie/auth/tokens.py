from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from fastapi import Response
from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from bierzmowanie.core.config import settings
from bierzmowanie.core.errors import AccountNotFoundError, AuthenticationError
from bierzmowanie.models.account import Account

logger = logging.getLogger(__name__)


class TokenClaims(BaseModel):
    id: int
    username: str
    given_name: str | None = Field(default=None, alias="givenName")
    family_name: str | None = Field(default=None, alias="familyName")
    roles: list[str] = Field(default_factory=list)

    class Config:
        populate_by_name = True

    @classmethod
    def for_account(cls, account: Account) -> "TokenClaims":
        return cls(
            id=account.id,
            username=account.username,
            given_name=account.first_name,
            family_name=account.last_name,
            roles=account.role_names,
        )


def issue_token(claims: TokenClaims, expires_in: timedelta | None = None) -> str:
    now = datetime.now(timezone.utc)
    lifetime = expires_in if expires_in is not None else timedelta(seconds=settings.TOKEN_EXPIRE_SECONDS)
    payload = {
        "sub": str(claims.id),
        "id": claims.id,
        "username": claims.username,
        "imie": claims.given_name,
        "nazwisko": claims.family_name,
        "roles": list(claims.roles),
        "iat": int(now.timestamp()),
        "exp": int((now + lifetime).timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def _claims_from_payload(payload: dict) -> TokenClaims:
    try:
        return TokenClaims(
            id=int(payload["id"]),
            username=payload["username"],
            given_name=payload.get("imie"),
            family_name=payload.get("nazwisko"),
            roles=list(payload.get("roles") or []),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise AuthenticationError("Invalid token payload", reason=AuthenticationError.MALFORMED) from exc


def _decode(token: str, *, verify_exp: bool) -> dict:
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALG],
            options={"verify_exp": verify_exp},
        )
    except ExpiredSignatureError as exc:
        raise AuthenticationError(
            "Session expired, please log in again", reason=AuthenticationError.EXPIRED
        ) from exc
    except JWTClaimsError as exc:
        raise AuthenticationError("Authentication failed", reason=AuthenticationError.GENERIC) from exc
    except JWTError as exc:
        raise AuthenticationError(
            "Invalid token, please log in again", reason=AuthenticationError.MALFORMED
        ) from exc


def decode_token(token: str) -> TokenClaims:
    return _claims_from_payload(_decode(token, verify_exp=True))


def load_active_account(db: Session, account_id: int) -> Account | None:
    return (
        db.query(Account)
        .filter(Account.id == account_id, Account.deleted_at.is_(None))
        .first()
    )


def refresh_token(db: Session, token: str) -> tuple[str, TokenClaims]:
    """Re-issue a token whose signature is valid, even if it has expired.

    Roles come from the account's current assignments, not from the old token.
    """
    previous = _claims_from_payload(_decode(token, verify_exp=False))
    account = load_active_account(db, previous.id)
    if account is None:
        logger.info("token_refresh_rejected", extra={"account_id": previous.id})
        raise AccountNotFoundError()
    claims = TokenClaims.for_account(account)
    logger.info("token_refreshed", extra={"account_id": account.id, "roles": claims.roles})
    return issue_token(claims), claims


def set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        max_age=settings.TOKEN_EXPIRE_SECONDS,
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


def clear_auth_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.AUTH_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite="lax",
    )
