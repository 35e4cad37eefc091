from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from bierzmowanie.auth import roles
from bierzmowanie.auth.tokens import TokenClaims, decode_token, issue_token, refresh_token
from bierzmowanie.core.config import settings
from bierzmowanie.core.errors import AccountNotFoundError, AuthenticationError


def _claims(**overrides) -> TokenClaims:
    values = {
        "id": 7,
        "username": "jan.kowalski",
        "given_name": "Jan",
        "family_name": "Kowalski",
        "roles": [roles.CANDIDATE],
    }
    values.update(overrides)
    return TokenClaims(**values)


def test_issued_token_decodes_to_the_same_claims():
    claims = _claims()
    assert decode_token(issue_token(claims)) == claims


def test_token_payload_carries_identity_and_lifetime():
    payload = jwt.decode(issue_token(_claims()), settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
    assert payload["sub"] == "7"
    assert payload["imie"] == "Jan"
    assert payload["nazwisko"] == "Kowalski"
    assert payload["roles"] == [roles.CANDIDATE]
    assert payload["exp"] - payload["iat"] == settings.TOKEN_EXPIRE_SECONDS


def test_expired_token_is_rejected():
    token = issue_token(_claims(), expires_in=timedelta(seconds=-30))
    with pytest.raises(AuthenticationError) as excinfo:
        decode_token(token)
    assert excinfo.value.reason == AuthenticationError.EXPIRED
    assert excinfo.value.payload()["errorType"] == "TOKEN_EXPIRED"


def test_token_signed_with_another_key_is_malformed():
    token = jwt.encode({"id": 7, "username": "jan"}, "not-our-secret", algorithm="HS256")
    with pytest.raises(AuthenticationError) as excinfo:
        decode_token(token)
    assert excinfo.value.reason == AuthenticationError.MALFORMED


def test_garbage_token_is_malformed():
    with pytest.raises(AuthenticationError) as excinfo:
        decode_token("not-a-token")
    assert excinfo.value.payload()["errorType"] == "INVALID_TOKEN"


def test_token_without_identity_claims_is_malformed():
    exp = int((datetime.now(timezone.utc) + timedelta(minutes=5)).timestamp())
    token = jwt.encode({"exp": exp}, settings.JWT_SECRET, algorithm=settings.JWT_ALG)
    with pytest.raises(AuthenticationError) as excinfo:
        decode_token(token)
    assert excinfo.value.reason == AuthenticationError.MALFORMED


def test_refresh_uses_current_roles(db_session, make_account):
    account = make_account("jan.kowalski", roles.CANDIDATE, roles.PARENT)
    stale = _claims(id=account.id, roles=[roles.ANIMATOR])
    expired = issue_token(stale, expires_in=timedelta(seconds=-60))

    new_token, claims = refresh_token(db_session, expired)

    assert claims.roles == [roles.CANDIDATE, roles.PARENT]
    assert decode_token(new_token).roles == [roles.CANDIDATE, roles.PARENT]


def test_refresh_rejects_deleted_account(db_session, make_account):
    account = make_account("jan.kowalski", roles.CANDIDATE)
    token = issue_token(TokenClaims.for_account(account), expires_in=timedelta(seconds=-60))
    account.deleted_at = datetime.now(timezone.utc)
    db_session.commit()

    with pytest.raises(AccountNotFoundError):
        refresh_token(db_session, token)


def test_refresh_still_checks_the_signature(db_session):
    token = jwt.encode({"id": 1, "username": "jan"}, "not-our-secret", algorithm="HS256")
    with pytest.raises(AuthenticationError) as excinfo:
        refresh_token(db_session, token)
    assert excinfo.value.reason == AuthenticationError.MALFORMED
