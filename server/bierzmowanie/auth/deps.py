from typing import Callable

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer

from bierzmowanie.auth.capabilities import CAPABILITIES, Capability
from bierzmowanie.auth.tokens import TokenClaims, decode_token
from bierzmowanie.core.config import settings
from bierzmowanie.core.errors import AuthenticationError, AuthorizationError

bearer_scheme = HTTPBearer(auto_error=False)
cookie_scheme = APIKeyCookie(name=settings.AUTH_COOKIE_NAME, auto_error=False)


def get_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    cookie_token: str | None = Depends(cookie_scheme),
) -> str | None:
    """Bearer header first, then the session cookie."""
    if credentials and credentials.credentials:
        return credentials.credentials
    return cookie_token or None


def get_current_identity(token: str | None = Depends(get_token)) -> TokenClaims:
    if not token:
        raise AuthenticationError("Not authenticated")
    return decode_token(token)


def ensure_self_or_privileged(identity: TokenClaims, account_id: int, capability: Capability) -> None:
    if account_id != identity.id and not capability.bypasses_ownership(identity.roles):
        raise AuthorizationError("You may only act on your own account")


def authorize(action: str) -> Callable[..., TokenClaims]:
    capability = CAPABILITIES[action]

    def checker(request: Request, identity: TokenClaims = Depends(get_current_identity)) -> TokenClaims:
        if not capability.allows(identity.roles):
            raise AuthorizationError("Insufficient permissions")
        if capability.self_scoped:
            raw_id = request.path_params.get("account_id")
            try:
                target_id = int(raw_id)
            except (TypeError, ValueError):
                # Path validation reports the malformed id itself.
                return identity
            ensure_self_or_privileged(identity, target_id, capability)
        return identity

    return checker
