"""Password verification across every hashing scheme the parish database has used.

Accounts were created under several regimes over the years, so a stored hash
may be any of the SHA-256 variants below. The chain is append-only: new
schemes go at the end and existing entries are never reordered or removed.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass
from typing import Callable

from bierzmowanie.core.config import settings

logger = logging.getLogger(__name__)


def _sha256(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class HashStrategy:
    name: str
    digest: Callable[[str, str], str]

    def matches(self, plain: str, stored: str, secret: str) -> bool:
        return hmac.compare_digest(self.digest(plain, secret).encode("utf-8"), stored.encode("utf-8"))


LEGACY_STRATEGIES: tuple[HashStrategy, ...] = (
    HashStrategy("sha256", lambda p, s: _sha256(p)),
    HashStrategy("sha256_secret_prefix", lambda p, s: _sha256(s + p)),
    HashStrategy("sha256_secret_suffix", lambda p, s: _sha256(p + s)),
    HashStrategy("sha256_secret_both", lambda p, s: _sha256(s + p + s)),
    HashStrategy("double_sha256", lambda p, s: _sha256(_sha256(p))),
    HashStrategy("double_sha256_secret_prefix", lambda p, s: _sha256(s + _sha256(p))),
    HashStrategy("double_sha256_secret_suffix", lambda p, s: _sha256(_sha256(p) + s)),
    HashStrategy("double_sha256_secret_both", lambda p, s: _sha256(s + _sha256(p) + s)),
)


def matching_strategy(plain: str, stored: str | None, secret: str | None = None) -> HashStrategy | None:
    if not plain or not stored:
        return None
    secret = settings.password_secret if secret is None else secret
    for strategy in LEGACY_STRATEGIES:
        if strategy.matches(plain, stored, secret):
            return strategy
    return None


def verify_password(plain: str, stored: str | None, secret: str | None = None) -> bool:
    strategy = matching_strategy(plain, stored, secret)
    if strategy is None:
        return False
    logger.debug("password_verified", extra={"strategy": strategy.name})
    return True


def hash_password(plain: str) -> str:
    # Stored with the first scheme of the chain so the account can log in.
    return LEGACY_STRATEGIES[0].digest(plain, "")


def generate_password(nbytes: int | None = None) -> str:
    return secrets.token_hex(nbytes or settings.PARENT_PASSWORD_BYTES)
