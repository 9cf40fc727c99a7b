"""
Supabase JWT verification.

HS256 tokens are checked with the project JWT secret, ES256 tokens against the
project's JWKS. The user id always comes from the token's `sub` claim.
"""

import time
from typing import Optional

import httpx
from fastapi import HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt, JWTError

from cortex.config import get_settings
from cortex.logging_config import get_logger

logger = get_logger("auth")

security = HTTPBearer(auto_error=False)

JWKS_CACHE_SECONDS = 600


class JwksCache:
    """Project JWKS, refetched every JWKS_CACHE_SECONDS. Stale keys are served if a refetch fails."""

    def __init__(self, ttl: float = JWKS_CACHE_SECONDS):
        self.ttl = ttl
        self.keys: list = []
        self.fetched_at: float = 0

    def is_fresh(self, now: float) -> bool:
        return bool(self.keys) and (now - self.fetched_at) < self.ttl

    async def get_keys(self) -> list:
        now = time.time()
        if self.is_fresh(now):
            return self.keys

        settings = get_settings()
        jwks_url = f"{settings.supabase_url.rstrip('/')}/auth/v1/.well-known/jwks.json"

        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(jwks_url, timeout=10.0)
                response.raise_for_status()
                self.keys = response.json().get("keys", [])
                self.fetched_at = now
                logger.info(f"[AUTH] Fetched JWKS with {len(self.keys)} keys")
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"[AUTH] Failed to fetch JWKS: {e}")

        return self.keys


_jwks_cache = JwksCache()


def find_key_by_kid(keys: list, kid: Optional[str]) -> Optional[dict]:
    """Find JWK by key ID; without a kid the first key is used."""
    if not kid:
        return keys[0] if keys else None
    for key in keys:
        if key.get("kid") == kid:
            return key
    return None


async def decode_supabase_token(token: str) -> dict:
    """Verify a Supabase access token and return its claims. Raises JWTError."""
    settings = get_settings()

    header = jwt.get_unverified_header(token)
    alg = header.get("alg", "unknown")

    if alg == "HS256":
        return jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=["HS256"],
            options={"verify_aud": False}
        )

    if alg == "ES256":
        keys = await _jwks_cache.get_keys()
        if not keys:
            raise JWTError("Could not fetch JWKS for ES256 verification")

        jwk = find_key_by_kid(keys, header.get("kid"))
        if not jwk:
            raise JWTError(f"No matching key found for kid={header.get('kid')}")

        return jwt.decode(
            token,
            jwk,
            algorithms=["ES256"],
            options={"verify_aud": False}
        )

    raise JWTError(f"Unsupported algorithm: {alg}")


async def verify_supabase_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security)
) -> dict:
    """FastAPI dependency: validated token payload or 401."""
    if credentials is None:
        raise HTTPException(
            status_code=401,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"}
        )

    try:
        payload = await decode_supabase_token(credentials.credentials)
    except JWTError as e:
        logger.warning(f"[AUTH] JWT verification failed: {e}")
        raise HTTPException(
            status_code=401,
            detail="Invalid or expired authentication token"
        )

    if not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Token has no subject")

    return payload


def get_user_id(token_payload: dict) -> str:
    """Extract user_id from verified token payload."""
    return token_payload["sub"]
