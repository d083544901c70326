"""Supabase JWT authentication for FastAPI."""
import logging
from typing import Optional

import httpx
import jwt
from jwt import PyJWK
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from config import settings

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

_jwks_cache: dict | None = None


def _jwks_url() -> str:
    return f"{settings.SUPABASE_URL.rstrip('/')}/auth/v1/.well-known/jwks.json"


def _fetch_jwks() -> dict:
    resp = httpx.get(_jwks_url(), timeout=10)
    resp.raise_for_status()
    logger.info("Fetched JWKS from Supabase")
    return resp.json()


def _find_key(jwks: dict, kid: str | None):
    for key_data in jwks.get("keys", []):
        if key_data.get("kid") == kid:
            return PyJWK(key_data).key
    return None


def _get_signing_key(token: str):
    """Return the JWKS key matching the token's kid, refreshing the cache once on a miss."""
    global _jwks_cache
    kid = jwt.get_unverified_header(token).get("kid")

    if _jwks_cache is None:
        _jwks_cache = _fetch_jwks()

    key = _find_key(_jwks_cache, kid)
    if key is None:
        # keys may have rotated
        _jwks_cache = _fetch_jwks()
        key = _find_key(_jwks_cache, kid)

    if key is None:
        raise ValueError(f"No matching key found for kid={kid}")
    return key


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """Validate the Supabase JWT and return its user_id (``sub`` claim)."""
    if settings.AUTH_DISABLED:
        return settings.LOCAL_USER_ID

    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authenticated")

    token = credentials.credentials
    try:
        alg = jwt.get_unverified_header(token).get("alg", "RS256")
        payload = jwt.decode(
            token,
            _get_signing_key(token),
            algorithms=[alg],
            audience="authenticated",
        )
        user_id = payload.get("sub")
        if not user_id:
            raise HTTPException(status_code=401, detail="Invalid token: no sub claim")
        return user_id
    except HTTPException:
        raise
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError as e:
        raise HTTPException(status_code=401, detail=f"Invalid token: {e}")
    except Exception as e:
        logger.error(f"Auth error: {e}")
        raise HTTPException(status_code=401, detail=f"Authentication failed: {e}")
