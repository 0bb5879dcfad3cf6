"""FastAPI dependencies for sessions and tenant memberships."""
import logging
from typing import Dict, Optional

from fastapi import HTTPException, Request, status

from config import settings
from tenants import TenantRepository

from .cookies import get_cookie, get_session_token_cookie
from .jwt import TokenDecodeError, decode_token
from .origin import use_secure_cookies

logger = logging.getLogger("session-gateway.auth.dependencies")

# Global repository provider (set by main.py after initialization)
_tenant_repo_provider: Optional[TenantRepository] = None


def set_tenant_repo_provider(provider: TenantRepository) -> None:
    """Set the global tenant repository (called from main.py after initialization)."""
    global _tenant_repo_provider
    _tenant_repo_provider = provider


def get_tenant_repo() -> TenantRepository:
    """Get the tenant repository instance."""
    if _tenant_repo_provider is None:
        raise RuntimeError("Tenant repository not initialized. Call set_tenant_repo_provider() first.")
    return _tenant_repo_provider


def get_current_session(request: Request) -> Dict:
    """Extract and verify the session token claims from the session cookie."""
    cookie_name = get_session_token_cookie(use_secure_cookies(request)).name
    token = get_cookie(cookie_name, request.headers)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated.")
    try:
        claims = decode_token(token, settings.secret_key)
    except TokenDecodeError as exc:
        logger.info(
            "session_rejected correlation_id=%s error=%s",
            getattr(request.state, "correlation_id", ""),
            exc,
        )
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired session.")
    if not claims.get("sub"):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Session has no subject.")
    return claims
