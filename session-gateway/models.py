"""Pydantic models for cookies, sessions and tenants."""
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ==================== Cookie Models ====================

class CookieOptions(BaseModel):
    """Attribute set of a cookie; field order is the serialization order."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    http_only: bool = Field(True, alias="httpOnly")
    same_site: Literal["lax", "strict", "none"] = Field("lax", alias="sameSite")
    path: str = "/"
    secure: bool = False
    max_age: Optional[int] = Field(None, alias="maxAge")


class CookieDescriptor(BaseModel):
    """A named cookie and its attributes."""
    model_config = ConfigDict(frozen=True)

    name: str
    options: CookieOptions


# ==================== Session Models ====================

class SessionUser(BaseModel):
    """Authenticated user record used to mint a session token."""
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    image: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, v):
        if v is None or str(v) == "":
            raise ValueError("User id is required.")
        return str(v)


# ==================== Tenant Models ====================

class TenantRow(BaseModel):
    """Minimal projection of a tenant membership."""
    id: str
    name: Optional[str] = None


class TenantSelection(BaseModel):
    """Response model for the reconciled tenant selection."""
    tenant_id: Optional[str] = None
    tenants: List[TenantRow] = []


class CookiePolicy(BaseModel):
    """Response model for the cookie policy in effect for a request."""
    secure: bool
    origin: str
    cookies: Dict[str, CookieDescriptor]


def tenant_rows(docs: List[Dict]) -> List[TenantRow]:
    """Project tenant documents onto TenantRow, keeping their order."""
    return [TenantRow(id=str(doc["id"]), name=doc.get("name")) for doc in docs if doc.get("id")]
