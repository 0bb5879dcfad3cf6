"""Tenant membership module."""
from .repository import (
    TenantRepository,
    CosmosTenantRepository,
    InMemoryTenantRepository,
    get_tenant_repository,
)

__all__ = [
    "TenantRepository",
    "CosmosTenantRepository",
    "InMemoryTenantRepository",
    "get_tenant_repository",
]
