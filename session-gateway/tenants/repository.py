"""Tenant membership repository implementations."""
import logging
from typing import Dict, List, Optional

from azure.cosmos import CosmosClient, PartitionKey

from config import Settings, settings

logger = logging.getLogger("session-gateway.tenants")


class TenantRepository:
    """Abstract source of the tenants a user belongs to."""

    def list_for_user(self, user_id: str) -> List[Dict]:
        """Return the user's tenants in a stable order; the first is the default."""
        raise NotImplementedError


class CosmosTenantRepository(TenantRepository):
    """Cosmos DB implementation backed by a tenant_users container."""

    def __init__(self, settings: Settings) -> None:
        self.client = CosmosClient(settings.cosmos_endpoint, credential=settings.cosmos_key)
        self.database = self.client.create_database_if_not_exists(id=settings.cosmos_db)
        self.container = self.database.create_container_if_not_exists(
            id=settings.cosmos_tenant_users_container,
            partition_key=PartitionKey(path="/user_id"),
        )

    def list_for_user(self, user_id: str) -> List[Dict]:
        query = (
            "SELECT c.tenant_id AS id, c.tenant_name AS name FROM c "
            "WHERE c.user_id = @uid AND NOT IS_DEFINED(c.deleted) "
            "ORDER BY c.created_at"
        )
        return list(
            self.container.query_items(
                query=query,
                parameters=[{"name": "@uid", "value": user_id}],
                partition_key=user_id,
            )
        )


class InMemoryTenantRepository(TenantRepository):
    """In-memory implementation of tenant repository for testing."""

    def __init__(self, memberships: Optional[Dict[str, List[Dict]]] = None) -> None:
        self.memberships: Dict[str, List[Dict]] = {
            user_id: list(rows) for user_id, rows in (memberships or {}).items()
        }

    def add_membership(self, user_id: str, tenant_id: str, name: Optional[str] = None) -> Dict:
        row = {"id": tenant_id, "name": name}
        self.memberships.setdefault(user_id, []).append(row)
        return row

    def remove_membership(self, user_id: str, tenant_id: str) -> None:
        rows = self.memberships.get(user_id, [])
        self.memberships[user_id] = [row for row in rows if row["id"] != tenant_id]

    def list_for_user(self, user_id: str) -> List[Dict]:
        return list(self.memberships.get(user_id, []))


def get_tenant_repository() -> TenantRepository:
    """Get tenant repository instance (Cosmos or in-memory fallback)."""
    if settings.cosmos_endpoint and settings.cosmos_key:
        try:
            logger.info("Using Cosmos DB for tenant memberships.")
            return CosmosTenantRepository(settings)
        except Exception as exc:  # pragma: no cover - environment specific
            logger.warning("Falling back to in-memory tenant store: %s", exc)
    logger.info("Using in-memory tenant memberships.")
    return InMemoryTenantRepository()
