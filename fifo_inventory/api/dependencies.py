# fifo_inventory/api/dependencies.py

from functools import lru_cache

from fifo_inventory.services.inventory_service import InventoryService


@lru_cache(maxsize=1)
def get_inventory_service() -> InventoryService:
    """
    Provides the process-wide InventoryService. The engine's in-memory state is
    the source of truth for the session, so every request shares one instance.
    Tests swap it through app.dependency_overrides.
    """
    return InventoryService()
