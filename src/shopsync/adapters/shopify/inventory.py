from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from shopsync.domain.concurrency import AsyncOnce
from shopsync.domain.errors import SyncError

from .schema import LocationConnection

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shopsync.domain.model import StockQuantity

    from .client import ShopifyGraphQLClient

log = getLogger(__name__)

LOCATIONS_QUERY = """
query locations {
    locations(first: 50) {
        nodes { id name isActive }
    }
}
"""

INVENTORY_ITEM_UPDATE_MUTATION = """
mutation inventoryItemUpdate($id: ID!, $input: InventoryItemInput!) {
    inventoryItemUpdate(id: $id, input: $input) {
        inventoryItem { id tracked }
        userErrors { field message }
    }
}
"""

INVENTORY_ACTIVATE_MUTATION = """
mutation inventoryActivate($inventoryItemId: ID!, $locationId: ID!) {
    inventoryActivate(inventoryItemId: $inventoryItemId, locationId: $locationId) {
        inventoryLevel { id }
        userErrors { field message }
    }
}
"""

SET_ON_HAND_MUTATION = """
mutation inventorySetOnHandQuantities($input: InventorySetOnHandQuantitiesInput!) {
    inventorySetOnHandQuantities(input: $input) {
        userErrors { field message }
    }
}
"""


@dataclass(slots=True)
class ShopifyInventory:
    """Inventory writes against the shop's first active location."""

    graphql: ShopifyGraphQLClient
    reason: str = "correction"
    _location: AsyncOnce[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._location = AsyncOnce(self._lookup_location)

    async def primary_location_id(self) -> str:
        return await self._location.get()

    async def _lookup_location(self) -> str:
        data = await self.graphql.execute(LOCATIONS_QUERY)
        nodes = LocationConnection.model_validate(data.get("locations") or {}).nodes
        if not nodes:
            raise SyncError("shopify has no location for inventory")
        location = next((node for node in nodes if node.is_active), nodes[0])
        log.info("Using inventory location %s (%s)", location.id, location.name)
        return location.id

    async def mark_tracked(self, inventory_item_id: str) -> None:
        await self.graphql.mutate(
            "inventoryItemUpdate",
            INVENTORY_ITEM_UPDATE_MUTATION,
            {"id": inventory_item_id, "input": {"tracked": True}},
        )

    async def activate(self, inventory_item_id: str, location_id: str) -> None:
        await self.graphql.mutate(
            "inventoryActivate",
            INVENTORY_ACTIVATE_MUTATION,
            {"inventoryItemId": inventory_item_id, "locationId": location_id},
        )

    async def set_on_hand(self, location_id: str, quantities: Sequence[StockQuantity]) -> None:
        if not quantities:
            return
        await self.graphql.mutate(
            "inventorySetOnHandQuantities",
            SET_ON_HAND_MUTATION,
            {
                "input": {
                    "reason": self.reason,
                    "setQuantities": [
                        {
                            "inventoryItemId": quantity.inventory_item_id,
                            "locationId": location_id,
                            "quantity": quantity.quantity,
                        }
                        for quantity in quantities
                    ],
                }
            },
        )
