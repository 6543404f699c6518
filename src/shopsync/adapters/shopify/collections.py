"""Collections (categories) and their manual product order."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from shopsync.domain.errors import SyncError

from .schema import CollectionConnection, CollectionNode
from .search import build_search_query

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shopsync.domain.model import CollectionMove

    from .client import ShopifyGraphQLClient

COLLECTIONS_BY_TITLE_QUERY = """
query collections($first: Int!, $query: String!) {
    collections(first: $first, query: $query) {
        nodes { id title }
    }
}
"""

COLLECTION_CREATE_MUTATION = """
mutation collectionCreate($input: CollectionInput!) {
    collectionCreate(input: $input) {
        collection { id title }
        userErrors { field message }
    }
}
"""

COLLECTION_UPDATE_MUTATION = """
mutation collectionUpdate($input: CollectionInput!) {
    collectionUpdate(input: $input) {
        collection { id title }
        userErrors { field message }
    }
}
"""

COLLECTION_ADD_PRODUCTS_MUTATION = """
mutation collectionAddProducts($id: ID!, $productIds: [ID!]!) {
    collectionAddProducts(id: $id, productIds: $productIds) {
        userErrors { field message }
    }
}
"""

COLLECTION_REORDER_MUTATION = """
mutation collectionReorderProducts($id: ID!, $moves: [MoveInput!]!) {
    collectionReorderProducts(id: $id, moves: $moves) {
        userErrors { field message }
    }
}
"""

_TITLE_SEARCH_LIMIT = 5


@dataclass(slots=True)
class ShopifyCollections:
    graphql: ShopifyGraphQLClient

    async def find_collection_by_title(self, title: str) -> str | None:
        """Return the id of the collection whose title matches exactly, ignoring case."""

        title = title.strip()
        if not title:
            return None
        data = await self.graphql.execute(
            COLLECTIONS_BY_TITLE_QUERY,
            {"first": _TITLE_SEARCH_LIMIT, "query": build_search_query("title", title)},
        )
        nodes = CollectionConnection.model_validate(data.get("collections") or {}).nodes
        wanted = title.lower()
        for node in nodes:
            if node.title.strip().lower() == wanted:
                return node.id
        return None

    async def create_collection(self, title: str) -> str:
        payload = await self.graphql.mutate(
            "collectionCreate", COLLECTION_CREATE_MUTATION, {"input": {"title": title}}
        )
        created = payload.get("collection")
        if not created:
            raise SyncError(f"shopify collection create returned no collection for {title!r}")
        return CollectionNode.model_validate(created).id

    async def update_collection(self, collection_id: str, title: str) -> None:
        await self.graphql.mutate(
            "collectionUpdate",
            COLLECTION_UPDATE_MUTATION,
            {"input": {"id": collection_id, "title": title}},
        )

    async def add_products(self, collection_id: str, product_ids: Sequence[str]) -> None:
        await self.graphql.mutate(
            "collectionAddProducts",
            COLLECTION_ADD_PRODUCTS_MUTATION,
            {"id": collection_id, "productIds": list(product_ids)},
        )

    async def set_manual_sort(self, collection_id: str) -> None:
        await self.graphql.mutate(
            "collectionUpdate",
            COLLECTION_UPDATE_MUTATION,
            {"input": {"id": collection_id, "sortOrder": "MANUAL"}},
        )

    async def reorder_products(self, collection_id: str, moves: Sequence[CollectionMove]) -> None:
        await self.graphql.mutate(
            "collectionReorderProducts",
            COLLECTION_REORDER_MUTATION,
            {
                "id": collection_id,
                "moves": [
                    {"id": move.product_id, "newPosition": str(move.new_position)}
                    for move in moves
                ],
            },
        )
