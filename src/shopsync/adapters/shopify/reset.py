"""List and delete storefront resources for the wipe."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final

from shopsync.config.sync import RESET_PAGE_SIZE
from shopsync.domain.model import Page, ResetKind

from .schema import IdConnection

if TYPE_CHECKING:
    from collections.abc import Callable

    from .client import ShopifyGraphQLClient


@dataclass(frozen=True, slots=True)
class _KindQueries:
    connection: str
    list_query: str
    delete_action: str
    delete_mutation: str
    delete_variables: Callable[[str], dict[str, Any]]


def _id_listing(connection: str, arguments: str = "") -> str:
    return f"""
query list($first: Int!, $after: String) {{
    {connection}(first: $first, after: $after{arguments}) {{
        nodes {{ id }}
        pageInfo {{ hasNextPage endCursor }}
    }}
}}
"""


_QUERIES: Final[dict[ResetKind, _KindQueries]] = {
    ResetKind.PRODUCTS: _KindQueries(
        connection="products",
        list_query=_id_listing("products"),
        delete_action="productDelete",
        delete_mutation="""
mutation productDelete($input: ProductDeleteInput!) {
    productDelete(input: $input) { deletedProductId userErrors { field message } }
}
""",
        delete_variables=lambda resource_id: {"input": {"id": resource_id}},
    ),
    ResetKind.COLLECTIONS: _KindQueries(
        connection="collections",
        list_query=_id_listing("collections"),
        delete_action="collectionDelete",
        delete_mutation="""
mutation collectionDelete($input: CollectionDeleteInput!) {
    collectionDelete(input: $input) { deletedCollectionId userErrors { field message } }
}
""",
        delete_variables=lambda resource_id: {"input": {"id": resource_id}},
    ),
    ResetKind.METAFIELD_DEFINITIONS: _KindQueries(
        connection="metafieldDefinitions",
        list_query=_id_listing("metafieldDefinitions", ", ownerType: PRODUCT"),
        delete_action="metafieldDefinitionDelete",
        delete_mutation="""
mutation metafieldDefinitionDelete($id: ID!) {
    metafieldDefinitionDelete(id: $id, deleteAllAssociatedMetafields: true) {
        deletedDefinitionId
        userErrors { field message }
    }
}
""",
        delete_variables=lambda resource_id: {"id": resource_id},
    ),
    ResetKind.PRICE_LISTS: _KindQueries(
        connection="priceLists",
        list_query=_id_listing("priceLists"),
        delete_action="priceListDelete",
        delete_mutation="""
mutation priceListDelete($id: ID!) {
    priceListDelete(id: $id) { deletedId userErrors { field message } }
}
""",
        delete_variables=lambda resource_id: {"id": resource_id},
    ),
    ResetKind.CATALOGS: _KindQueries(
        connection="catalogs",
        list_query=_id_listing("catalogs"),
        delete_action="catalogDelete",
        delete_mutation="""
mutation catalogDelete($id: ID!) {
    catalogDelete(id: $id) { deletedId userErrors { field message } }
}
""",
        delete_variables=lambda resource_id: {"id": resource_id},
    ),
    ResetKind.MARKETS: _KindQueries(
        connection="markets",
        list_query=_id_listing("markets"),
        delete_action="marketDelete",
        delete_mutation="""
mutation marketDelete($id: ID!) {
    marketDelete(id: $id) { deletedId userErrors { field message } }
}
""",
        delete_variables=lambda resource_id: {"id": resource_id},
    ),
}


@dataclass(slots=True)
class ShopifyReset:
    graphql: ShopifyGraphQLClient
    page_size: int = RESET_PAGE_SIZE

    async def list_page(self, kind: ResetKind, after: str | None) -> Page[str]:
        queries = _QUERIES[kind]
        data = await self.graphql.execute(
            queries.list_query, {"first": self.page_size, "after": after}
        )
        connection = IdConnection.model_validate(data.get(queries.connection) or {})
        return Page(
            items=tuple(node.id for node in connection.nodes if node.id),
            next_cursor=connection.page_info.next_cursor,
        )

    async def delete(self, kind: ResetKind, resource_id: str) -> None:
        queries = _QUERIES[kind]
        await self.graphql.mutate(
            queries.delete_action, queries.delete_mutation, queries.delete_variables(resource_id)
        )
