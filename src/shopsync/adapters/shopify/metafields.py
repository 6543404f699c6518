from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from shopsync.config.sync import METAFIELD_DEFINITIONS_PAGE_SIZE
from shopsync.domain.errors import SyncError
from shopsync.domain.model import MetafieldDefinition, MetafieldRecord

from .schema import MetafieldDefinitionConnection, MetafieldDefinitionNode, MetafieldNode

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shopsync.domain.model import MetafieldValue, NewMetafieldDefinition

    from .client import ShopifyGraphQLClient

DEFINITIONS_QUERY = """
query metafieldDefinitions($first: Int!, $after: String, $namespace: String) {
    metafieldDefinitions(first: $first, after: $after, ownerType: PRODUCT, namespace: $namespace) {
        nodes { id name namespace key }
        pageInfo { hasNextPage endCursor }
    }
}
"""

DEFINITION_CREATE_MUTATION = """
mutation metafieldDefinitionCreate($definition: MetafieldDefinitionInput!) {
    metafieldDefinitionCreate(definition: $definition) {
        createdDefinition { id name namespace key }
        userErrors { field message }
    }
}
"""

METAFIELDS_SET_MUTATION = """
mutation metafieldsSet($metafields: [MetafieldsSetInput!]!) {
    metafieldsSet(metafields: $metafields) {
        metafields { id namespace key value type }
        userErrors { field message }
    }
}
"""


def _definition(node: MetafieldDefinitionNode) -> MetafieldDefinition:
    return MetafieldDefinition(id=node.id, namespace=node.namespace, key=node.key, name=node.name)


@dataclass(slots=True)
class ShopifyMetafields:
    graphql: ShopifyGraphQLClient
    page_size: int = METAFIELD_DEFINITIONS_PAGE_SIZE

    async def list_definitions(self, namespace: str) -> list[MetafieldDefinition]:
        definitions: list[MetafieldDefinition] = []
        after: str | None = None
        while True:
            data = await self.graphql.execute(
                DEFINITIONS_QUERY,
                {"first": self.page_size, "after": after, "namespace": namespace},
            )
            connection = MetafieldDefinitionConnection.model_validate(
                data.get("metafieldDefinitions") or {}
            )
            definitions.extend(_definition(node) for node in connection.nodes)
            after = connection.page_info.next_cursor
            if after is None:
                return definitions

    async def create_definition(self, definition: NewMetafieldDefinition) -> MetafieldDefinition:
        payload = await self.graphql.mutate(
            "metafieldDefinitionCreate",
            DEFINITION_CREATE_MUTATION,
            {
                "definition": {
                    "name": definition.name,
                    "namespace": definition.namespace,
                    "key": definition.key,
                    "type": definition.type,
                    "ownerType": definition.owner_type,
                }
            },
        )
        created = payload.get("createdDefinition")
        if not created:
            raise SyncError(
                f"shopify metafield definition create returned nothing for "
                f"{definition.namespace}.{definition.key}"
            )
        return _definition(MetafieldDefinitionNode.model_validate(created))

    async def set_metafields(self, values: Sequence[MetafieldValue]) -> list[MetafieldRecord]:
        if not values:
            return []
        payload = await self.graphql.mutate(
            "metafieldsSet",
            METAFIELDS_SET_MUTATION,
            {
                "metafields": [
                    {
                        "ownerId": value.owner_id,
                        "namespace": value.namespace,
                        "key": value.key,
                        "type": value.type,
                        "value": value.value,
                    }
                    for value in values
                ]
            },
        )
        nodes = [MetafieldNode.model_validate(raw) for raw in payload.get("metafields") or []]
        return [
            MetafieldRecord(id=node.id, namespace=node.namespace, key=node.key, value=node.value)
            for node in nodes
        ]
