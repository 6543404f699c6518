"""Markets, catalogs, publications and price lists."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from shopsync.config.sync import MARKETS_PAGE_SIZE
from shopsync.domain.errors import SyncError
from shopsync.domain.model import Catalog, CatalogDetails, Market, PriceList, Publication

from .schema import (
    CatalogConnection,
    CatalogDetailsNode,
    CatalogNode,
    MarketConnection,
    MarketNode,
    PriceListNode,
    PublicationNode,
)
from .search import build_search_query

if TYPE_CHECKING:
    from .client import ShopifyGraphQLClient

MARKETS_QUERY = """
query markets($first: Int!, $after: String) {
    markets(first: $first, after: $after) {
        nodes {
            id name handle enabled
            currencySettings { baseCurrency { currencyCode } localCurrencies }
            regions(first: 250) { nodes { ... on MarketRegionCountry { code } } }
        }
        pageInfo { hasNextPage endCursor }
    }
}
"""

MARKET_CREATE_MUTATION = """
mutation marketCreate($input: MarketCreateInput!) {
    marketCreate(input: $input) {
        market {
            id name handle enabled
            currencySettings { baseCurrency { currencyCode } localCurrencies }
            regions(first: 250) { nodes { ... on MarketRegionCountry { code } } }
        }
        userErrors { field message }
    }
}
"""

MARKET_UPDATE_MUTATION = """
mutation marketUpdate($id: ID!, $input: MarketUpdateInput!) {
    marketUpdate(id: $id, input: $input) {
        market { id }
        userErrors { field message }
    }
}
"""

CATALOGS_BY_TITLE_QUERY = """
query catalogs($query: String!) {
    catalogs(first: 5, query: $query) {
        nodes { id title status }
    }
}
"""

CATALOG_CREATE_MUTATION = """
mutation catalogCreate($input: CatalogCreateInput!) {
    catalogCreate(input: $input) {
        catalog { id title status }
        userErrors { field message }
    }
}
"""

MARKET_CATALOGS_QUERY = """
query marketCatalogs($id: ID!, $first: Int!, $after: String) {
    market(id: $id) {
        id
        catalogs(first: $first, after: $after) {
            nodes { id title }
            pageInfo { hasNextPage endCursor }
        }
    }
}
"""

CATALOG_DETAILS_QUERY = """
query catalog($id: ID!) {
    catalog(id: $id) {
        id title
        publication { id autoPublish }
        priceList { id name currency }
    }
}
"""

PUBLICATION_CREATE_MUTATION = """
mutation publicationCreate($input: PublicationCreateInput!) {
    publicationCreate(input: $input) {
        publication { id autoPublish }
        userErrors { field message }
    }
}
"""

PUBLICATION_UPDATE_MUTATION = """
mutation publicationUpdate($id: ID!, $input: PublicationUpdateInput!) {
    publicationUpdate(id: $id, input: $input) {
        publication { id autoPublish }
        userErrors { field message }
    }
}
"""

PRICE_LIST_CREATE_MUTATION = """
mutation priceListCreate($input: PriceListCreateInput!) {
    priceListCreate(input: $input) {
        priceList { id name currency }
        userErrors { field message }
    }
}
"""


def _market(node: MarketNode) -> Market:
    return Market(
        id=node.id,
        name=node.name,
        handle=node.handle,
        enabled=node.enabled,
        currency=node.currency_settings.base_currency.currency_code,
        local_currencies=node.currency_settings.local_currencies,
        country_codes=frozenset(
            region.code.upper() for region in node.regions.nodes if region.code
        ),
    )


def _publication(node: PublicationNode) -> Publication:
    return Publication(id=node.id, auto_publish=node.auto_publish)


def _price_list(node: PriceListNode) -> PriceList:
    return PriceList(id=node.id, name=node.name, currency=node.currency)


def _currency_settings(currency: str) -> dict[str, object]:
    return {"baseCurrency": currency, "localCurrencies": False}


@dataclass(slots=True)
class ShopifyMarkets:
    graphql: ShopifyGraphQLClient
    page_size: int = MARKETS_PAGE_SIZE

    async def list_markets(self) -> list[Market]:
        markets: list[Market] = []
        after: str | None = None
        while True:
            data = await self.graphql.execute(
                MARKETS_QUERY, {"first": self.page_size, "after": after}
            )
            connection = MarketConnection.model_validate(data.get("markets") or {})
            markets.extend(_market(node) for node in connection.nodes)
            after = connection.page_info.next_cursor
            if after is None:
                return markets

    async def create_market(
        self, *, name: str, handle: str, country_code: str, currency: str
    ) -> Market:
        payload = await self.graphql.mutate(
            "marketCreate",
            MARKET_CREATE_MUTATION,
            {
                "input": {
                    "name": name,
                    "handle": handle,
                    "regionsCondition": {"countryCodes": [country_code]},
                    "currencySettings": _currency_settings(currency),
                }
            },
        )
        created = payload.get("market")
        if not created:
            raise SyncError(f"shopify market create returned no market for {name!r}")
        return _market(MarketNode.model_validate(created))

    async def update_market_currency(self, market_id: str, currency: str) -> None:
        await self.graphql.mutate(
            "marketUpdate",
            MARKET_UPDATE_MUTATION,
            {"id": market_id, "input": {"currencySettings": _currency_settings(currency)}},
        )

    async def find_catalog_by_title(self, title: str) -> Catalog | None:
        data = await self.graphql.execute(
            CATALOGS_BY_TITLE_QUERY, {"query": build_search_query("title", title)}
        )
        wanted = title.strip().lower()
        for node in CatalogConnection.model_validate(data.get("catalogs") or {}).nodes:
            if node.title.strip().lower() == wanted:
                return Catalog(id=node.id, title=node.title, status=node.status)
        return None

    async def create_catalog(self, title: str, market_id: str) -> Catalog:
        payload = await self.graphql.mutate(
            "catalogCreate",
            CATALOG_CREATE_MUTATION,
            {
                "input": {
                    "title": title,
                    "status": "ACTIVE",
                    "context": {"marketIds": [market_id]},
                }
            },
        )
        created = payload.get("catalog")
        if not created:
            raise SyncError(f"shopify catalog create returned no catalog for {title!r}")
        node = CatalogNode.model_validate(created)
        return Catalog(id=node.id, title=node.title, status=node.status)

    async def market_has_catalog(self, market_id: str, catalog_id: str) -> bool:
        after: str | None = None
        while True:
            data = await self.graphql.execute(
                MARKET_CATALOGS_QUERY,
                {"id": market_id, "first": self.page_size, "after": after},
            )
            market = data.get("market")
            if not market:
                return False
            connection = CatalogConnection.model_validate(market.get("catalogs") or {})
            if any(node.id == catalog_id for node in connection.nodes):
                return True
            after = connection.page_info.next_cursor
            if after is None:
                return False

    async def attach_catalog(self, market_id: str, catalog_id: str) -> None:
        await self.graphql.mutate(
            "marketUpdate",
            MARKET_UPDATE_MUTATION,
            {"id": market_id, "input": {"catalogsToAdd": [catalog_id]}},
        )

    async def catalog_details(self, catalog_id: str) -> CatalogDetails:
        data = await self.graphql.execute(CATALOG_DETAILS_QUERY, {"id": catalog_id})
        raw = data.get("catalog")
        if not raw:
            raise SyncError(f"shopify catalog {catalog_id} not found")
        node = CatalogDetailsNode.model_validate(raw)
        return CatalogDetails(
            catalog_id=node.id,
            publication=_publication(node.publication) if node.publication else None,
            price_list=_price_list(node.price_list) if node.price_list else None,
        )

    async def create_publication(self, catalog_id: str) -> Publication:
        payload = await self.graphql.mutate(
            "publicationCreate",
            PUBLICATION_CREATE_MUTATION,
            {
                "input": {
                    "catalogId": catalog_id,
                    "defaultState": "ALL_PRODUCTS",
                    "autoPublish": True,
                }
            },
        )
        created = payload.get("publication")
        if not created:
            raise SyncError(f"shopify publication create returned nothing for {catalog_id}")
        return _publication(PublicationNode.model_validate(created))

    async def enable_auto_publish(self, publication_id: str) -> Publication:
        payload = await self.graphql.mutate(
            "publicationUpdate",
            PUBLICATION_UPDATE_MUTATION,
            {"id": publication_id, "input": {"autoPublish": True}},
        )
        updated = payload.get("publication")
        if not updated:
            raise SyncError(f"shopify publication update returned nothing for {publication_id}")
        return _publication(PublicationNode.model_validate(updated))

    async def create_price_list(self, catalog_id: str, name: str, currency: str) -> PriceList:
        payload = await self.graphql.mutate(
            "priceListCreate",
            PRICE_LIST_CREATE_MUTATION,
            {
                "input": {
                    "catalogId": catalog_id,
                    "name": name,
                    "currency": currency,
                    "parent": {"adjustment": {"type": "PERCENTAGE_INCREASE", "value": 0}},
                }
            },
        )
        created = payload.get("priceList")
        if not created:
            raise SyncError(f"shopify price list create returned nothing for {catalog_id}")
        return _price_list(PriceListNode.model_validate(created))
