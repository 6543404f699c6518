from __future__ import annotations

import asyncio

import pytest

from shopsync.config import MarketSettings
from shopsync.domain.errors import ProvisioningError
from shopsync.domain.model import Market, PriceList, Publication
from shopsync.domain.provisioning import MarketProvisioner
from tests.helpers.shop import FakeMarkets


def test_provisioning_from_scratch_creates_each_resource_once() -> None:
    markets = FakeMarkets()
    provisioner = MarketProvisioner(markets)

    async def run() -> list[object]:
        return [await provisioner.ensure() for _ in range(3)]

    first, *rest = asyncio.run(run())

    assert all(item == first for item in rest)
    assert markets.calls["create_market"] == 1
    assert markets.calls["create_catalog"] == 1
    assert markets.calls["create_publication"] == 1
    assert markets.calls["create_price_list"] == 1
    assert markets.calls["list_markets"] == 1


def test_second_provisioner_reuses_existing_resources() -> None:
    markets = FakeMarkets()
    first = asyncio.run(MarketProvisioner(markets).ensure())

    second = asyncio.run(MarketProvisioner(markets).ensure())

    assert second == first
    assert markets.calls["create_market"] == 1
    assert markets.calls["create_catalog"] == 1
    assert markets.calls["create_publication"] == 1
    assert markets.calls["create_price_list"] == 1


def test_misconfigured_market_is_corrected_and_attached() -> None:
    existing = Market(
        id="gid://shopify/Market/7",
        name="Israel",
        handle="il",
        enabled=True,
        currency="USD",
        local_currencies=True,
        country_codes=frozenset({"IL"}),
    )
    markets = FakeMarkets(markets=[existing])
    markets_catalog = asyncio.run(
        markets.create_catalog("Israel Catalog", "gid://shopify/Market/other")
    )
    markets.calls.clear()
    markets.publications[markets_catalog.id] = Publication("gid://shopify/Publication/1", False)
    markets.price_lists[markets_catalog.id] = PriceList("gid://shopify/PriceList/1", "Old", "USD")

    resources = asyncio.run(MarketProvisioner(markets, MarketSettings()).ensure())

    assert resources.market_id == existing.id
    assert resources.catalog_id == markets_catalog.id
    assert markets.calls["update_market_currency"] == 1
    assert markets.calls["attach_catalog"] == 1
    assert markets.calls["enable_auto_publish"] == 1
    assert markets.calls["create_price_list"] == 1
    assert markets.calls["create_market"] == 0
    assert markets.calls["create_catalog"] == 0


def test_attachment_is_confirmed_by_requery() -> None:
    markets = FakeMarkets(ignore_attach=True)
    markets.markets.append(
        Market("gid://shopify/Market/1", "Israel", "il", True, "ILS", False, frozenset({"IL"}))
    )
    asyncio.run(markets.create_catalog("Israel Catalog", "gid://shopify/Market/elsewhere"))

    with pytest.raises(ProvisioningError, match="still not attached"):
        asyncio.run(MarketProvisioner(markets).ensure())
