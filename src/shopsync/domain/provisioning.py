"""Ensure the market -> catalog -> publication -> price list chain exists.

Localized prices can only be written to a price list that belongs to a catalog
attached to the local market and published to it. Every step here is a
lookup-or-create, so running the provisioner again converges on the same
resources. The computed chain is cached for the lifetime of the provisioner.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from shopsync.config.sync import MarketSettings
from shopsync.domain.concurrency import AsyncOnce
from shopsync.domain.errors import ProvisioningError
from shopsync.domain.model import IsraelMarketResources

if TYPE_CHECKING:
    from shopsync.domain.model import Catalog, Market, PriceList, Publication
    from shopsync.domain.ports import MarketGateway

log = getLogger(__name__)


@dataclass(slots=True)
class MarketProvisioner:
    gateway: MarketGateway
    settings: MarketSettings = field(default_factory=MarketSettings)
    _cell: AsyncOnce[IsraelMarketResources] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._cell = AsyncOnce(self._provision)

    async def ensure(self) -> IsraelMarketResources:
        """Return the provisioned resources, computing them on first use."""
        return await self._cell.get()

    async def _provision(self) -> IsraelMarketResources:
        market = await self._ensure_market()
        catalog = await self._ensure_catalog(market)
        await self._ensure_attached(market, catalog)
        publication, price_list = await self._ensure_publication_and_price_list(catalog)
        await self._verify(market, catalog)
        resources = IsraelMarketResources(
            market_id=market.id,
            catalog_id=catalog.id,
            publication_id=publication.id,
            price_list_id=price_list.id,
        )
        log.info(
            "Market resources ready: market=%s catalog=%s publication=%s price_list=%s",
            resources.market_id,
            resources.catalog_id,
            resources.publication_id,
            resources.price_list_id,
        )
        return resources

    async def _ensure_market(self) -> Market:
        settings = self.settings
        country = settings.country_code.upper()
        markets = await self.gateway.list_markets()
        matches = [market for market in markets if country in market.country_codes]
        if len(matches) > 1:
            log.warning(
                "Found %d markets covering %s, using %s",
                len(matches),
                country,
                matches[0].id,
            )

        if not matches:
            market = await self.gateway.create_market(
                name=settings.market_name,
                handle=settings.market_handle,
                country_code=country,
                currency=settings.local_currency,
            )
            log.info("Created market %s (%s)", market.id, settings.market_name)
        else:
            market = matches[0]

        if market.currency.upper() != settings.local_currency or market.local_currencies:
            log.info(
                "Correcting market %s currency settings: currency=%s local_currencies=%s",
                market.id,
                market.currency,
                market.local_currencies,
            )
            await self.gateway.update_market_currency(market.id, settings.local_currency)

        if not market.enabled:
            log.warning("Market %s is disabled; prices will not be visible", market.id)
        return market

    async def _ensure_catalog(self, market: Market) -> Catalog:
        title = self.settings.catalog_title
        catalog = await self.gateway.find_catalog_by_title(title)
        if catalog is not None:
            return catalog
        catalog = await self.gateway.create_catalog(title, market.id)
        log.info("Created catalog %s (%s)", catalog.id, title)
        return catalog

    async def _ensure_attached(self, market: Market, catalog: Catalog) -> None:
        if await self.gateway.market_has_catalog(market.id, catalog.id):
            return
        await self.gateway.attach_catalog(market.id, catalog.id)
        if not await self.gateway.market_has_catalog(market.id, catalog.id):
            raise ProvisioningError(
                f"catalog {catalog.id} is still not attached to market {market.id}"
            )
        log.info("Attached catalog %s to market %s", catalog.id, market.id)

    async def _ensure_publication_and_price_list(
        self, catalog: Catalog
    ) -> tuple[Publication, PriceList]:
        settings = self.settings
        details = await self.gateway.catalog_details(catalog.id)

        publication = details.publication
        if publication is None:
            publication = await self.gateway.create_publication(catalog.id)
            log.info("Created publication %s for catalog %s", publication.id, catalog.id)
        elif not publication.auto_publish:
            publication = await self.gateway.enable_auto_publish(publication.id)
            log.info("Enabled auto-publish on publication %s", publication.id)

        price_list = details.price_list
        if price_list is None or price_list.currency.upper() != settings.local_currency:
            price_list = await self.gateway.create_price_list(
                catalog.id, settings.price_list_name, settings.local_currency
            )
            log.info("Created price list %s (%s)", price_list.id, price_list.currency)

        return publication, price_list

    async def _verify(self, market: Market, catalog: Catalog) -> None:
        if not await self.gateway.market_has_catalog(market.id, catalog.id):
            raise ProvisioningError(f"catalog {catalog.id} is not attached to market {market.id}")

        details = await self.gateway.catalog_details(catalog.id)
        if details.publication is None or not details.publication.id:
            raise ProvisioningError(f"catalog {catalog.id} has no publication")
        if not details.publication.auto_publish:
            raise ProvisioningError(f"publication {details.publication.id} is not auto-publishing")
        if details.price_list is None or not details.price_list.id:
            raise ProvisioningError(f"catalog {catalog.id} has no price list")
        if details.price_list.currency.upper() != self.settings.local_currency:
            raise ProvisioningError(
                f"price list {details.price_list.id} uses {details.price_list.currency}, "
                f"expected {self.settings.local_currency}"
            )
