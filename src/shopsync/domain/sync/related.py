"""Related products: a product-reference list metafield per SKU."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING

from shopsync.config.sync import SyncConfig
from shopsync.domain.concurrency import WorkerPool
from shopsync.domain.model import MetafieldValue, NewMetafieldDefinition, NotFound
from shopsync.domain.normalization import normalize_sku

from .summary import FlowSummary

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from shopsync.domain.ports import CatalogSource, IdentityResolver, MetafieldGateway

log = getLogger(__name__)

RELATED_DEFINITION = NewMetafieldDefinition(
    namespace="custom",
    key="related_products",
    name="Related products",
    type="list.product_reference",
)


def filter_related_skus(sku: str, candidates: Iterable[str]) -> list[str]:
    """Drop blanks, self-references and case-insensitive duplicates, keeping order."""

    own = sku.lower()
    seen: set[str] = set()
    related: list[str] = []
    for candidate in candidates:
        value = normalize_sku(candidate)
        key = value.lower()
        if not value or key == own or key in seen:
            continue
        seen.add(key)
        related.append(value)
    return related


@dataclass(slots=True)
class SyncRelatedProducts:
    source: CatalogSource
    resolver: IdentityResolver
    metafields: MetafieldGateway
    config: SyncConfig = field(default_factory=SyncConfig)

    async def run(self) -> FlowSummary:
        summary = FlowSummary("related products")
        rows = await self.source.list_related()

        links: dict[str, list[str]] = {}
        for row in rows:
            sku = normalize_sku(row.sku)
            if not sku:
                summary.skip("empty_sku")
                continue
            links.setdefault(sku, []).extend(row.similar_skus)

        await self._ensure_definition(summary)

        pool: WorkerPool[None] = WorkerPool(self.config.concurrency, name="related products")
        for sku, candidates in links.items():
            related = filter_related_skus(sku, candidates)
            if not related:
                summary.skip("no_related")
                continue
            pool.submit(partial(self._write_links, sku, related, summary))
        await pool.wait()
        return summary

    async def _ensure_definition(self, summary: FlowSummary) -> None:
        existing = await self.metafields.list_definitions(RELATED_DEFINITION.namespace)
        if any(item.key == RELATED_DEFINITION.key for item in existing):
            return
        await self.metafields.create_definition(RELATED_DEFINITION)
        summary.created += 1
        log.info(
            "Created metafield definition %s.%s",
            RELATED_DEFINITION.namespace,
            RELATED_DEFINITION.key,
        )

    async def _write_links(self, sku: str, related: Sequence[str], summary: FlowSummary) -> None:
        resolution = await self.resolver.resolve_by_sku(sku)
        if isinstance(resolution, NotFound):
            log.warning("Related products skipped, no product for SKU %s", sku)
            summary.skip("not_found")
            return

        product_ids: list[str] = []
        for related_sku in related:
            target = await self.resolver.resolve_by_sku(related_sku)
            if isinstance(target, NotFound):
                log.warning("Related SKU %s of %s not found", related_sku, sku)
                summary.note("related_not_found")
                continue
            if target.product_id != resolution.product_id and target.product_id not in product_ids:
                product_ids.append(target.product_id)
        if not product_ids:
            summary.skip("no_related")
            return

        await self.metafields.set_metafields(
            [
                MetafieldValue(
                    owner_id=resolution.product_id,
                    namespace=RELATED_DEFINITION.namespace,
                    key=RELATED_DEFINITION.key,
                    type=RELATED_DEFINITION.type,
                    value=json.dumps(product_ids),
                )
            ]
        )
        summary.processed += 1
        summary.updated += 1
