"""Categories: upsert one collection per distinct title, then attach products."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING

from shopsync.config.sync import SyncConfig
from shopsync.domain.concurrency import WorkerPool
from shopsync.domain.model import NotFound
from shopsync.domain.normalization import normalize_key, normalize_sku

from ._shared import add_to_collection, translate_best_effort
from .summary import FlowSummary

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shopsync.domain.model import CategoryAssignment
    from shopsync.domain.ports import (
        CatalogSource,
        CollectionGateway,
        IdentityResolver,
        TranslationGateway,
    )

log = getLogger(__name__)


@dataclass(slots=True)
class SyncCategories:
    source: CatalogSource
    resolver: IdentityResolver
    collections: CollectionGateway
    translations: TranslationGateway
    config: SyncConfig = field(default_factory=SyncConfig)

    async def run(self) -> FlowSummary:
        summary = FlowSummary("categories")
        rows = await self.source.list_category_assignments()

        categories: dict[str, CategoryAssignment] = {}
        attachments: dict[str, list[str]] = {}
        for row in rows:
            key = normalize_key(row.title)
            if not key:
                summary.skip("empty_title")
                continue
            categories.setdefault(key, row)
            sku = normalize_sku(row.sku)
            if sku:
                keys = attachments.setdefault(sku, [])
                if key not in keys:
                    keys.append(key)

        collection_ids = await self._upsert_all(categories, summary)
        # attachment only starts once every category exists
        await self._attach_all(attachments, collection_ids, summary)
        return summary

    async def _upsert_all(
        self, categories: dict[str, CategoryAssignment], summary: FlowSummary
    ) -> dict[str, str]:
        pool: WorkerPool[tuple[str, str]] = WorkerPool(
            self.config.concurrency, name="categories"
        )
        for key, category in categories.items():
            pool.submit(partial(self._upsert, key, category, summary))
        return dict(await pool.wait())

    async def _upsert(
        self, key: str, category: CategoryAssignment, summary: FlowSummary
    ) -> tuple[str, str]:
        title = category.title
        collection_id = await self.collections.find_collection_by_title(title)
        if collection_id is None:
            collection_id = await self.collections.create_collection(title)
            summary.created += 1
            log.info("Created collection %s for %r", collection_id, title)
        else:
            await self.collections.update_collection(collection_id, title)
            summary.updated += 1

        hebrew = category.title_hebrew.strip()
        if hebrew and hebrew.lower() != title.lower():
            await translate_best_effort(
                self.translations,
                resource_id=collection_id,
                key="title",
                value=hebrew,
                summary=summary,
            )
        summary.processed += 1
        return key, collection_id

    async def _attach_all(
        self,
        attachments: dict[str, list[str]],
        collection_ids: dict[str, str],
        summary: FlowSummary,
    ) -> None:
        pool: WorkerPool[None] = WorkerPool(self.config.concurrency, name="category attachments")
        for sku, keys in attachments.items():
            pool.submit(partial(self._attach, sku, keys, collection_ids, summary))
        await pool.wait()

    async def _attach(
        self,
        sku: str,
        keys: Sequence[str],
        collection_ids: dict[str, str],
        summary: FlowSummary,
    ) -> None:
        resolution = await self.resolver.resolve_by_sku(sku)
        if isinstance(resolution, NotFound):
            log.warning("Category attachment skipped, no product for SKU %s", sku)
            summary.skip("product_not_found")
            return
        for key in keys:
            await add_to_collection(
                self.collections,
                collection_id=collection_ids[key],
                product_id=resolution.product_id,
                fatal=self.config.collection_add_failures_fatal,
                summary=summary,
            )
