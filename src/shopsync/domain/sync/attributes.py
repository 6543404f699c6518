"""Attributes: write ERP item attributes as product metafields.

Every attribute becomes a single-line text metafield in the ``attributes``
namespace. Definitions are ensured once before any value is written so the
values show up in the admin with readable names.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from itertools import batched
from logging import getLogger
from typing import TYPE_CHECKING

from shopsync.config.sync import SyncConfig
from shopsync.domain.concurrency import WorkerPool
from shopsync.domain.model import MetafieldValue, NewMetafieldDefinition, NotFound
from shopsync.domain.normalization import build_attribute_keys, normalize_sku

from ._shared import translate_best_effort
from .summary import FlowSummary

if TYPE_CHECKING:
    from shopsync.domain.model import AttributeCatalog, AttributeDefinition
    from shopsync.domain.ports import (
        CatalogSource,
        IdentityResolver,
        MetafieldGateway,
        TranslationGateway,
    )

log = getLogger(__name__)

ATTRIBUTES_NAMESPACE = "attributes"
ATTRIBUTE_METAFIELD_TYPE = "single_line_text_field"


@dataclass(frozen=True, slots=True)
class _AttributeValue:
    value: str
    # Hebrew text to register as a translation of ``value``, if any
    translation: str = ""


@dataclass(slots=True)
class SyncAttributes:
    source: CatalogSource
    resolver: IdentityResolver
    metafields: MetafieldGateway
    translations: TranslationGateway
    config: SyncConfig = field(default_factory=SyncConfig)
    namespace: str = ATTRIBUTES_NAMESPACE

    async def run(self) -> FlowSummary:
        summary = FlowSummary("attributes")
        catalog = await self.source.list_attributes()

        definitions: dict[int, AttributeDefinition] = {}
        for definition in catalog.definitions:
            definitions.setdefault(definition.attribute_id, definition)
        keys = build_attribute_keys(definitions.values())

        await self._ensure_definitions(definitions, keys, summary)

        grouped = self._group_by_sku(catalog, definitions, keys, summary)
        pool: WorkerPool[None] = WorkerPool(self.config.concurrency, name="attributes")
        for sku, values in grouped.items():
            pool.submit(partial(self._write_sku, sku, values, summary))
        await pool.wait()
        return summary

    async def _ensure_definitions(
        self,
        definitions: dict[int, AttributeDefinition],
        keys: dict[int, str],
        summary: FlowSummary,
    ) -> None:
        existing = {item.key for item in await self.metafields.list_definitions(self.namespace)}
        for attribute_id, key in sorted(keys.items(), key=lambda item: item[1]):
            if key in existing:
                continue
            definition = definitions[attribute_id]
            name = definition.name_english.strip() or definition.name_hebrew.strip() or key
            created = await self.metafields.create_definition(
                NewMetafieldDefinition(
                    namespace=self.namespace,
                    key=key,
                    name=name,
                    type=ATTRIBUTE_METAFIELD_TYPE,
                )
            )
            existing.add(key)
            summary.created += 1
            log.info("Created metafield definition %s.%s (%s)", self.namespace, key, name)

            hebrew = definition.name_hebrew.strip()
            if hebrew and hebrew.lower() != name.lower():
                await translate_best_effort(
                    self.translations,
                    resource_id=created.id,
                    key="name",
                    value=hebrew,
                    summary=summary,
                )

    def _group_by_sku(
        self,
        catalog: AttributeCatalog,
        definitions: dict[int, AttributeDefinition],
        keys: dict[int, str],
        summary: FlowSummary,
    ) -> dict[str, dict[str, _AttributeValue]]:
        grouped: dict[str, dict[str, _AttributeValue]] = {}
        for assignment in catalog.assignments:
            sku = normalize_sku(assignment.sku)
            if not sku:
                summary.skip("empty_sku")
                continue
            if assignment.attribute_id not in definitions:
                summary.skip("missing_attribute")
                continue
            key = keys.get(assignment.attribute_id)
            if not key:
                summary.skip("invalid_key")
                continue
            english = assignment.value_english.strip()
            hebrew = assignment.value_hebrew.strip()
            value = english or hebrew
            if not value:
                summary.skip("empty_value")
                continue
            fields = grouped.setdefault(sku, {})
            if key in fields:
                summary.skip("duplicate")
                continue
            translation = hebrew if english and hebrew and hebrew.lower() != english.lower() else ""
            fields[key] = _AttributeValue(value=value, translation=translation)
        return grouped

    async def _write_sku(
        self, sku: str, values: dict[str, _AttributeValue], summary: FlowSummary
    ) -> None:
        resolution = await self.resolver.resolve_by_sku(sku)
        if isinstance(resolution, NotFound):
            log.warning("Attributes skipped, no product for SKU %s", sku)
            summary.skip("not_found")
            return

        payload = [
            MetafieldValue(
                owner_id=resolution.product_id,
                namespace=self.namespace,
                key=key,
                type=ATTRIBUTE_METAFIELD_TYPE,
                value=values[key].value,
            )
            for key in sorted(values)
        ]
        for batch in batched(payload, self.config.metafields_batch_size):
            records = await self.metafields.set_metafields(batch)
            for record in records:
                attribute = values.get(record.key)
                if attribute is None or not attribute.translation:
                    continue
                await translate_best_effort(
                    self.translations,
                    resource_id=record.id,
                    key="value",
                    value=attribute.translation,
                    summary=summary,
                )
        summary.processed += 1
        summary.updated += 1
        summary.note("metafields_written", len(payload))
