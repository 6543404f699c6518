from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from shopsync.domain.errors import SyncError

if TYPE_CHECKING:
    from shopsync.domain.ports import CollectionGateway, TranslationGateway

    from .summary import FlowSummary

log = getLogger(__name__)


async def translate_best_effort(
    translations: TranslationGateway,
    *,
    resource_id: str,
    key: str,
    value: str,
    summary: FlowSummary,
) -> None:
    """Register a Hebrew translation; failures are logged and counted only."""

    value = value.strip()
    if not value:
        return
    try:
        registered = await translations.register_translation(resource_id, key, value)
    except SyncError as exc:
        log.warning("Translation of %s on %s failed: %s", key, resource_id, exc)
        summary.note("translation_failed")
        return
    if registered:
        summary.note("translated")


async def add_to_collection(
    collections: CollectionGateway,
    *,
    collection_id: str,
    product_id: str,
    fatal: bool,
    summary: FlowSummary,
) -> None:
    # the product may already be a member, so failures are downgraded unless configured
    try:
        await collections.add_products(collection_id, [product_id])
    except SyncError as exc:
        if fatal:
            raise
        log.warning("Adding %s to collection %s failed: %s", product_id, collection_id, exc)
        summary.note("add_failed")
        return
    summary.note("attached")
