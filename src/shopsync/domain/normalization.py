"""Key normalization for grouping source records."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from shopsync.domain.model import AttributeDefinition

METAFIELD_KEY_MAX_LENGTH = 30
METAFIELD_KEY_FALLBACK_PREFIX = "attr_"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize_key(value: str) -> str:
    """Case-insensitive, whitespace-trimmed grouping key."""
    return value.strip().lower()


def normalize_sku(value: str) -> str:
    return value.strip()


def slugify_metafield_key(name: str) -> str:
    slug = _NON_ALNUM.sub("_", name.strip().lower()).strip("_")
    return slug[:METAFIELD_KEY_MAX_LENGTH].rstrip("_")


def fallback_metafield_key(attribute_id: int) -> str:
    return f"{METAFIELD_KEY_FALLBACK_PREFIX}{attribute_id}"


def build_attribute_keys(definitions: Iterable[AttributeDefinition]) -> dict[int, str]:
    """Assign each attribute a unique metafield key.

    Keys are slugs of the English name. An empty slug, or one already taken by an
    earlier attribute, falls back to ``attr_{id}``.
    """

    keys: dict[int, str] = {}
    used: set[str] = set()
    for definition in definitions:
        if definition.attribute_id in keys:
            continue
        key = slugify_metafield_key(definition.name_english)
        if not key or key in used:
            key = fallback_metafield_key(definition.attribute_id)
        if key in used:
            continue
        keys[definition.attribute_id] = key
        used.add(key)
    return keys
