"""Hebrew translations registered against the shop's primary-language content."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .schema import TranslatableResource

if TYPE_CHECKING:
    from .client import ShopifyGraphQLClient

TRANSLATABLE_RESOURCE_QUERY = """
query translatableResource($id: ID!) {
    translatableResource(resourceId: $id) {
        resourceId
        translatableContent { key value digest locale }
    }
}
"""

TRANSLATIONS_REGISTER_MUTATION = """
mutation translationsRegister($resourceId: ID!, $translations: [TranslationInput!]!) {
    translationsRegister(resourceId: $resourceId, translations: $translations) {
        translations { key value }
        userErrors { field message }
    }
}
"""


@dataclass(slots=True)
class ShopifyTranslations:
    graphql: ShopifyGraphQLClient
    locale: str = "he"
    source_locale: str = "en"

    async def content_digest(self, resource_id: str, key: str) -> str | None:
        data = await self.graphql.execute(TRANSLATABLE_RESOURCE_QUERY, {"id": resource_id})
        raw = data.get("translatableResource")
        if not raw:
            return None
        resource = TranslatableResource.model_validate(raw)
        for content in resource.translatable_content:
            if content.key != key or not content.digest:
                continue
            if content.locale and content.locale != self.source_locale:
                continue
            return content.digest
        return None

    async def register_translation(self, resource_id: str, key: str, value: str) -> bool:
        if not resource_id or not value.strip():
            return False
        digest = await self.content_digest(resource_id, key)
        if digest is None:
            return False
        await self.graphql.mutate(
            "translationsRegister",
            TRANSLATIONS_REGISTER_MUTATION,
            {
                "resourceId": resource_id,
                "translations": [
                    {
                        "locale": self.locale,
                        "key": key,
                        "value": value,
                        "translatableContentDigest": digest,
                    }
                ],
            },
        )
        return True
