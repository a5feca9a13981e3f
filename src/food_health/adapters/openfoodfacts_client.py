"""OpenFoodFacts product API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

_PRODUCT_FIELDS = (
    "code,product_name,brands,categories,nutriments,ingredients_text,"
    "serving_quantity,nova_group,additives_tags"
)


class ProductClient(Protocol):
    """Interface for product lookups by barcode."""

    async def get_product(self, barcode: str) -> dict[str, object] | None:
        """Return the raw product payload, or None when unknown."""


@dataclass
class HttpxOpenFoodFactsClient(ProductClient):
    """HTTPX-backed OpenFoodFacts client."""

    base_url: str
    user_agent: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str, user_agent: str) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url, user_agent=user_agent, http_client=httpx.AsyncClient()
        )

    async def get_product(self, barcode: str) -> dict[str, object] | None:
        """Fetch a product by barcode."""
        url = f"{self.base_url}/api/v2/product/{barcode}.json"
        response = await self.http_client.get(
            url,
            params={"fields": _PRODUCT_FIELDS},
            headers={"User-Agent": self.user_agent},
            timeout=15,
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        response.raise_for_status()
        payload = response.json()
        if payload.get("status") != 1:
            return None
        product = payload.get("product")
        return product if isinstance(product, dict) else None

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
