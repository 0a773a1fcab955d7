"""Programming Hero plant catalog API client."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional
from urllib.parse import quote

import httpx

from .models import Category, Plant

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "all"
CENT = Decimal("0.01")


class NetworkError(Exception):
    """Raised when the catalog API cannot be reached or answers with an unusable payload."""


class CatalogClient:
    """Client for the read-only plant catalog API."""

    BASE_URL = "https://openapi.programming-hero.com/api"

    def __init__(
        self,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the catalog client.

        Args:
            base_url: API root (default: BASE_URL)
            transport: Optional httpx transport, mainly for tests
        """
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=None,
            follow_redirects=True,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _get_json(self, path: str) -> dict[str, Any]:
        """GET a path and return the decoded JSON object."""
        logger.info(f"GET {self.base_url}{path}")
        try:
            response = await self.client.get(path)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise NetworkError(f"Request to {path} failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise NetworkError(f"Response from {path} is not JSON") from e

        if not isinstance(data, dict):
            raise NetworkError(f"Unexpected response shape from {path}: {type(data).__name__}")
        return data

    async def fetch_categories(self) -> list[Category]:
        """
        Fetch all plant categories.

        Returns:
            List of categories in API order

        Raises:
            NetworkError: If the request fails or the payload is malformed
        """
        data = await self._get_json("/categories")
        categories_data = data.get("categories") or []
        if not isinstance(categories_data, list):
            raise NetworkError("Unexpected categories payload")

        categories = self._parse_categories(categories_data)
        logger.info(f"Fetched {len(categories)} categories")
        return categories

    async def fetch_plants(self, category_id: str = ALL_CATEGORIES) -> list[Plant]:
        """
        Fetch plants for a category.

        Args:
            category_id: Category ID, or "all" for the whole catalog

        Returns:
            List of plants in API order

        Raises:
            NetworkError: If the request fails or the payload is malformed
        """
        if category_id == ALL_CATEGORIES:
            path = "/plants"
        else:
            path = f"/category/{_path_segment(category_id)}"

        data = await self._get_json(path)
        # The whole catalog comes under "plants", a single category under "data"
        plants_data = data.get("plants") or data.get("data") or []
        if not isinstance(plants_data, list):
            raise NetworkError(f"Unexpected plants payload for category {category_id}")

        plants = self._parse_plants(plants_data)
        logger.info(f"Fetched {len(plants)} plants for category {category_id}")
        return plants

    # Helper methods for parsing responses

    def _parse_categories(self, categories_data: list[Any]) -> list[Category]:
        """Parse categories from /categories response."""
        categories = []

        for item in categories_data:
            if not isinstance(item, dict) or item.get("id") is None:
                logger.warning(f"Skipping malformed category: {item!r}")
                continue
            categories.append(
                Category(
                    id=str(item["id"]),
                    name=_text(item.get("category_name") or item.get("name")),
                )
            )

        return categories

    def _parse_plants(self, plants_data: list[Any]) -> list[Plant]:
        """Parse plants into the canonical Plant shape."""
        plants = []

        for item in plants_data:
            if not isinstance(item, dict):
                logger.warning(f"Skipping malformed plant: {item!r}")
                continue
            try:
                plant_id = int(item["id"])
            except (KeyError, TypeError, ValueError):
                logger.warning(f"Skipping plant without usable id: {item!r}")
                continue

            description = _text(item.get("description"))
            small_description = _text(item.get("small_description"))
            category = _text(item.get("category"))
            category_name = _text(item.get("category_name"))

            plants.append(
                Plant(
                    id=plant_id,
                    name=_text(item.get("name")),
                    description=description or small_description,
                    small_description=small_description or description,
                    category=category or category_name,
                    category_name=category_name or category,
                    price=_price(item.get("price")),
                    image_url=_text(item.get("image") or item.get("image_url")),
                )
            )

        return plants

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _price(value: Any) -> Decimal:
    """Numeric price, 0 when missing or unusable."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        price = Decimal(str(value).strip())
    except InvalidOperation:
        return Decimal("0")
    if not price.is_finite() or price < 0:
        return Decimal("0")
    try:
        return price.quantize(CENT)
    except InvalidOperation:
        # Too many digits for a price
        return Decimal("0")


def _path_segment(value: Any) -> str:
    """Escape a value for use as one URL path segment."""
    # "." and ".." segments would be resolved away, so dots are escaped as well
    return quote(str(value), safe="").replace(".", "%2E")
