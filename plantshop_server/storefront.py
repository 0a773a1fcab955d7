"""Storefront controller: owns catalog and cart state and handles interactions."""

import logging
from typing import Any, Mapping, Optional, Protocol, Sequence

from .catalog_client import ALL_CATEGORIES, NetworkError
from .models import Category, Plant
from .state import CartState, CatalogState, PlantNotFound

logger = logging.getLogger(__name__)

PLANTS_LOAD_ERROR = "Could not load plants."
DONATION_THANKS = "Thank you for your donation! 💚"


def parse_plant_id(value: Any) -> Optional[int]:
    """Plant id from a form field or tool argument, None if it is not an integer."""
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


class Catalog(Protocol):
    async def fetch_categories(self) -> list[Category]: ...

    async def fetch_plants(self, category_id: str = ALL_CATEGORIES) -> list[Plant]: ...


class Storefront:
    """Catalog, cart and panel state behind every storefront interaction."""

    def __init__(self, client: Catalog) -> None:
        """
        Initialize the storefront.

        Args:
            client: Catalog API client used for every fetch
        """
        self.client = client
        self.catalog = CatalogState()
        self.cart = CartState(self.catalog)
        self.categories: Optional[list[Category]] = None
        self.plants_error: Optional[str] = None
        self.detail: Optional[Plant] = None
        self.detail_open = False
        self._pending_fetches = 0
        self._notice: Optional[str] = None

    @property
    def loading(self) -> bool:
        """True while any catalog fetch is in flight."""
        return self._pending_fetches > 0

    def _start_fetch(self) -> None:
        self._pending_fetches += 1

    def _finish_fetch(self) -> None:
        self._pending_fetches -= 1

    async def load(self) -> None:
        """Fetch categories, then the whole catalog."""
        self._start_fetch()
        try:
            if await self.load_categories():
                await self.load_plants(ALL_CATEGORIES)
        finally:
            self._finish_fetch()

    async def load_categories(self) -> bool:
        """
        Fetch the category list only; the plant snapshot is left alone.

        Returns:
            False if the fetch failed (the list stays unpopulated)
        """
        self._start_fetch()
        try:
            self.categories = await self.client.fetch_categories()
        except NetworkError as e:
            logger.error(f"Category load failed: {e}")
            return False
        finally:
            self._finish_fetch()
        return True

    async def load_plants(self, category_id: str) -> None:
        """
        Fetch plants for a category and replace the catalog snapshot.

        Only the most recently started request is applied; a slower response
        to an earlier selection is dropped.
        """
        token = self.catalog.begin_request()
        self._start_fetch()
        try:
            plants = await self.client.fetch_plants(category_id)
        except NetworkError as e:
            logger.error(f"Plant load failed for category {category_id}: {e}")
            if self.catalog.is_current(token):
                self.plants_error = PLANTS_LOAD_ERROR
            return
        finally:
            self._finish_fetch()

        if not self.catalog.is_current(token):
            logger.info(f"Dropping stale plant response for category {category_id}")
            return

        self.catalog.set_active_plants(plants)
        self.plants_error = None

    async def select_category(self, category_id: str) -> None:
        """Make a category active and load its plants."""
        logger.info(f"Selecting category {category_id}")
        self.catalog.set_active_category(category_id)
        await self.load_plants(category_id)

    def add_to_cart(self, plant_id: int) -> None:
        self.cart.add(plant_id)

    def remove_from_cart(self, plant_id: int) -> None:
        self.cart.remove(plant_id)

    def open_detail(self, plant_id: int) -> Optional[Plant]:
        """
        Open the detail panel for a plant.

        Returns:
            The plant, or None if it is not in the current catalog (the panel
            then shows the not-found message)
        """
        try:
            self.detail = self.catalog.find_by_id(plant_id)
        except PlantNotFound:
            logger.info(f"No details for plant {plant_id}")
            self.detail = None
        self.detail_open = True
        return self.detail

    def close_detail(self) -> None:
        self.detail = None
        self.detail_open = False

    def submit_donation(self, form: Mapping[str, Any]) -> str:
        """Acknowledge a donation. Nothing is stored or sent."""
        logger.info(f"Donation form submitted with fields: {sorted(form.keys())}")
        self._notice = DONATION_THANKS
        return DONATION_THANKS

    def pop_notice(self) -> Optional[str]:
        """Return the pending acknowledgment once, then clear it."""
        notice, self._notice = self._notice, None
        return notice

    @property
    def plants(self) -> Sequence[Plant]:
        return self.catalog.plants
