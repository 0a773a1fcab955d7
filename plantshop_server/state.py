"""In-memory catalog and cart state."""

import logging
from decimal import Decimal
from typing import Iterable, Union

from .catalog_client import ALL_CATEGORIES
from .models import CartLine, CartSummary, Plant

logger = logging.getLogger(__name__)


class PlantNotFound(LookupError):
    """Raised when a plant id is not in the current catalog snapshot."""

    def __init__(self, plant_id: int) -> None:
        super().__init__(f"Plant {plant_id} not found")
        self.plant_id = plant_id


def format_total(amount: Union[Decimal, int, float]) -> str:
    """
    Format a cart total for display.

    Two decimal places, with a trailing ".00" stripped:
    45 -> "45", 45.5 -> "45.50", 45.1 -> "45.10".
    """
    text = f"{Decimal(str(amount)):.2f}"
    if text.endswith(".00"):
        return text[: -len(".00")]
    return text


class CatalogState:
    """Last fetched plants and the active category."""

    def __init__(self) -> None:
        self.plants: list[Plant] = []
        self.active_category: str = ALL_CATEGORIES
        self._by_id: dict[int, Plant] = {}
        self._request_token = 0

    def set_active_plants(self, plants: Iterable[Plant]) -> None:
        """Replace the stored plants wholesale."""
        self.plants = list(plants)
        # Duplicate ids: the last one wins
        self._by_id = {plant.id: plant for plant in self.plants}

    def find_by_id(self, plant_id: int) -> Plant:
        """
        Look up a plant in the current snapshot.

        Raises:
            PlantNotFound: If no plant with this id was in the last fetch
        """
        try:
            return self._by_id[plant_id]
        except KeyError:
            raise PlantNotFound(plant_id) from None

    def set_active_category(self, category_id: str) -> None:
        self.active_category = category_id

    def begin_request(self) -> int:
        """Start a plant request and return its token."""
        self._request_token += 1
        return self._request_token

    def is_current(self, token: int) -> bool:
        """Whether token belongs to the most recently started plant request."""
        return token == self._request_token


class CartState:
    """Shopping cart lines, one per plant, in insertion order."""

    def __init__(self, catalog: CatalogState) -> None:
        self.catalog = catalog
        self._lines: dict[int, CartLine] = {}

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines.values())

    def add(self, plant_id: int) -> None:
        """
        Add one unit of a plant.

        Unknown plants are ignored. The first add snapshots the plant's name
        and price; later adds only bump the quantity.
        """
        try:
            plant = self.catalog.find_by_id(plant_id)
        except PlantNotFound:
            logger.info(f"Ignoring add to cart for unknown plant {plant_id}")
            return

        line = self._lines.get(plant_id)
        if line is not None:
            line.quantity += 1
        else:
            self._lines[plant_id] = CartLine(
                plant_id=plant.id, name=plant.name, unit_price=plant.price, quantity=1
            )
        logger.info(f"Cart: plant {plant_id} quantity={self._lines[plant_id].quantity}")

    def remove(self, plant_id: int) -> None:
        """Remove the line for a plant, if any."""
        if self._lines.pop(plant_id, None) is not None:
            logger.info(f"Cart: removed plant {plant_id}")

    def total(self) -> Decimal:
        return sum((line.subtotal for line in self._lines.values()), Decimal("0"))

    def display_total(self) -> str:
        return format_total(self.total())

    def summary(self) -> CartSummary:
        lines = [line.model_copy() for line in self._lines.values()]
        return CartSummary(
            lines=lines,
            total=self.total(),
            display_total=self.display_total(),
            item_count=sum(line.quantity for line in lines),
        )

    def __len__(self) -> int:
        return len(self._lines)
