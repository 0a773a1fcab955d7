"""HTML rendering for the storefront panels.

Every function is a pure projection of the state it is given: rendering the
same state twice produces the same markup, and each panel is redrawn in full.
"""

from decimal import Decimal
from typing import TYPE_CHECKING, Optional, Sequence, Union

from jinja2 import Environment, PackageLoader, select_autoescape
from markupsafe import Markup

from .catalog_client import ALL_CATEGORIES
from .models import Category, Plant
from .state import CartState

if TYPE_CHECKING:
    from .storefront import Storefront


def format_price(value: Union[Decimal, int, float]) -> str:
    """Plain number without trailing zeros: 500.00 -> "500", 45.50 -> "45.5"."""
    amount = Decimal(str(value))
    if amount == amount.to_integral_value():
        return str(amount.quantize(Decimal(1)))
    return format(amount.normalize(), "f")


env = Environment(
    loader=PackageLoader("plantshop_server", "templates"),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)
env.filters["price"] = format_price


def _render(name: str, **context) -> Markup:
    return Markup(env.get_template(name).render(**context))


def render_categories(categories: Optional[Sequence[Category]], active_category: str) -> Markup:
    """Category list entries; empty until categories have been loaded."""
    return _render(
        "categories.html",
        categories=categories,
        active_category=active_category,
        all_id=ALL_CATEGORIES,
    )


def render_plant_grid(plants: Sequence[Plant], error: Optional[str] = None) -> Markup:
    return _render("plants.html", plants=plants, error=error)


def render_cart(cart: CartState) -> Markup:
    return _render("cart.html", lines=cart.lines, total=cart.display_total())


def render_detail(plant: Optional[Plant]) -> Markup:
    """Detail panel for a plant, or the not-found message for None."""
    return _render("detail.html", plant=plant)


def render_page(storefront: "Storefront", notice: Optional[str] = None) -> Markup:
    """The full storefront page."""
    detail = None
    if storefront.detail_open:
        detail = render_detail(storefront.detail)

    return _render(
        "page.html",
        categories=render_categories(storefront.categories, storefront.catalog.active_category),
        plants=render_plant_grid(storefront.catalog.plants, storefront.plants_error),
        cart=render_cart(storefront.cart),
        detail=detail,
        category_options=storefront.categories or [],
        loading=storefront.loading,
        notice=notice,
    )
