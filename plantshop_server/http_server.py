"""HTTP server for the Plant Shop storefront."""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

from .catalog_client import ALL_CATEGORIES, CatalogClient
from .render import render_cart, render_categories, render_page, render_plant_grid
from .storefront import Storefront, parse_plant_id

# Configure logging
logging.basicConfig(level=os.environ.get("PLANTSHOP_LOG_LEVEL", "INFO").upper())
logger = logging.getLogger("plantshop-http-server")

STATIC_DIR = Path(__file__).resolve().parent / "static"

# Global state
storefront: Storefront


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    global storefront

    # Startup
    logger.info("Starting Plant Shop HTTP Server...")
    catalog_client = CatalogClient(base_url=os.environ.get("PLANTSHOP_API_URL"))
    storefront = Storefront(catalog_client)
    await storefront.load()

    yield

    # Shutdown
    logger.info("Shutting down Plant Shop HTTP Server...")
    await catalog_client.aclose()


app = FastAPI(
    title="Plant Shop Server",
    description="Storefront for the Green Earth plant catalog",
    version="0.1.0",
    lifespan=lifespan,
)
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")


def _back_to_shop() -> RedirectResponse:
    return RedirectResponse(url="/", status_code=303)


# Page
@app.get("/", response_class=HTMLResponse)
async def index(plant_id: Optional[str] = None):
    """Render the storefront, optionally with a plant's detail panel open."""
    if plant_id is not None:
        _open_detail(plant_id)
    else:
        storefront.close_detail()
    return HTMLResponse(render_page(storefront, notice=storefront.pop_notice()))


@app.get("/plants/{plant_id}", response_class=HTMLResponse)
async def plant_detail(plant_id: str):
    """Render the storefront with the detail panel open."""
    _open_detail(plant_id)
    return HTMLResponse(render_page(storefront, notice=storefront.pop_notice()))


@app.get("/plants/{plant_id}/close")
async def close_plant_detail(plant_id: str):
    """Dismiss the detail panel."""
    storefront.close_detail()
    return _back_to_shop()


def _open_detail(raw_id: str) -> None:
    plant_id = parse_plant_id(raw_id)
    if plant_id is None:
        storefront.detail = None
        storefront.detail_open = True
    else:
        storefront.open_detail(plant_id)


# Interaction endpoints
@app.post("/categories/select")
async def select_category(category_id: str = Form(ALL_CATEGORIES)):
    """Make a category active and reload the plant grid."""
    await storefront.select_category(category_id.strip() or ALL_CATEGORIES)
    return _back_to_shop()


@app.post("/cart/add")
async def add_to_cart(plant_id: str = Form(...)):
    """Add one unit of a plant to the cart."""
    parsed = parse_plant_id(plant_id)
    if parsed is not None:
        storefront.add_to_cart(parsed)
    return _back_to_shop()


@app.post("/cart/remove")
async def remove_from_cart(plant_id: str = Form(...)):
    """Remove a plant's line from the cart."""
    parsed = parse_plant_id(plant_id)
    if parsed is not None:
        storefront.remove_from_cart(parsed)
    return _back_to_shop()


@app.post("/donations")
async def donate(request: Request):
    """Acknowledge a donation; the form comes back empty."""
    form = await request.form()
    storefront.submit_donation(form)
    return _back_to_shop()


# Fragments
@app.get("/fragments/categories", response_class=HTMLResponse)
async def categories_fragment():
    return HTMLResponse(
        render_categories(storefront.categories, storefront.catalog.active_category)
    )


@app.get("/fragments/plants", response_class=HTMLResponse)
async def plants_fragment():
    return HTMLResponse(render_plant_grid(storefront.plants, storefront.plants_error))


@app.get("/fragments/cart", response_class=HTMLResponse)
async def cart_fragment():
    return HTMLResponse(render_cart(storefront.cart))


# JSON endpoints
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "categories_loaded": storefront.categories is not None,
        "plants": len(storefront.plants),
    }


@app.get("/api/plants")
async def list_plants():
    """Plants in the current catalog snapshot."""
    try:
        return {
            "category": storefront.catalog.active_category,
            "count": len(storefront.plants),
            "plants": [plant.model_dump(mode="json") for plant in storefront.plants],
        }
    except Exception as e:
        logger.error(f"List plants error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/api/cart")
async def get_cart():
    """Current shopping cart."""
    try:
        return storefront.cart.summary().model_dump(mode="json")
    except Exception as e:
        logger.error(f"Get cart error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


def run_http_server(host: str = "0.0.0.0", port: int = 8000, reload: bool = False):
    """
    Run the HTTP server.

    Args:
        host: Host to bind to (default: 0.0.0.0)
        port: Port to bind to (default: 8000)
        reload: Enable hot reloading (default: False)
    """
    import uvicorn

    logger.info(f"Starting server on {host}:{port} (reload={'enabled' if reload else 'disabled'})")

    if reload:
        uvicorn.run(
            "plantshop_server.http_server:app",
            host=host,
            port=port,
            reload=True,
            reload_dirs=["plantshop_server"],
            log_level="info",
        )
    else:
        uvicorn.run(app, host=host, port=port, log_level="info")


if __name__ == "__main__":
    run_http_server()
