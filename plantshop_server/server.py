"""MCP Server for the Plant Shop catalog and cart."""

import asyncio
import logging
import os
from typing import Any

from mcp.server import Server
from mcp.types import Resource, Tool, TextContent
from pydantic import AnyUrl

from .catalog_client import ALL_CATEGORIES, CatalogClient
from .state import PlantNotFound, format_total
from .storefront import Storefront, parse_plant_id

# Configure logging
logging.basicConfig(level=os.environ.get("PLANTSHOP_LOG_LEVEL", "INFO").upper())
logger = logging.getLogger("plantshop-mcp-server")

# Initialize server
app = Server("plantshop-mcp-server")

# Global state
storefront: Storefront


@app.list_resources()
async def list_resources() -> list[Resource]:
    """List available resources."""
    return [
        Resource(
            uri=AnyUrl("plantshop://cart"),
            name="Shopping Cart",
            mimeType="application/json",
            description="Current shopping cart contents",
        )
    ]


@app.read_resource()
async def read_resource(uri: AnyUrl) -> str:
    """Read a resource by URI."""
    uri_str = str(uri)

    if uri_str == "plantshop://cart":
        return storefront.cart.summary().model_dump_json(indent=2)

    raise ValueError(f"Unknown resource: {uri}")


@app.list_tools()
async def list_tools() -> list[Tool]:
    """List available tools."""
    return [
        Tool(
            name="plantshop_list_categories",
            description="List plant categories",
            inputSchema={"type": "object", "properties": {}},
        ),
        Tool(
            name="plantshop_list_plants",
            description="Select a category and list its plants (all plants by default)",
            inputSchema={
                "type": "object",
                "properties": {
                    "category_id": {
                        "type": "string",
                        "description": "Category ID from plantshop_list_categories, or 'all'",
                        "default": ALL_CATEGORIES,
                    },
                },
            },
        ),
        Tool(
            name="plantshop_plant_details",
            description="Show details for a plant in the current listing",
            inputSchema={
                "type": "object",
                "properties": {
                    "plant_id": {"type": "integer", "description": "Plant ID"},
                },
                "required": ["plant_id"],
            },
        ),
        Tool(
            name="plantshop_add_to_cart",
            description="Add one unit of a plant from the current listing to the cart",
            inputSchema={
                "type": "object",
                "properties": {
                    "plant_id": {"type": "integer", "description": "Plant ID to add"},
                },
                "required": ["plant_id"],
            },
        ),
        Tool(
            name="plantshop_remove_from_cart",
            description="Remove a plant from the cart",
            inputSchema={
                "type": "object",
                "properties": {
                    "plant_id": {"type": "integer", "description": "Plant ID to remove"},
                },
                "required": ["plant_id"],
            },
        ),
        Tool(
            name="plantshop_get_cart",
            description="Get current shopping cart contents",
            inputSchema={"type": "object", "properties": {}},
        ),
    ]


@app.call_tool()
async def call_tool(name: str, arguments: Any) -> list[TextContent]:
    """Handle tool calls."""
    arguments = arguments or {}
    try:
        if name == "plantshop_list_categories":
            if storefront.categories is None:
                await storefront.load_categories()
            if not storefront.categories:
                return [TextContent(type="text", text="No categories available")]

            result_lines = [f"Found {len(storefront.categories)} categories:\n"]
            for category in storefront.categories:
                result_lines.append(f"- {category.name} (ID: {category.id})")
            return [TextContent(type="text", text="\n".join(result_lines))]

        elif name == "plantshop_list_plants":
            category_id = str(arguments.get("category_id") or ALL_CATEGORIES)
            await storefront.select_category(category_id)

            if storefront.plants_error:
                return [TextContent(type="text", text=f"Error: {storefront.plants_error}")]
            if not storefront.plants:
                return [TextContent(type="text", text="No plants found for this category.")]

            result_lines = [f"Found {len(storefront.plants)} plant(s):\n"]
            for i, plant in enumerate(storefront.plants, 1):
                result_lines.append(f"\n{i}. {plant.name}")
                result_lines.append(f"   ID: {plant.id}")
                result_lines.append(f"   Price: ৳{format_total(plant.price)}")
                if plant.category_name:
                    result_lines.append(f"   Category: {plant.category_name}")
            return [TextContent(type="text", text="\n".join(result_lines))]

        elif name == "plantshop_plant_details":
            plant_id = parse_plant_id(arguments.get("plant_id"))
            try:
                plant = storefront.catalog.find_by_id(plant_id)
            except PlantNotFound:
                return [TextContent(type="text", text="Sorry, no details found for this tree.")]

            result_lines = [
                plant.name,
                f"Description: {plant.description or 'No description available.'}",
                f"Category: {plant.category or '—'}",
                f"Price: ৳{format_total(plant.price)}",
            ]
            if plant.image_url:
                result_lines.append(f"Image: {plant.image_url}")
            return [TextContent(type="text", text="\n".join(result_lines))]

        elif name == "plantshop_add_to_cart":
            plant_id = parse_plant_id(arguments.get("plant_id"))
            before = storefront.cart.summary().item_count
            if plant_id is not None:
                storefront.add_to_cart(plant_id)

            if storefront.cart.summary().item_count == before:
                return [
                    TextContent(
                        type="text",
                        text=f"❌ Plant {arguments.get('plant_id')} is not in the current listing",
                    )
                ]
            return [
                TextContent(
                    type="text",
                    text=f"✅ Added plant {plant_id} to cart\n"
                         f"Total: ৳{storefront.cart.display_total()}",
                )
            ]

        elif name == "plantshop_remove_from_cart":
            plant_id = parse_plant_id(arguments.get("plant_id"))
            in_cart = any(line.plant_id == plant_id for line in storefront.cart.lines)
            if not in_cart:
                return [
                    TextContent(
                        type="text",
                        text=f"Plant {arguments.get('plant_id')} is not in the cart",
                    )
                ]

            storefront.remove_from_cart(plant_id)
            return [
                TextContent(
                    type="text",
                    text=f"✅ Removed plant {plant_id} from cart\n"
                         f"Total: ৳{storefront.cart.display_total()}",
                )
            ]

        elif name == "plantshop_get_cart":
            summary = storefront.cart.summary()

            if not summary.lines:
                return [TextContent(type="text", text="Your cart is empty")]

            result_lines = [f"Shopping Cart ({summary.item_count} items):\n"]
            for line in summary.lines:
                result_lines.append(
                    f"  - {line.name} (ID {line.plant_id}): ৳{format_total(line.unit_price)} × {line.quantity}"
                )
            result_lines.append(f"\nTotal: ৳{summary.display_total}")
            return [TextContent(type="text", text="\n".join(result_lines))]

        else:
            return [TextContent(type="text", text=f"Unknown tool: {name}")]

    except Exception as e:
        logger.error(f"Error executing tool {name}: {e}", exc_info=True)
        return [TextContent(type="text", text=f"Error: {str(e)}")]


async def main() -> None:
    """Main entry point."""
    global storefront

    api_url = os.environ.get("PLANTSHOP_API_URL")
    if api_url:
        logger.info(f"Using catalog API at {api_url}")

    async with CatalogClient(base_url=api_url) as catalog_client:
        storefront = Storefront(catalog_client)
        await storefront.load()

        logger.info("Starting Plant Shop MCP Server...")

        # Import and run the server
        from mcp.server.stdio import stdio_server

        async with stdio_server() as (read_stream, write_stream):
            await app.run(
                read_stream,
                write_stream,
                app.create_initialization_options(),
            )


if __name__ == "__main__":
    asyncio.run(main())
