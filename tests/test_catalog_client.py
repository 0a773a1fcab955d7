import json
from decimal import Decimal

import httpx
import pytest

from plantshop_server.catalog_client import CatalogClient, NetworkError


def make_client(routes):
    """CatalogClient whose transport answers from a {path: response} map."""

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/api")
        answer = routes.get(path)
        if answer is None:
            return httpx.Response(404, json={"status": False})
        if isinstance(answer, httpx.Response):
            return answer
        return httpx.Response(200, json=answer)

    return CatalogClient(base_url="https://catalog.test/api", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetch_categories_reads_category_name():
    client = make_client(
        {
            "/categories": {
                "status": True,
                "categories": [
                    {"id": 1, "category_name": "Fruit Tree", "small_description": "Trees that bear fruit"},
                    {"id": 2, "category_name": "Flowering Tree"},
                ],
            }
        }
    )
    async with client:
        categories = await client.fetch_categories()

    assert [(c.id, c.name) for c in categories] == [("1", "Fruit Tree"), ("2", "Flowering Tree")]


@pytest.mark.asyncio
async def test_fetch_all_plants_uses_plants_field():
    client = make_client(
        {
            "/plants": {
                "status": True,
                "plants": [
                    {
                        "id": 1,
                        "image": "https://i.example.com/mango.jpg",
                        "name": "Mango Tree",
                        "description": "A fast-growing tropical tree.",
                        "category": "Fruit Tree",
                        "price": 500,
                    }
                ],
            }
        }
    )
    async with client:
        plants = await client.fetch_plants("all")

    assert len(plants) == 1
    mango = plants[0]
    assert mango.id == 1
    assert mango.price == Decimal("500")
    assert mango.image_url == "https://i.example.com/mango.jpg"
    assert mango.category_name == "Fruit Tree"
    assert mango.small_description == "A fast-growing tropical tree."


@pytest.mark.asyncio
async def test_fetch_category_plants_uses_data_field():
    client = make_client({"/category/3": {"status": True, "data": [{"id": "7", "name": "Neem", "price": "45.5"}]}})
    async with client:
        plants = await client.fetch_plants("3")

    assert [p.id for p in plants] == [7]
    assert plants[0].price == Decimal("45.5")


@pytest.mark.asyncio
async def test_missing_plant_fields_are_defaulted():
    client = make_client({"/plants": {"plants": [{"id": 4, "name": "Bare"}, {"id": 5, "name": "Odd", "price": "n/a"}]}})
    async with client:
        bare, odd = await client.fetch_plants()

    assert bare.description == ""
    assert bare.small_description == ""
    assert bare.category == ""
    assert bare.image_url == ""
    assert bare.price == Decimal("0")
    assert odd.price == Decimal("0")


@pytest.mark.asyncio
async def test_records_without_id_are_skipped():
    client = make_client({"/plants": {"plants": [{"name": "No id"}, "junk", {"id": 9, "name": "Kept"}]}})
    async with client:
        plants = await client.fetch_plants()

    assert [p.name for p in plants] == ["Kept"]


@pytest.mark.asyncio
async def test_missing_collection_is_empty():
    client = make_client({"/category/9": {"status": False, "message": "No data"}})
    async with client:
        assert await client.fetch_plants("9") == []


@pytest.mark.asyncio
async def test_http_error_status_raises_network_error():
    client = make_client({"/plants": httpx.Response(500, text="boom")})
    async with client:
        with pytest.raises(NetworkError):
            await client.fetch_plants()


@pytest.mark.asyncio
async def test_non_json_body_raises_network_error():
    client = make_client({"/categories": httpx.Response(200, text="<html>maintenance</html>")})
    async with client:
        with pytest.raises(NetworkError):
            await client.fetch_categories()


@pytest.mark.asyncio
async def test_unexpected_shape_raises_network_error():
    client = make_client(
        {
            "/categories": httpx.Response(200, content=json.dumps([1, 2]).encode()),
            "/plants": {"plants": {"id": 1}},
        }
    )
    async with client:
        with pytest.raises(NetworkError):
            await client.fetch_categories()
        with pytest.raises(NetworkError):
            await client.fetch_plants()


@pytest.mark.asyncio
async def test_transport_failure_raises_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = CatalogClient(transport=httpx.MockTransport(handler))
    async with client:
        with pytest.raises(NetworkError) as excinfo:
            await client.fetch_categories()

    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_category_id_stays_one_path_segment():
    seen = []

    def handler(request):
        seen.append(request.url.raw_path)
        return httpx.Response(404)

    client = CatalogClient(base_url="https://catalog.test/api", transport=httpx.MockTransport(handler))
    async with client:
        for category_id in ("../plants", "..", "1\x00", "2/extra"):
            with pytest.raises(NetworkError):
                await client.fetch_plants(category_id)

    assert len(seen) == 4
    assert all(path.startswith(b"/api/category/") for path in seen)
    assert all(path.count(b"/") == 3 for path in seen)


@pytest.mark.asyncio
async def test_invalid_url_raises_network_error(monkeypatch):
    client = CatalogClient(transport=httpx.MockTransport(lambda request: httpx.Response(200, json={})))

    async def reject(path):
        raise httpx.InvalidURL("Invalid non-printable ASCII character in URL")

    monkeypatch.setattr(client.client, "get", reject)
    async with client:
        with pytest.raises(NetworkError) as excinfo:
            await client.fetch_plants("1")

    assert isinstance(excinfo.value.__cause__, httpx.InvalidURL)


@pytest.mark.asyncio
async def test_prices_are_kept_to_cents():
    client = make_client(
        {
            "/plants": {
                "plants": [
                    {"id": 1, "name": "Huge", "price": "1e999999999"},
                    {"id": 2, "name": "Neem", "price": 45.5},
                ]
            }
        }
    )
    async with client:
        huge, neem = await client.fetch_plants()

    assert huge.price == Decimal("0")
    assert neem.price == Decimal("45.50")
