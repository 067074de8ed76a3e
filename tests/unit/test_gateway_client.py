"""
Unit tests for SyncGatewayClient over httpx.MockTransport.
"""
import json

import httpx
import pytest

from app.client.gateway_client import GatewayError, SyncGatewayClient
from app.schemas.deal import Deal


def make_client(handler) -> SyncGatewayClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://gateway")
    return SyncGatewayClient(token="abc", http=http)


async def test_bearer_token_and_deal_parsing():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=[{"id": "1", "companyName": "Cool Air", "stage": "PROSPECT"}])

    gateway = make_client(handler)
    deals = await gateway.fetch_deals()

    assert seen["auth"] == "Bearer abc"
    assert deals[0].company_name == "Cool Air"


async def test_bulk_upsert_sends_camel_case_list():
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append((request.method, request.url.path, json.loads(request.content)))
        return httpx.Response(200, json={"success": True})

    gateway = make_client(handler)
    await gateway.bulk_upsert([Deal(id="1", company_name="Cool Air")])

    method, path, body = bodies[0]
    assert (method, path) == ("PUT", "/api/opportunities")
    assert body[0]["companyName"] == "Cool Air"


async def test_error_status_raises_gateway_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(409, json={"detail": {"code": "duplicate_opportunity"}})

    gateway = make_client(handler)
    with pytest.raises(GatewayError) as exc:
        await gateway.create_deal(Deal(id="1"))
    assert exc.value.status_code == 409


async def test_transport_error_raises_gateway_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    gateway = make_client(handler)
    with pytest.raises(GatewayError) as exc:
        await gateway.fetch_deals()
    assert exc.value.status_code is None


async def test_login_keeps_token():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={
            "access_token": "jwt-token",
            "token_type": "bearer",
            "user": {"id": 4, "name": "Dana", "email": "dana@example.com", "role": "user", "lastLogin": None},
        })

    gateway = make_client(handler)
    user = await gateway.login("dana@example.com", "secret-pass")

    assert gateway.token == "jwt-token"
    assert user.id == 4


async def test_aclose_leaves_borrowed_client_open():
    http = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json=[])))
    gateway = SyncGatewayClient(http=http)

    await gateway.aclose()

    assert not http.is_closed
    await http.aclose()


async def test_non_json_success_body_raises_gateway_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>ok</html>", headers={"Content-Type": "text/html"})

    gateway = make_client(handler)
    with pytest.raises(GatewayError) as exc:
        await gateway.bulk_upsert([Deal(id="1")])
    assert exc.value.status_code == 200
