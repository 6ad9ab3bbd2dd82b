import httpx
import pytest
from fastapi.testclient import TestClient

from vinwatch.api.main import app, get_client
from vinwatch.orders.client import OrderClient, OrderFetchError


class StubClient:
    def __init__(self, payload=None, error=None):
        self.payload = payload
        self.error = error

    async def fetch_order(self):
        if self.error:
            raise self.error
        return self.payload

    async def close(self):
        return None


@pytest.fixture()
def client_for():
    def factory(stub):
        app.dependency_overrides[get_client] = lambda: stub
        return TestClient(app)

    yield factory
    app.dependency_overrides.clear()


def test_health():
    r = TestClient(app).get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "OK"}


def test_summary_endpoint(client_for, order_record):
    r = client_for(StubClient({"data": dict(order_record, vehicleVin="LSJA1")})).get("/api/order/summary")
    assert r.status_code == 200
    data = r.json()
    assert data["has_vin"] is True
    assert data["summary"]["vehicle_vin"] == "LSJA1"
    assert data["summary"]["retail_price"] == "¥149,800.00"


def test_summary_endpoint_error(client_for):
    stub = StubClient(error=OrderFetchError("Order request failed 502: bad gateway", status_code=502))
    r = client_for(stub).get("/api/order/summary")
    assert r.status_code == 500
    assert r.json() == {"error": "Order request failed 502: bad gateway"}


def test_page_renders_summary_and_raw_tree(client_for, order_record):
    r = client_for(StubClient({"data": order_record})).get("/", params={"raw": 1})
    assert r.status_code == 200
    assert "订单摘要" in r.text
    assert "O20250314001" in r.text
    assert "完整数据" in r.text
    assert "https://cdn.example.com/car.png" in r.text


def test_page_without_raw_hides_tree(client_for, order_record):
    r = client_for(StubClient(order_record)).get("/")
    assert "完整数据" not in r.text


def test_page_shows_error(client_for):
    r = client_for(StubClient(error=OrderFetchError("Order request failed 500: boom"))).get("/")
    assert r.status_code == 200
    assert "请求接口出错" in r.text
    assert "暂无数据" in r.text


def _unreachable_client(make_settings):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    session = httpx.AsyncClient(transport=httpx.MockTransport(refuse))
    return OrderClient(make_settings(), session=session)


def test_page_shows_transport_error(client_for, make_settings):
    r = client_for(_unreachable_client(make_settings)).get("/")
    assert r.status_code == 200
    assert "请求接口出错：connection refused" in r.text


def test_summary_endpoint_transport_error(client_for, make_settings):
    r = client_for(_unreachable_client(make_settings)).get("/api/order/summary")
    assert r.status_code == 500
    assert r.json() == {"error": "connection refused"}
