import pendulum
import pytest

from vinwatch.config import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "ORDER_URL", "ORDER_TOKEN", "ORDER_BRAND_CODE", "ORDER_API_KEY", "ORDER_HEADERS_JSON",
        "ESP_PROVIDER", "SMTP_HOST", "SMTP_PORT", "SMTP_USER", "SMTP_PASS", "MAIL_FROM", "MAIL_TO",
        "RESEND_API_KEY", "RUN_NUMBER", "GITHUB_RUN_NUMBER", "CADENCE_PERIOD", "CADENCE_FALLBACK",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def make_settings():
    def factory(**overrides):
        values = {
            "order_url": "https://orders.example.com/api/order/detail",
            "esp_provider": "log",
            "mail_to": "owner@example.com",
        }
        values.update(overrides)
        return Settings(**values)

    return factory


@pytest.fixture()
def clock():
    def at(hour: int, minute: int = 0) -> pendulum.DateTime:
        return pendulum.datetime(2025, 3, 14, hour, minute, 5, tz="Asia/Shanghai")

    return at


@pytest.fixture()
def order_record():
    return {
        "orderId": 881,
        "orderNo": "O20250314001",
        "businessOrderNo": "B20250314001",
        "orderDate": "2025-03-01 10:22:00",
        "payDate": "2025-03-01 10:25:41",
        "buyerName": "张三",
        "buyerTel": "138****0000",
        "buyerIdNo": "3101**********1234",
        "buyerProvinceName": "上海市",
        "buyerCityName": "上海市",
        "dealerFullName": "上海浦东体验中心",
        "vehicleModel": "MG4",
        "vehicleVersion": "长续航版",
        "exteriorColor": "墨玉黑",
        "interiorColor": "曜石黑",
        "retailPrice": 149800,
        "vehicleVin": None,
        "imgUrl": "https://cdn.example.com/car.png",
        "skuDetail": '{"materialConfig": {"fullName": "MG4 长续航 旗舰版", "totalPrice": 152800}}',
    }
