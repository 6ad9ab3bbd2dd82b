"""Order record normalization."""

from __future__ import annotations

import json
import math
import re
from dataclasses import astuple, dataclass, fields
from typing import Any, Mapping

import pendulum

from vinwatch.utils.dates import format_request_time

PLACEHOLDER = "--"
CURRENCY_GLYPH = "¥"
DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
RADIX_RE = re.compile(r"^0([xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)$")


@dataclass(frozen=True, slots=True)
class OrderSummary:
    request_time: str
    vehicle_vin: str
    order_no: str
    business_order_no: str
    order_date: str
    pay_date: str
    buyer_name: str
    buyer_tel: str
    buyer_id_no: str
    city_name: str
    dealer_name: str
    vehicle_model: str
    vehicle_version: str
    color_name: str
    retail_price: str
    configuration_full_name: str
    configuration_retail_price: str

    def items(self) -> list[tuple[str, str]]:
        return [(LABELS[f.name], getattr(self, f.name)) for f in fields(self)]

    def as_dict(self) -> dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def comparable(self) -> tuple[str, ...]:
        """Field values without the request timestamp."""
        return astuple(self)[1:]


LABELS = {
    "request_time": "请求时间",
    "vehicle_vin": "VIN",
    "order_no": "订单号",
    "business_order_no": "商业订单号",
    "order_date": "下单时间",
    "pay_date": "支付时间",
    "buyer_name": "姓名",
    "buyer_tel": "手机号",
    "buyer_id_no": "证件号",
    "city_name": "所在城市",
    "dealer_name": "购车门店",
    "vehicle_model": "车型",
    "vehicle_version": "版本/车款",
    "color_name": "颜色",
    "retail_price": "统一零售价",
    "configuration_full_name": "配置全称",
    "configuration_retail_price": "配置零售价",
}


def pick(*candidates: Any) -> Any:
    """Return the first candidate that is neither None nor an empty string."""
    for value in candidates:
        if value is not None and value != "":
            return value
    return PLACEHOLDER


def format_currency(amount: Any) -> str:
    """Format ``amount`` as ``¥1,234.50``.

    Empty input yields the placeholder; input that does not parse as a number is
    returned unchanged as text so corrupt upstream values stay visible.
    """
    if amount is None or amount == "":
        return PLACEHOLDER
    number = _to_number(amount)
    if number is None or not math.isfinite(number):
        return as_text(amount)
    return f"{CURRENCY_GLYPH}{number:,.2f}"


def _to_number(value: Any) -> float | None:
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        if RADIX_RE.match(text):
            value = int(text, 0)
        elif DECIMAL_RE.match(text):
            value = text
        else:
            return None
    elif isinstance(value, bool):
        value = int(value)
    elif not isinstance(value, (int, float)):
        return None
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        return None


def parse_json_optional(text: Any) -> Any | None:
    """Parse a JSON string, returning None for blank input or invalid JSON."""
    if not text or not isinstance(text, str):
        return None
    try:
        return json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return None


def as_text(value: Any) -> str:
    if value is None:
        return PLACEHOLDER
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def unwrap_payload(payload: Any) -> Mapping[str, Any]:
    """Return the order record, unwrapping a ``data`` envelope when present."""
    if not isinstance(payload, Mapping):
        return {}
    data = payload.get("data")
    if isinstance(data, Mapping) and data:
        return data
    return payload


def has_vin(raw: Mapping[str, Any]) -> bool:
    return bool(_get(raw, "vehicleVin"))


def normalize(raw: Mapping[str, Any], *, now: pendulum.DateTime | None = None) -> OrderSummary:
    if not isinstance(raw, Mapping):
        raw = {}
    sku = _sku_detail(raw.get("skuDetail"))
    material = sku.get("materialConfig")
    if not isinstance(material, Mapping):
        material = {}

    province_city = f"{_get(raw, 'buyerProvinceName') or ''} {_get(raw, 'buyerCityName') or ''}".strip()
    color = f"{_get(raw, 'exteriorColor') or PLACEHOLDER} / {_get(raw, 'interiorColor') or PLACEHOLDER}"

    return OrderSummary(
        request_time=format_request_time(now),
        vehicle_vin=as_text(pick(_get(raw, "vehicleVin"))),
        order_no=_first(raw, "orderNo", "orderSn"),
        business_order_no=_first(raw, "businessOrderNo", "businessOrderSn"),
        order_date=_first(raw, "orderDate", "orderTime"),
        pay_date=_first(raw, "payDate", "payTime"),
        buyer_name=_first(raw, "buyerName", "realName"),
        buyer_tel=_first(raw, "buyerTel", "mobile"),
        buyer_id_no=_first(raw, "buyerIdNo", "idNo"),
        city_name=as_text(pick(province_city, _get(raw, "cityName"))),
        dealer_name=_first(raw, "dealerFullName", "dealerName", "storeName"),
        vehicle_model=_first(raw, "vehicleModel", "carSeriesName"),
        vehicle_version=_first(raw, "vehicleVersion", "carTypeName"),
        color_name=as_text(pick(color, _get(raw, "colorName"))),
        retail_price=format_currency(pick(_get(raw, "retailPrice"), _get(raw, "price"))),
        configuration_full_name=as_text(
            pick(sku.get("configurationFullName"), material.get("fullName"))
        ),
        configuration_retail_price=format_currency(
            pick(sku.get("configurationRetailPrice"), material.get("totalPrice"))
        ),
    )


def summary_text(summary: OrderSummary) -> str:
    return "\n".join(f"{label}: {value}" for label, value in summary.items())


def _get(raw: Mapping[str, Any], key: str) -> Any:
    value = raw.get(key)
    # nested structures are never a display value for a flat field
    if isinstance(value, (Mapping, list)):
        return None
    return value


def _first(raw: Mapping[str, Any], *keys: str) -> str:
    return as_text(pick(*(_get(raw, key) for key in keys)))


def _sku_detail(value: Any) -> Mapping[str, Any]:
    if isinstance(value, str):
        value = parse_json_optional(value)
    if isinstance(value, Mapping):
        return value
    return {}
