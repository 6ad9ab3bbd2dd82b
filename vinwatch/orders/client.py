"""Upstream order API client."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from vinwatch.config import Settings

logger = logging.getLogger(__name__)

BASE_HEADERS = {
    "Accept": "application/json, text/plain, */*",
    "content-type": "application/json",
}


class OrderError(RuntimeError):
    pass


class OrderConfigError(OrderError):
    pass


class OrderFetchError(OrderError):
    def __init__(self, message: str, *, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class OrderClient:
    def __init__(self, settings: Settings, *, session: httpx.AsyncClient | None = None) -> None:
        self.settings = settings
        self._session = session or httpx.AsyncClient(timeout=None)

    async def close(self) -> None:
        await self._session.aclose()

    def headers(self) -> dict[str, str]:
        headers = dict(BASE_HEADERS)
        if self.settings.order_token:
            headers["token"] = self.settings.order_token
        if self.settings.order_brand_code:
            headers["brandCode"] = self.settings.order_brand_code
        if self.settings.order_api_key:
            headers["apikey"] = self.settings.order_api_key
        headers.update(self.settings.extra_headers())
        return headers

    async def fetch_order(self) -> Any:
        url = self.settings.order_url
        if not url:
            raise OrderConfigError("ORDER_URL is not set; cannot fetch order data")
        logger.info("Fetching order data")
        response = await self._session.get(url, headers=self.headers())
        if not response.is_success:
            raise OrderFetchError(
                f"Order request failed {response.status_code}: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )
        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise OrderFetchError(
                "Order response is not JSON",
                status_code=response.status_code,
                body=response.text,
            ) from exc
        if not payload:
            raise OrderFetchError("Order response is empty", status_code=response.status_code, body=response.text)
        return payload
