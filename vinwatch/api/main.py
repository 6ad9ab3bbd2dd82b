"""FastAPI application for viewing the current order."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from vinwatch.config import Settings
from vinwatch.logic.display import build_kv_tree
from vinwatch.logic.normalize import has_vin, normalize, unwrap_payload
from vinwatch.orders.client import OrderClient, OrderError

logger = logging.getLogger(__name__)

app = FastAPI(title="VIN Watch")
templates = Jinja2Templates(directory=str(Path(__file__).with_name("templates")))


class SummaryResponse(BaseModel):
    has_vin: bool
    summary: dict[str, str]


def get_settings() -> Settings:
    return Settings()


def get_client(settings: Settings = Depends(get_settings)) -> OrderClient:
    return OrderClient(settings)


async def _load_record(client: OrderClient) -> dict[str, Any]:
    try:
        payload = await client.fetch_order()
    finally:
        await client.close()
    return dict(unwrap_payload(payload))


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "OK"}


@app.get("/api/order/summary", response_model=SummaryResponse)
async def order_summary(client: OrderClient = Depends(get_client)):
    try:
        record = await _load_record(client)
    except (OrderError, httpx.HTTPError) as exc:
        logger.warning("Order summary failed: %s", exc)
        return JSONResponse({"error": str(exc) or "请求失败"}, status_code=500)
    return SummaryResponse(has_vin=has_vin(record), summary=normalize(record).as_dict())


@app.get("/", response_class=HTMLResponse)
async def order_page(request: Request, raw: bool = False, client: OrderClient = Depends(get_client)):
    record: dict[str, Any] | None = None
    error: str | None = None
    try:
        record = await _load_record(client)
    except (OrderError, httpx.HTTPError) as exc:
        error = str(exc) or "请求失败"
    context = {
        "error": error,
        "image_url": record.get("imgUrl") if record else None,
        "rows": normalize(record).items() if record else [],
        "tree": build_kv_tree(record, "完整数据") if record and raw else None,
    }
    return templates.TemplateResponse(request, "order.html", context)
