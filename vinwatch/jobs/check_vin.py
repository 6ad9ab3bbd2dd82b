"""Scheduled order check: fetch, summarize, and notify."""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass

import pendulum
from dotenv import load_dotenv

from vinwatch.config import Settings
from vinwatch.email.render import render_email
from vinwatch.logic.cadence import Decision, decide_with_policy
from vinwatch.logic.normalize import OrderSummary, has_vin, normalize, summary_text, unwrap_payload
from vinwatch.orders.client import OrderClient
from vinwatch.utils.esp import EmailMessage, EmailProvider

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CheckResult:
    summary: OrderSummary
    decision: Decision
    sent: bool


async def run_check(
    settings: Settings,
    *,
    client: OrderClient | None = None,
    provider: EmailProvider | None = None,
    now: pendulum.DateTime | None = None,
) -> CheckResult:
    client = client or OrderClient(settings)
    provider = provider or EmailProvider(settings)
    try:
        payload = await client.fetch_order()
    finally:
        await client.close()

    record = unwrap_payload(payload)
    summary = normalize(record, now=now)
    decision = decide_with_policy(
        has_vin(record),
        settings.run_number,
        settings.cadence_policy(),
        vin=summary.vehicle_vin,
        now=now,
    )

    if not decision.send:
        logger.info(
            "No VIN yet; reminder skipped (index %s, every %s runs)",
            decision.cadence_index,
            settings.cadence_period,
        )
        return CheckResult(summary=summary, decision=decision, sent=False)

    subject, html = render_email(decision.subject, summary)
    message = EmailMessage(to=provider.recipient or "", subject=subject, text=summary_text(summary), html=html)
    sent = await provider.send(message)
    if sent:
        logger.info("Sent notification: %s", subject)
    return CheckResult(summary=summary, decision=decision, sent=sent)


def main() -> None:
    load_dotenv(".env.local")
    load_dotenv()
    settings = Settings()
    logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        asyncio.run(run_check(settings))
    except Exception:
        logger.exception("Order check failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
