"""Email rendering utilities."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from vinwatch.logic.normalize import OrderSummary

TEMPLATE_DIR = Path(__file__).parent
ENV = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(enabled_extensions=("html",)),
)


def render_email(subject: str, summary: OrderSummary) -> tuple[str, str]:
    template = ENV.get_template("notification.html")
    html = template.render(subject=subject, rows=summary.items())
    return subject, html
