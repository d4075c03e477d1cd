# backend/reports_studio/services/templating.py
from pathlib import Path
from typing import Any, Optional

from jinja2 import ChainableUndefined, Environment, FileSystemLoader, Undefined, select_autoescape

from reports_studio.core.money import format_money

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
STATIC_DIR = Path(__file__).resolve().parent.parent / "static"


def dash(value: Any) -> Any:
    """Placeholder for absent DTO fields."""
    if value is None or isinstance(value, Undefined) or value == "":
        return "-"
    return value


def money(value: Any, currency: Optional[str] = "THB") -> str:
    if value is None or isinstance(value, Undefined):
        return "-"
    if isinstance(currency, Undefined):
        currency = None
    return format_money(value, currency or "THB")


def qty(value: Any) -> str:
    if value is None or isinstance(value, Undefined):
        return "-"
    return format(value, "g")


jinja_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(['html', 'xml']),
    undefined=ChainableUndefined,
    extensions=["jinja2.ext.do"],
    trim_blocks=True,
    lstrip_blocks=True,
)
jinja_env.filters["dash"] = dash
jinja_env.filters["money"] = money
jinja_env.filters["qty"] = qty
