from __future__ import annotations

from typing import Any

from jinja2 import Environment, PackageLoader, StrictUndefined

ENVIRONMENT = Environment(
    loader=PackageLoader("colgen", "generator/templates"),
    undefined=StrictUndefined,
    keep_trailing_newline=True,
    trim_blocks=True,
    lstrip_blocks=True,
    autoescape=False,
)


def render_template(name: str, **context: Any) -> str:
    return ENVIRONMENT.get_template(name).render(**context)


def render_block(name: str, **context: Any) -> str:
    return render_template(name, **context).strip("\n")
