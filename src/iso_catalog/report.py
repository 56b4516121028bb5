"""HTML rendering of the ISO catalog."""

from __future__ import annotations

import functools
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from iso_catalog.models import IsoRecord


@functools.lru_cache(maxsize=1)
def get_jinja_env() -> Environment:
    """Return a cached Jinja2 Environment for the package templates."""
    template_dir = Path(__file__).parent / "templates"
    return Environment(
        loader=FileSystemLoader(template_dir),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_catalog_html(
    records: Sequence[IsoRecord],
    title: str = "ISO Catalog",
    query: str | None = None,
) -> str:
    tpl = get_jinja_env().get_template("catalog_report.html.j2")
    return tpl.render(
        title=title,
        records=list(records),
        query=query or "",
        generated_at=datetime.now(tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC"),
    )
