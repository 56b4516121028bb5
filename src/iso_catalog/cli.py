import json
import logging
from pathlib import Path
from typing import Any, NoReturn

import click
import yaml

from .config import CatalogSettings, load_settings, normalize_api_base_url
from .csv_export import export_catalog_csv
from .models import IsoRecord, ShareRecord
from .normalization import apply_share_names, normalize_iso_response, normalize_share_listing
from .report import render_catalog_html
from .search import filter_records

logger = logging.getLogger("iso_catalog")

OUTPUT_FORMATS = ["json", "yaml", "csv", "html"]


def _read_text(path: str) -> str:
    with open(path, encoding="utf-8", errors="replace") as f:
        return f.read()


def _fail(message: str) -> NoReturn:
    click.echo(f"ERROR: {message}", err=True)
    raise SystemExit(1)


def _settings_or_exit(config_file: str | None) -> CatalogSettings:
    try:
        return load_settings(config_file)
    except (OSError, ValueError) as exc:
        _fail(str(exc))


def _records_payload(records: list[IsoRecord]) -> list[dict[str, Any]]:
    return [r.model_dump(mode="json", by_alias=True, exclude_none=True) for r in records]


def _shares_payload(shares: list[ShareRecord]) -> list[dict[str, Any]]:
    return [s.model_dump(mode="json", by_alias=True, exclude_none=True) for s in shares]


def _emit(content: str, output: str | None) -> None:
    if output is None:
        click.echo(content)
        return
    dest = Path(output)
    dest.parent.mkdir(parents=True, exist_ok=True)
    with open(dest, "w", encoding="utf-8") as f:
        f.write(content)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug-level logging.")
def main(verbose: bool) -> None:
    """ISO Catalog: normalize HyperHive ISO and share listings."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,
    )


# ---------------------------------------------------------------------------
# normalize command
# ---------------------------------------------------------------------------

@main.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--shares", "shares_file", type=click.Path(exists=True, dir_okay=False), help="Saved /nfs/list response used to label ISO locations.")
@click.option("--api-base", "api_base", help="API base URL for relative download links (overrides config).")
@click.option("--config", "-c", "config_file", type=click.Path(exists=True, dir_okay=False), help="Path to a YAML settings file.")
@click.option("--query", "-q", help="Only keep records matching this text.")
@click.option("--format", "-f", "output_format", type=click.Choice(OUTPUT_FORMATS), help="Output format (default from config, else json).")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write to this file instead of stdout.")
def normalize(
    input_file: str,
    shares_file: str | None,
    api_base: str | None,
    config_file: str | None,
    query: str | None,
    output_format: str | None,
    output: str | None,
) -> None:
    """Normalize a saved ISO listing response (INPUT_FILE) into canonical records."""
    settings = _settings_or_exit(config_file)

    base = settings.api_base_url
    if api_base is not None:
        base = normalize_api_base_url(api_base)
        if base is None:
            _fail(f"--api-base is not a usable URL: {api_base!r}")

    fmt = output_format or settings.output_format
    if fmt == "csv" and output is None:
        _fail("--format csv requires --output")

    records = normalize_iso_response(_read_text(input_file), api_base=base)
    logger.info("Normalized %d record(s) from %s", len(records), input_file)

    if shares_file:
        shares = normalize_share_listing(_read_text(shares_file))
        logger.info("Loaded %d share(s) from %s", len(shares), shares_file)
        records = apply_share_names(records, shares)

    records = filter_records(records, query)

    if fmt == "csv":
        written = export_catalog_csv(records, output)
        click.echo(f"Wrote {written} record(s) to {output}")
        return
    if fmt == "html":
        content = render_catalog_html(records, query=query)
    elif fmt == "yaml":
        content = yaml.safe_dump(_records_payload(records), sort_keys=False, allow_unicode=True)
    else:
        content = json.dumps(_records_payload(records), indent=2, ensure_ascii=False)

    _emit(content, output)
    if output is not None:
        click.echo(f"Wrote {len(records)} record(s) to {output}")


# ---------------------------------------------------------------------------
# shares command
# ---------------------------------------------------------------------------

@main.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write to this file instead of stdout.")
def shares(input_file: str, output: str | None) -> None:
    """Normalize a saved mount/share listing response (INPUT_FILE)."""
    records = normalize_share_listing(_read_text(input_file))
    _emit(json.dumps(_shares_payload(records), indent=2, ensure_ascii=False), output)


if __name__ == "__main__":
    main()
