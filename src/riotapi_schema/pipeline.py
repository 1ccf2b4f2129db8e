"""Full pipeline: fetch index -> fetch + parse endpoints -> reconcile -> render -> write."""

import asyncio
import json
from datetime import date
from pathlib import Path

import click
from pydantic import BaseModel

from riotapi_schema.config import SchemaConfig
from riotapi_schema.errors import ParseError, SchemaScrapeError
from riotapi_schema.fetch import Fetcher
from riotapi_schema.generator.common import RenderData, build_description, collect_regions
from riotapi_schema.generator.openapi import OpenApiRenderer
from riotapi_schema.generator.swagger import SwaggerRenderer
from riotapi_schema.generator.writer import (
    clean_output,
    copy_swagger_ui,
    spec_files,
    write_files,
    write_missing_report,
    write_site_files,
)
from riotapi_schema.parser.base import Endpoint, ParseResult
from riotapi_schema.parser.endpoint import parse_endpoint
from riotapi_schema.parser.index import IndexEntry, parse_index
from riotapi_schema.reconcile import PreviousSchemaLoader, reconcile

BASE_URL = "https://developer.riotgames.com/"

RENDERERS = [OpenApiRenderer(), SwaggerRenderer()]


class CollectResult(BaseModel):
    """Parsed endpoints plus the endpoints that failed, by name."""

    results: list[ParseResult]
    failures: dict[str, str] = {}


class GenerateResult(BaseModel):
    endpoints: int
    missing_dtos: list[str]
    failures: dict[str, str]
    files: list[Path]


def index_url(base_url: str) -> str:
    return base_url.rstrip("/") + "/api-methods/"


def details_url(base_url: str, name: str) -> str:
    return base_url.rstrip("/") + "/api-details/" + name


async def fetch_endpoint(fetcher: Fetcher, base_url: str, entry: IndexEntry) -> ParseResult:
    """Fetch one endpoint's details response and parse the page it carries."""
    text = await fetcher.fetch(details_url(base_url, entry.name))
    try:
        markup = json.loads(text)["html"]
    except (json.JSONDecodeError, KeyError, TypeError) as e:
        raise ParseError(f"Malformed details response for {entry.name}: {e}") from e
    return parse_endpoint(markup, entry.description)


async def collect_endpoints(fetcher: Fetcher, base_url: str, strict: bool = False) -> CollectResult:
    """Fetch and parse every endpoint on the index page concurrently.

    A failing endpoint is recorded and skipped; with ``strict`` the first
    failure is raised once all tasks have finished.
    """
    entries = parse_index(await fetcher.fetch(index_url(base_url)))
    click.echo(f"Found {len(entries)} endpoints.")

    outcomes = await asyncio.gather(
        *(fetch_endpoint(fetcher, base_url, entry) for entry in entries),
        return_exceptions=True,
    )

    results: list[ParseResult] = []
    failures: dict[str, str] = {}
    for entry, outcome in zip(entries, outcomes):
        if isinstance(outcome, SchemaScrapeError):
            if strict:
                raise outcome
            click.echo(f"  Skipping {entry.name}: {outcome}", err=True)
            failures[entry.name] = str(outcome)
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            results.append(outcome)
    return CollectResult(results=results, failures=failures)


def build_render_data(endpoints: list[Endpoint], config: SchemaConfig, version: str | None = None) -> RenderData:
    return RenderData(
        endpoints=endpoints,
        regions=collect_regions(endpoints),
        schema_overrides=dict(config.schema_overrides),
        description=build_description([r.name for r in RENDERERS]),
        version=version or date.today().isoformat(),
    )


def write_output(data: RenderData, missing_dto_names: list[str], output: Path, swagger_ui: Path | None = None) -> list[Path]:
    """Render and serialize every spec, then replace the output folder contents.

    The folder is only cleaned once every spec has rendered.
    """
    files: dict[str, str] = {}
    for renderer in RENDERERS:
        files.update(spec_files(renderer.render(data), renderer.name))

    clean_output(output)
    write_site_files(output)
    if swagger_ui is not None:
        copy_swagger_ui(swagger_ui, output)

    overrides = list(data.schema_overrides)
    if overrides:
        click.echo(f"\nOverriding DTOs: {json.dumps(overrides)}")

    written = write_files(files, output)
    written.append(write_missing_report(missing_dto_names, output))
    return written


async def generate(
    base_url: str,
    output: Path,
    load_previous: PreviousSchemaLoader,
    config: SchemaConfig,
    swagger_ui: Path | None = None,
    strict: bool = False,
    fetcher: Fetcher | None = None,
) -> GenerateResult:
    """Run the whole pipeline. Nothing is written if scraping fails."""
    async with fetcher or Fetcher() as active:
        collected = await collect_endpoints(active, base_url, strict=strict)

    # Reconciliation needs every endpoint parsed first.
    missing = reconcile(collected.results, load_previous, config)

    endpoints = [result.endpoint for result in collected.results]
    data = build_render_data(endpoints, config)
    files = write_output(data, missing, output, swagger_ui)

    return GenerateResult(
        endpoints=len(endpoints),
        missing_dtos=sorted(missing),
        failures=collected.failures,
        files=files,
    )
