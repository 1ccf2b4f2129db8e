"""CLI entry point for riotapi-schema."""

import asyncio
import json
from functools import partial
from pathlib import Path

import click

from riotapi_schema.config import load_config
from riotapi_schema.errors import ParseError, SchemaScrapeError
from riotapi_schema.parser.endpoint import parse_endpoint
from riotapi_schema.pipeline import BASE_URL, generate
from riotapi_schema.previous import DEFAULT_GIT_REF, load_from_file, load_from_git


def _read_markup(page_path: Path) -> str:
    """Read a saved page: raw HTML, or an api-details JSON response carrying it."""
    text = page_path.read_text(encoding="utf-8")
    if text.lstrip().startswith("{"):
        try:
            return json.loads(text)["html"]
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            raise click.ClickException(f"{page_path} is not an api-details response: {e}") from e
    return text


@click.group()
def main():
    """riotapi-schema: generate OpenAPI/Swagger specs from the Riot API documentation."""
    pass


@main.command(name="generate")
@click.option("-o", "--output", default="out", envvar="RIOTAPI_OUTPUT", show_default=True, type=click.Path(file_okay=False, path_type=Path), help="Output directory for spec files.")
@click.option("--base-url", default=BASE_URL, envvar="RIOTAPI_BASE_URL", show_default=True, help="Developer portal base URL.")
@click.option("--previous-ref", default=DEFAULT_GIT_REF, show_default=True, help="git object holding the previous run's OpenAPI JSON.")
@click.option("--previous-file", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Read the previous OpenAPI JSON from a file instead of git.")
@click.option("--shared-dtos", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML table of endpoints to borrow missing DTOs from.")
@click.option("--overrides", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML table of schema overrides.")
@click.option("--swagger-ui", default=None, type=click.Path(exists=True, file_okay=False, path_type=Path), help="swagger-ui dist folder to copy into the output.")
@click.option("--strict", is_flag=True, help="Abort if any endpoint page fails to fetch or parse.")
def generate_cmd(output: Path, base_url: str, previous_ref: str, previous_file: Path | None, shared_dtos: Path | None, overrides: Path | None, swagger_ui: Path | None, strict: bool):
    """Scrape the docs and write OpenAPI 3.0.0 / Swagger 2.0 specs."""
    try:
        config = load_config(shared_dtos, overrides)
    except SchemaScrapeError as e:
        raise click.ClickException(str(e)) from e

    if previous_file is not None:
        load_previous = partial(load_from_file, previous_file)
    else:
        load_previous = partial(load_from_git, previous_ref)

    click.echo(f"Scraping {base_url}...")
    try:
        result = asyncio.run(generate(base_url, output, load_previous, config, swagger_ui=swagger_ui, strict=strict))
    except SchemaScrapeError as e:
        raise click.ClickException(str(e)) from e

    if result.failures:
        click.echo(f"Skipped {len(result.failures)} endpoint(s): {', '.join(sorted(result.failures))}")
    if result.missing_dtos:
        click.echo(f"{len(result.missing_dtos)} DTO(s) needed fallback resolution.")
    click.echo(f"Done! Generated {len(result.files)} files for {result.endpoints} endpoints in {output}")


@main.command()
@click.argument("page_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--description", default="", help="Endpoint description (normally taken from the index page).")
@click.option("-o", "--output", default=None, type=click.Path(dir_okay=False, path_type=Path), help="Write the parsed model here instead of stdout.")
def parse(page_path: Path, description: str, output: Path | None):
    """Parse a saved endpoint page and print the extracted model as JSON."""
    try:
        result = parse_endpoint(_read_markup(page_path), description)
    except ParseError as e:
        raise click.ClickException(str(e)) from e

    text = result.model_dump_json(indent=2)
    if output is None:
        click.echo(text)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    click.echo(f"Endpoint {result.endpoint.name}: {len(result.endpoint.methods)} methods, {len(result.missing_dtos)} missing DTOs.")
    click.echo(f"Saved to {output}")
