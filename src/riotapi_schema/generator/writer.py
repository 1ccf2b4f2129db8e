"""Writes rendered specs and the missing-DTO report to the output folder."""

import json
import shutil
from pathlib import Path
from typing import Any

import click
import yaml

from riotapi_schema.generator.common import SPEC_FILE_SUFFIXES
from riotapi_schema.generator.validator import validate_files, validate_refs

MISSING_REPORT = "missing.json"

SWAGGER_UI_DEFAULT_URL = '"https://petstore.swagger.io/v2/swagger.json"'
SWAGGER_UI_SPEC_URL = "'../' + (document.location.search.slice(1) || 'openapi-3.0.0.min.json')"

SITE_FILES = {
    "_config.yml": "",
    "index.md": "---\n---\n[Link to tool](tool/)\n",
    "hash.txt": "---\n---\n{{ site.github.build_revision }}\n",
}


def clean_output(output: Path) -> None:
    """Create the output folder and remove everything in it except dotfiles."""
    output.mkdir(parents=True, exist_ok=True)
    for path in output.iterdir():
        if path.name.startswith("."):
            continue
        if path.is_dir():
            shutil.rmtree(path)
        else:
            path.unlink()


def copy_swagger_ui(dist: Path, output: Path) -> None:
    """Copy a swagger-ui dist folder to ``output/tool`` and point it at our spec."""
    tool = output / "tool"
    shutil.copytree(dist, tool, dirs_exist_ok=True)

    index = tool / "index.html"
    if index.exists():
        content = index.read_text(encoding="utf-8")
        index.write_text(content.replace(SWAGGER_UI_DEFAULT_URL, SWAGGER_UI_SPEC_URL), encoding="utf-8")


def write_site_files(output: Path) -> list[Path]:
    """Write the GitHub Pages scaffolding published next to the specs."""
    return write_files(SITE_FILES, output)


def serialize(spec: dict[str, Any]) -> dict[str, str]:
    """The four serializations of a spec, keyed by file suffix."""
    texts = {
        ".json": json.dumps(spec, indent=2, ensure_ascii=False),
        ".min.json": json.dumps(spec, separators=(",", ":"), ensure_ascii=False),
        ".yml": yaml.safe_dump(spec, sort_keys=False, allow_unicode=True, default_flow_style=False, width=float("inf")),
        ".min.yml": yaml.safe_dump(spec, sort_keys=False, allow_unicode=True, default_flow_style=True, width=float("inf")),
    }
    return {suffix: texts[suffix] for suffix in SPEC_FILE_SUFFIXES}


def spec_files(spec: dict[str, Any], name: str) -> dict[str, str]:
    """Serialize one spec into ``{filename: text}``, reporting problems on stderr."""
    for location, error in validate_refs(spec).items():
        click.echo(f"  {name}: {location}: {error}", err=True)

    files = {name + suffix: text for suffix, text in serialize(spec).items()}
    for filename, error in validate_files(files).items():
        click.echo(f"  {filename}: {error}", err=True)
    return files


def write_files(files: dict[str, str], output: Path) -> list[Path]:
    written = []
    for filename, text in files.items():
        path = output / filename
        path.write_text(text, encoding="utf-8")
        written.append(path)
    return written


def write_missing_report(missing_dto_names: list[str], output: Path) -> Path:
    """Write the sorted list of DTOs that needed fallback resolution."""
    path = output / MISSING_REPORT
    path.write_text(json.dumps(sorted(missing_dto_names), indent=2), encoding="utf-8")
    return path
