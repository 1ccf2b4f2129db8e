"""Loads the schema generated by a previous run.

The default source is the published OpenAPI document on the gh-pages branch,
read through ``git show``; a local file can be used instead.
"""

import json
import subprocess
from pathlib import Path
from typing import Any

from riotapi_schema.errors import PreviousSchemaUnavailable

DEFAULT_GIT_REF = "origin/gh-pages:openapi-3.0.0.min.json"


def load_from_git(ref: str = DEFAULT_GIT_REF, cwd: Path | None = None) -> dict[str, Any]:
    """Read a previous schema from git. Raises PreviousSchemaUnavailable."""
    try:
        result = subprocess.run(
            ["git", "--no-pager", "show", ref],
            capture_output=True,
            text=True,
            cwd=cwd,
        )
    except OSError as e:
        raise PreviousSchemaUnavailable(f"Could not run git: {e}") from e
    if result.returncode != 0:
        raise PreviousSchemaUnavailable(f"git show {ref} failed: {result.stderr.strip()}")
    return parse_schema(result.stdout, ref)


def load_from_file(path: Path) -> dict[str, Any]:
    """Read a previous schema from a local JSON file. Raises PreviousSchemaUnavailable."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise PreviousSchemaUnavailable(f"Cannot read {path}: {e}") from e
    return parse_schema(text, str(path))


def parse_schema(text: str, source: str) -> dict[str, Any]:
    """Parse and shape-check a previous schema: ``{components: {schemas: {...}}}``."""
    try:
        schema = json.loads(text)
    except json.JSONDecodeError as e:
        raise PreviousSchemaUnavailable(f"Malformed JSON in {source}: {e}") from e

    components = schema.get("components") if isinstance(schema, dict) else None
    schemas = components.get("schemas") if isinstance(components, dict) else None
    if not isinstance(schemas, dict):
        raise PreviousSchemaUnavailable(f"{source} has no components.schemas mapping")
    return schema
