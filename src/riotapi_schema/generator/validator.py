"""Validates rendered spec documents and their serialized files."""

import json
from typing import Any

import yaml


def validate_refs(spec: dict[str, Any]) -> dict[str, str]:
    """Find local $refs that do not resolve inside the document.

    Returns dict of {location: error_message}, locations as JSON pointers.
    """
    errors: dict[str, str] = {}
    _walk(spec, spec, "#", errors)
    return errors


def _walk(node: Any, spec: dict[str, Any], location: str, errors: dict[str, str]) -> None:
    if isinstance(node, dict):
        ref = node.get("$ref")
        if isinstance(ref, str) and not _resolves(spec, ref):
            errors[location] = f"Dangling $ref: {ref}"
        for key, value in node.items():
            _walk(value, spec, f"{location}/{_escape(str(key))}", errors)
    elif isinstance(node, list):
        for i, value in enumerate(node):
            _walk(value, spec, f"{location}/{i}", errors)


def _resolves(spec: dict[str, Any], ref: str) -> bool:
    if not ref.startswith("#/"):
        return True
    node: Any = spec
    for part in ref[2:].split("/"):
        part = part.replace("~1", "/").replace("~0", "~")
        if not isinstance(node, dict) or part not in node:
            return False
        node = node[part]
    return True


def _escape(key: str) -> str:
    return key.replace("~", "~0").replace("/", "~1")


def validate_json(files: dict[str, str]) -> dict[str, str]:
    """Check JSON files for format errors.

    Returns dict of {filename: error_message} for files with errors.
    """
    errors = {}
    for filename, content in files.items():
        if not filename.endswith(".json"):
            continue
        try:
            json.loads(content)
        except json.JSONDecodeError as e:
            errors[filename] = f"JSONDecodeError: {e}"
    return errors


def validate_yaml(files: dict[str, str]) -> dict[str, str]:
    """Re-load the emitted ``.yml`` / ``.min.yml`` spec texts.

    A spec document must load back with the safe loader as a single mapping.
    """
    errors = {}
    for filename, content in files.items():
        if not filename.endswith(".yml"):
            continue
        try:
            document = yaml.safe_load(content)
        except yaml.YAMLError as e:
            errors[filename] = f"YAMLError: {e}"
            continue
        if not isinstance(document, dict):
            errors[filename] = f"Expected a mapping, got {type(document).__name__}"
    return errors


def validate_files(files: dict[str, str]) -> dict[str, str]:
    """Run all format validations on serialized files."""
    errors = {}
    errors.update(validate_json(files))
    errors.update(validate_yaml(files))
    return errors
