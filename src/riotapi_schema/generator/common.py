"""Helpers shared by the OpenAPI 3.0.0 and Swagger 2.0 renderers."""

import copy
from typing import Any

from pydantic import BaseModel

from riotapi_schema.parser.base import Dto, Endpoint, Param
from riotapi_schema.parser.types import TypeRef, parse_type

PRIMITIVE_SCHEMAS = {
    "string": {"type": "string"},
    "int": {"type": "integer", "format": "int32"},
    "integer": {"type": "integer", "format": "int32"},
    "long": {"type": "integer", "format": "int64"},
    "float": {"type": "number", "format": "float"},
    "double": {"type": "number", "format": "double"},
    "boolean": {"type": "boolean"},
    "bool": {"type": "boolean"},
    "object": {"type": "object"},
    "void": {},
}

SPEC_FILE_SUFFIXES = (".json", ".min.json", ".yml", ".min.yml")

SECURITY_SCHEME = {
    "type": "apiKey",
    "description": "Riot API key, sent in the X-Riot-Token header.",
    "name": "X-Riot-Token",
    "in": "header",
}

SERVER_HOST = "{platform}.api.riotgames.com"

DEFAULT_PLATFORM = "na1"

DESCRIPTION_TEMPLATE = """
OpenAPI/Swagger version of the [Riot API](https://developer.riotgames.com/). Automatically generated daily.
## Download OpenAPI Spec File
The following versions of the Riot API spec file are available:
{files}
## Automatically Generated
Rebuilt daily from the developer portal documentation.
***
"""


class RenderData(BaseModel):
    """Aggregated model consumed by the renderers."""

    endpoints: list[Endpoint]
    regions: list[str]
    schema_overrides: dict[str, dict[str, Any]] = {}
    description: str = ""
    version: str = ""


def collect_regions(endpoints: list[Endpoint]) -> list[str]:
    """Every platform code of every method, first-seen order, no duplicates."""
    regions: list[str] = []
    for endpoint in endpoints:
        for method in endpoint.methods:
            for region in method.platforms_available:
                if region not in regions:
                    regions.append(region)
    return regions


def spec_file_names(spec_names: list[str]) -> list[str]:
    return [name + suffix for name in spec_names for suffix in SPEC_FILE_SUFFIXES]


def build_description(spec_names: list[str]) -> str:
    files = "\n".join(
        f"- `{n}` ([view file](../{n}), [ui select](?url=../{n}))" for n in spec_file_names(spec_names)
    )
    return DESCRIPTION_TEMPLATE.format(files=files)


def schema_for_type(type_str: str, endpoint_name: str, ref_base: str) -> dict[str, Any]:
    """Convert a doc type string into a schema; DTO names become refs in the endpoint's namespace."""
    return _schema_for_node(parse_type(type_str), endpoint_name, ref_base)


def _schema_for_node(node: TypeRef, endpoint_name: str, ref_base: str) -> dict[str, Any]:
    if node.kind == "primitive":
        return dict(PRIMITIVE_SCHEMAS[node.name])
    if node.kind == "dto":
        return {"$ref": f"{ref_base}{endpoint_name}.{node.name}"}
    if node.kind in ("list", "set"):
        schema = {"type": "array", "items": _schema_for_node(node.args[0], endpoint_name, ref_base)}
        if node.kind == "set":
            schema["uniqueItems"] = True
        return schema
    key, value = node.args
    return {
        "type": "object",
        "additionalProperties": _schema_for_node(value, endpoint_name, ref_base),
        "x-key": _type_name(key),
    }


def _type_name(node: TypeRef) -> str:
    if not node.args:
        return node.name
    return f"{node.name}[{', '.join(_type_name(a) for a in node.args)}]"


def type_from_schema(fragment: dict[str, Any]) -> str:
    """Recover a doc type string from a rendered schema fragment.

    Prefers the ``x-type`` extension written by the renderers.
    """
    if "x-type" in fragment:
        return fragment["x-type"]
    if "$ref" in fragment:
        return fragment["$ref"].rsplit("/", 1)[-1].split(".", 1)[-1]
    if fragment.get("allOf"):
        return type_from_schema(fragment["allOf"][0])

    kind = fragment.get("type")
    fmt = fragment.get("format")
    if kind == "array":
        inner = type_from_schema(fragment.get("items", {}))
        return f"Set[{inner}]" if fragment.get("uniqueItems") else f"List[{inner}]"
    if kind == "object" and isinstance(fragment.get("additionalProperties"), dict):
        key = fragment.get("x-key", "string")
        return f"Map[{key}, {type_from_schema(fragment['additionalProperties'])}]"
    if kind == "integer":
        return "long" if fmt == "int64" else "int"
    if kind == "number":
        return "double" if fmt == "double" else "float"
    if kind in ("string", "boolean"):
        return kind
    return "object"


def dto_schema(dto: Dto, endpoint_name: str, ref_base: str) -> dict[str, Any]:
    properties = {}
    for prop in dto.properties.values():
        prop_schema = schema_for_type(prop.prop_type, endpoint_name, ref_base)
        if prop.description:
            # Keys beside $ref are ignored by consumers.
            if "$ref" in prop_schema:
                prop_schema = {"allOf": [prop_schema]}
            prop_schema["description"] = prop.description
        prop_schema["x-type"] = prop.prop_type
        properties[prop.name] = prop_schema

    schema: dict[str, Any] = {"type": "object", "title": dto.name}
    if dto.description:
        schema["description"] = dto.description
    schema["properties"] = properties
    return schema


def param_schema(param: Param, endpoint_name: str, ref_base: str) -> dict[str, Any]:
    schema = schema_for_type(param.param_type, endpoint_name, ref_base)
    schema["x-type"] = param.param_type
    return schema


def component_schemas(data: RenderData, ref_base: str) -> dict[str, dict[str, Any]]:
    """All endpoint DTOs keyed by full name, with overrides merged in."""
    schemas = {}
    for endpoint in data.endpoints:
        for dto in endpoint.dtos.values():
            schemas[dto.full_name(endpoint.name)] = dto_schema(dto, endpoint.name, ref_base)
    for full_name, override in data.schema_overrides.items():
        schemas[full_name] = merge_override(schemas.get(full_name, {}), override)
    return schemas


def merge_override(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge ``override`` into a copy of ``base``; override values win."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_override(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def build_info(data: RenderData) -> dict[str, Any]:
    return {
        "title": "Riot API",
        "description": data.description,
        "termsOfService": "https://developer.riotgames.com/terms",
        "version": data.version,
    }


def build_tags(data: RenderData) -> list[dict[str, str]]:
    return [{"name": e.name, "description": e.description} for e in data.endpoints]
