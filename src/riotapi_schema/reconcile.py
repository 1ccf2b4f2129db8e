"""DTO reconciler: fills DTOs that pages reference but do not define.

Each missing DTO goes to the first resolver that finds it: the previous
run's schema, then the shared-DTO table, then an empty placeholder. If the
previous schema cannot be loaded, every missing DTO becomes a placeholder
(the shared table is skipped too).

Adopted DTOs are not checked for missing DTOs of their own.
"""

from typing import Any, Callable, Protocol

import click

from riotapi_schema.config import SchemaConfig
from riotapi_schema.errors import PreviousSchemaUnavailable
from riotapi_schema.generator.common import type_from_schema
from riotapi_schema.parser.base import Dto, Endpoint, ParseResult, Property
from riotapi_schema.parser.types import parse_type

PreviousSchemaLoader = Callable[[], dict[str, Any]]


class DtoResolver(Protocol):
    def resolve(self, endpoint: Endpoint, dto_name: str) -> Dto | None: ...


class PreviousSchemaResolver:
    """Adopts non-placeholder DTOs from the previous run's components.schemas."""

    def __init__(self, previous_schema: dict[str, Any]):
        self.schemas = previous_schema["components"]["schemas"]

    def resolve(self, endpoint: Endpoint, dto_name: str) -> Dto | None:
        fragment = self.schemas.get(f"{endpoint.name}.{dto_name}")
        if not isinstance(fragment, dict):
            return None
        if not fragment.get("properties"):
            click.echo("  Not using previous commit version, is placeholder.")
            return None
        try:
            dto = dto_from_schema(dto_name, fragment)
        except ValueError as e:
            click.echo(f"  Not using previous commit version, malformed: {e}", err=True)
            return None
        click.echo("  Using previous commit version.")
        return dto


class SharedDtoResolver:
    """Borrows a same-named DTO from the endpoints configured as fallbacks."""

    def __init__(self, endpoints_by_name: dict[str, Endpoint], config: SchemaConfig):
        self.endpoints_by_name = endpoints_by_name
        self.config = config

    def resolve(self, endpoint: Endpoint, dto_name: str) -> Dto | None:
        for other_name in self.config.fallback_endpoints(endpoint.name):
            other = self.endpoints_by_name.get(other_name)
            if other is None:
                click.echo(f"  Endpoint alt not found: {other_name}.")
                continue
            other_dto = other.dtos.get(dto_name)
            if other_dto is None:
                continue
            click.echo(f"  Using DTO from {other_name}.")
            return other_dto.model_copy(deep=True)
        return None


def reconcile(results: list[ParseResult], load_previous: PreviousSchemaLoader, config: SchemaConfig) -> list[str]:
    """Resolve every missing DTO in place.

    Returns the full names ("endpoint.Dto") of all DTOs that needed a fallback,
    in processing order. ``load_previous`` is only called if something is missing.
    """
    pending = [(result.endpoint, missing) for result in results for missing in result.list_missing_dtos()]
    if not pending:
        return []

    click.echo()
    endpoints_by_name = {result.endpoint.name: result.endpoint for result in results}
    resolvers: list[DtoResolver] = []
    try:
        previous_schema = load_previous()
    except PreviousSchemaUnavailable as e:
        click.echo(f"FAILED to get previous commit. {e}", err=True)
    else:
        resolvers = [PreviousSchemaResolver(previous_schema), SharedDtoResolver(endpoints_by_name, config)]

    report = []
    for endpoint, missing in pending:
        click.echo(f"Missing DTO: {missing.full_name}.")
        report.append(missing.full_name)

        dto = _resolve_first(resolvers, endpoint, missing.dto_name)
        if dto is None:
            click.echo(f"  FAILED to find dto for {missing.full_name}.")
            endpoint.add_placeholder_dto(missing.dto_name)
        else:
            endpoint.add_dto(dto)

    for result in results:
        result.missing_dtos.clear()
    return report


def _resolve_first(resolvers: list[DtoResolver], endpoint: Endpoint, dto_name: str) -> Dto | None:
    for resolver in resolvers:
        dto = resolver.resolve(endpoint, dto_name)
        if dto is not None:
            return dto
    return None


def dto_from_schema(name: str, fragment: dict[str, Any]) -> Dto:
    """Convert a rendered component schema back into a Dto.

    Raises ValueError if the fragment is not a component schema this tool
    could have written: ``properties`` must map names to schema objects and
    every recovered type must parse.
    """
    raw_properties = fragment.get("properties")
    if not isinstance(raw_properties, dict):
        raise ValueError(f"properties of {name} is not a mapping")

    properties = {}
    for prop_name, prop in raw_properties.items():
        if not isinstance(prop, dict):
            raise ValueError(f"Property {name}.{prop_name} is not a schema object")
        try:
            prop_type = type_from_schema(prop)
        except (AttributeError, TypeError, KeyError, IndexError) as e:
            raise ValueError(f"Cannot read type of {name}.{prop_name}: {e}") from e
        if not isinstance(prop_type, str):
            raise ValueError(f"Type of {name}.{prop_name} is not a string")
        parse_type(prop_type)
        properties[prop_name] = Property(
            name=prop_name,
            prop_type=prop_type,
            description=prop.get("description", ""),
        )
    return Dto(name=name, description=fragment.get("description", ""), properties=properties)
