"""Endpoint documentation page parser.

Builds an Endpoint (methods, parameters, responses, DTOs) from one detail
page. DTOs referenced on the page but not defined there are returned as
missing instead of being given placeholders.
"""

import re

from bs4 import Tag

from riotapi_schema.errors import ParseError
from riotapi_schema.parser.base import Dto, Endpoint, Method, Param, ParseResult, Property
from riotapi_schema.parser.markup import find_in, make_soup, section, table_rows, text_of
from riotapi_schema.parser.types import parse_type

RESOURCE_PREFIX = "resource_"

PARAM_SECTIONS = {
    "path parameters": "path",
    "query parameters": "query",
    "header parameters": "header",
}

_RETURN_VALUE = re.compile(r"Return value:\s*(.+)", re.IGNORECASE)
_BODY_PREFIX = re.compile(r"^(?:type|body)\s*:\s*", re.IGNORECASE)


def parse_endpoint(markup: str, description: str) -> ParseResult:
    """Parse an endpoint detail page.

    Raises ParseError when the resource element, its operations, or an
    operation's method/path/parameter table cannot be located.
    """
    soup = make_soup(markup)

    resource = soup.find("li", id=re.compile(f"^{RESOURCE_PREFIX}"))
    if resource is None:
        raise ParseError("No resource element (li#resource_<name>) found")
    name = resource["id"][len(RESOURCE_PREFIX):].strip()
    if not name:
        raise ParseError("Resource element has an empty endpoint name")

    operations = resource.select("li.operation")
    if not operations:
        raise ParseError(f"No operations found for endpoint {name}")

    methods = [_parse_method(op, name) for op in operations]
    endpoint = Endpoint(name=name, description=description, methods=methods, dtos=_parse_dtos(soup, name))

    return ParseResult(endpoint=endpoint, missing_dtos=endpoint.dangling_dtos())


def _parse_method(op: Tag, endpoint_name: str) -> Method:
    verb = text_of(op.select_one(".http_method"), sep="").lower()
    path = text_of(op.select_one(".path"), sep="")
    if not verb or not path:
        raise ParseError(f"Operation in {endpoint_name} has no HTTP method or path")

    op_id = op.get("id") or ""
    if op_id.startswith(endpoint_name + "_"):
        op_id = op_id[len(endpoint_name) + 1:]
    operation_id = f"{endpoint_name}.{op_id}" if op_id else f"{verb} {path}"

    method = Method(
        verb=verb,
        path=path,
        operation_id=operation_id,
        summary=text_of(op.select_one(".heading .options")),
        platforms_available=_parse_platforms(op),
    )

    for heading in op.find_all("h4"):
        title = text_of(heading).lower()
        elements = section(heading)

        if title in PARAM_SECTIONS:
            table = find_in(elements, "table")
            if table is None:
                raise ParseError(f"{text_of(heading)} of {operation_id} has no table")
            method.parameters.extend(_parse_params(table, PARAM_SECTIONS[title], operation_id))
        elif title == "implementation notes":
            method.description = " ".join(text_of(el) for el in elements).strip()
        elif title == "request body":
            span = find_in(elements, "span")
            if span is not None:
                method.request_body = _checked_type(_BODY_PREFIX.sub("", text_of(span, sep="")), operation_id)
        elif title == "response classes":
            method.return_type = _parse_return_type(elements, operation_id)
        elif title == "response errors":
            table = find_in(elements, "table")
            if table is not None:
                method.error_responses = _parse_errors(table)

    return method


def _parse_params(table: Tag, location: str, operation_id: str) -> list[Param]:
    params = []
    for row in table_rows(table):
        cell = row.get("name")
        name = text_of(cell, sep="")
        if not name:
            continue
        starred = name.endswith("*")
        name = name.rstrip("*").strip()
        required = (
            location == "path"
            or starred
            or "required" in cell.get("class", [])
            or cell.find(class_="required") is not None
        )
        params.append(
            Param(
                name=name,
                location=location,
                required=required,
                param_type=_checked_type(text_of(row.get("type"), sep="") or "string", operation_id),
                description=text_of(row.get("description")),
            )
        )
    return params


def _parse_return_type(elements: list[Tag], operation_id: str) -> str | None:
    for el in elements:
        node = el.find(string=_RETURN_VALUE)
        holder = node.parent if node is not None else el
        match = _RETURN_VALUE.search(text_of(holder, sep=""))
        if match:
            return _checked_type(match.group(1).splitlines()[0], operation_id)
    return None


def _parse_errors(table: Tag) -> dict[str, str]:
    errors = {}
    for row in table_rows(table, positional=("code", "description")):
        code = text_of(row.get("code"))
        if code:
            errors[code] = text_of(row.get("description"))
    return errors


def _parse_platforms(op: Tag) -> list[str]:
    platforms: list[str] = []
    for option in op.select("select option"):
        value = (option.get("value") or text_of(option)).strip().lower()
        if value and value not in platforms:
            platforms.append(value)
    return platforms


def _parse_dtos(soup: Tag, endpoint_name: str) -> dict[str, Dto]:
    dtos: dict[str, Dto] = {}
    for heading in soup.find_all("h5"):
        name, _, description = text_of(heading).partition(" - ")
        name = name.strip()
        if not name or name in dtos:
            continue
        table = find_in(section(heading, stop=("h4",)), "table")
        if table is None:
            continue

        properties = {}
        for row in table_rows(table):
            prop_name = text_of(row.get("name"), sep="")
            prop_type = text_of(row.get("type"), sep="")
            if not prop_name or not prop_type:
                continue
            properties[prop_name] = Property(
                name=prop_name,
                prop_type=_checked_type(prop_type, f"{endpoint_name}.{name}"),
                description=text_of(row.get("description")),
            )
        # An empty definition is treated as no definition.
        if properties:
            dtos[name] = Dto(name=name, description=description.strip(), properties=properties)
    return dtos


def _checked_type(type_str: str, where: str) -> str:
    type_str = type_str.strip()
    try:
        parse_type(type_str)
    except ValueError as e:
        raise ParseError(f"Malformed type {type_str!r} in {where}: {e}") from e
    return type_str
