"""Swagger 2.0 renderer."""

from typing import Any

from riotapi_schema.generator.common import (
    DEFAULT_PLATFORM,
    SECURITY_SCHEME,
    SERVER_HOST,
    RenderData,
    build_info,
    build_tags,
    component_schemas,
    param_schema,
    schema_for_type,
)
from riotapi_schema.parser.base import Endpoint, Method, Param

REF_BASE = "#/definitions/"


class SwaggerRenderer:
    """Shapes the aggregated endpoints into a Swagger 2.0 document.

    Swagger 2.0 has no server variables, so the host is the first region and
    the full region list goes into ``x-platforms``.
    """

    name = "swaggerspec-2.0"

    def render(self, data: RenderData) -> dict[str, Any]:
        paths: dict[str, dict[str, Any]] = {}
        for endpoint in data.endpoints:
            for method in endpoint.methods:
                paths.setdefault(method.path, {})[method.verb] = self._operation(endpoint, method)

        platform = data.regions[0] if data.regions else DEFAULT_PLATFORM
        return {
            "swagger": "2.0",
            "info": build_info(data),
            "host": SERVER_HOST.format(platform=platform),
            "basePath": "/",
            "schemes": ["https"],
            "consumes": ["application/json"],
            "produces": ["application/json"],
            "x-platforms": list(data.regions),
            "paths": paths,
            "definitions": component_schemas(data, REF_BASE),
            "securityDefinitions": {"api_key": dict(SECURITY_SCHEME)},
            "security": [{"api_key": []}],
            "tags": build_tags(data),
        }

    def _operation(self, endpoint: Endpoint, method: Method) -> dict[str, Any]:
        operation: dict[str, Any] = {"tags": [endpoint.name]}
        if method.summary:
            operation["summary"] = method.summary
        if method.description:
            operation["description"] = method.description
        operation["operationId"] = method.operation_id
        parameters = [self._parameter(endpoint, p) for p in method.parameters]
        if method.request_body:
            parameters.append(
                {
                    "name": "body",
                    "in": "body",
                    "required": True,
                    "schema": schema_for_type(method.request_body, endpoint.name, REF_BASE),
                }
            )
        operation["parameters"] = parameters
        operation["responses"] = self._responses(endpoint, method)
        operation["x-endpoint"] = endpoint.name
        operation["x-platforms-available"] = list(method.platforms_available)
        return operation

    def _parameter(self, endpoint: Endpoint, param: Param) -> dict[str, Any]:
        schema = _inline_schema(param_schema(param, endpoint.name, REF_BASE))
        schema["x-type"] = param.param_type
        parameter = {
            "name": param.name,
            "in": param.location,
            "required": param.required,
            "description": param.description,
            **schema,
        }
        if schema.get("type") == "array":
            parameter["collectionFormat"] = "multi"
        return parameter

    def _responses(self, endpoint: Endpoint, method: Method) -> dict[str, Any]:
        success: dict[str, Any] = {"description": "Success"}
        if method.return_type:
            schema = schema_for_type(method.return_type, endpoint.name, REF_BASE)
            if schema:
                success["schema"] = schema
        responses = {"200": success}
        for code, reason in method.error_responses.items():
            responses[code] = {"description": reason or code}
        return responses


def _inline_schema(schema: dict[str, Any]) -> dict[str, Any]:
    """Non-body parameters carry their type inline: no $ref or map, at any depth."""
    if "$ref" in schema or "additionalProperties" in schema:
        return {"type": "string"}
    if schema.get("type") == "array":
        return {**schema, "items": _inline_schema(schema["items"])}
    return schema
