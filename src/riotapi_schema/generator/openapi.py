"""OpenAPI 3.0.0 renderer."""

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
from riotapi_schema.parser.base import Endpoint, Method

REF_BASE = "#/components/schemas/"


class OpenApiRenderer:
    """Shapes the aggregated endpoints into an OpenAPI 3.0.0 document."""

    name = "openapi-3.0.0"

    def render(self, data: RenderData) -> dict[str, Any]:
        paths: dict[str, dict[str, Any]] = {}
        for endpoint in data.endpoints:
            for method in endpoint.methods:
                paths.setdefault(method.path, {})[method.verb] = self._operation(endpoint, method)

        return {
            "openapi": "3.0.0",
            "info": build_info(data),
            "servers": [self._server(data.regions)],
            "paths": paths,
            "components": {
                "schemas": component_schemas(data, REF_BASE),
                "securitySchemes": {"api_key": dict(SECURITY_SCHEME)},
            },
            "security": [{"api_key": []}],
            "tags": build_tags(data),
        }

    def _server(self, regions: list[str]) -> dict[str, Any]:
        platform: dict[str, Any] = {"default": regions[0] if regions else DEFAULT_PLATFORM}
        if regions:
            platform["enum"] = list(regions)
        return {"url": f"https://{SERVER_HOST}", "variables": {"platform": platform}}

    def _operation(self, endpoint: Endpoint, method: Method) -> dict[str, Any]:
        operation: dict[str, Any] = {"tags": [endpoint.name]}
        if method.summary:
            operation["summary"] = method.summary
        if method.description:
            operation["description"] = method.description
        operation["operationId"] = method.operation_id
        operation["parameters"] = [
            {
                "name": p.name,
                "in": p.location,
                "required": p.required,
                "description": p.description,
                "schema": param_schema(p, endpoint.name, REF_BASE),
            }
            for p in method.parameters
        ]
        if method.request_body:
            operation["requestBody"] = {
                "required": True,
                "content": {
                    "application/json": {"schema": schema_for_type(method.request_body, endpoint.name, REF_BASE)}
                },
            }
        operation["responses"] = self._responses(endpoint, method)
        operation["x-endpoint"] = endpoint.name
        operation["x-platforms-available"] = list(method.platforms_available)
        return operation

    def _responses(self, endpoint: Endpoint, method: Method) -> dict[str, Any]:
        success: dict[str, Any] = {"description": "Success"}
        if method.return_type:
            schema = schema_for_type(method.return_type, endpoint.name, REF_BASE)
            if schema:
                success["content"] = {"application/json": {"schema": schema}}
        responses = {"200": success}
        for code, reason in method.error_responses.items():
            responses[code] = {"description": reason or code}
        return responses
