"""Unified data models for scraped API documentation.

The endpoint parser builds these from documentation pages, the reconciler
fills in missing DTOs, and the renderers shape them into spec documents.
"""

from pydantic import BaseModel, Field

from riotapi_schema.parser.types import referenced_dtos


class Param(BaseModel):
    """A single method parameter (path, query, or header)."""

    name: str
    location: str  # path / query / header
    required: bool
    param_type: str  # raw doc type, e.g. "string" or "Set[string]"
    description: str = ""


class Property(BaseModel):
    """A single DTO property."""

    name: str
    prop_type: str
    description: str = ""


class Dto(BaseModel):
    """A named schema. A Dto without properties is a placeholder."""

    name: str
    description: str = ""
    properties: dict[str, Property] = {}

    @property
    def is_placeholder(self) -> bool:
        return not self.properties

    def full_name(self, endpoint_name: str) -> str:
        return f"{endpoint_name}.{self.name}"

    def referenced_dtos(self) -> list[str]:
        names: list[str] = []
        for prop in self.properties.values():
            for name in referenced_dtos(prop.prop_type):
                if name not in names:
                    names.append(name)
        return names


class Method(BaseModel):
    """A single HTTP method of an endpoint."""

    verb: str  # get / post / put / delete
    path: str  # /lol/summoner/v4/summoners/{encryptedSummonerId}
    operation_id: str
    summary: str = ""
    description: str = ""
    parameters: list[Param] = []
    request_body: str | None = None
    return_type: str | None = None
    error_responses: dict[str, str] = {}  # {status_code: reason}
    platforms_available: list[str] = []

    def referenced_dtos(self) -> list[str]:
        """DTO names referenced by parameters, request body and return type."""
        types = [p.param_type for p in self.parameters]
        types.extend(t for t in (self.request_body, self.return_type) if t)
        names: list[str] = []
        for type_str in types:
            for name in referenced_dtos(type_str):
                if name not in names:
                    names.append(name)
        return names


class Endpoint(BaseModel):
    """A documented API resource and the DTOs scoped to it."""

    name: str
    description: str = ""
    methods: list[Method] = []
    dtos: dict[str, Dto] = {}

    def add_dto(self, dto: Dto) -> None:
        self.dtos[dto.name] = dto

    def add_placeholder_dto(self, dto_name: str) -> None:
        self.dtos[dto_name] = Dto(name=dto_name)

    def dangling_dtos(self) -> list[str]:
        """Referenced DTO names with no entry in ``dtos``."""
        names: list[str] = []
        sources = [m.referenced_dtos() for m in self.methods]
        sources.extend(dto.referenced_dtos() for dto in self.dtos.values())
        for refs in sources:
            for name in refs:
                if name not in self.dtos and name not in names:
                    names.append(name)
        return names


class MissingDto(BaseModel):
    """A DTO referenced by an endpoint but not defined on its page."""

    endpoint: str
    dto_name: str

    @property
    def full_name(self) -> str:
        return f"{self.endpoint}.{self.dto_name}"


class ParseResult(BaseModel):
    """Output of parsing one documentation page."""

    endpoint: Endpoint
    missing_dtos: list[str] = Field(default_factory=list)

    def list_missing_dtos(self) -> list[MissingDto]:
        return [MissingDto(endpoint=self.endpoint.name, dto_name=name) for name in self.missing_dtos]
