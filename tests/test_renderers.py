from riotapi_schema.generator.common import (
    RenderData,
    build_description,
    collect_regions,
    component_schemas,
    merge_override,
    schema_for_type,
    type_from_schema,
)
from riotapi_schema.generator.openapi import OpenApiRenderer
from riotapi_schema.generator.swagger import SwaggerRenderer
from riotapi_schema.generator.validator import validate_refs
from riotapi_schema.parser.base import Dto, Endpoint, Method, Param, Property


def _make_data(**kwargs) -> RenderData:
    summoner = Endpoint(
        name="summoner-v4",
        description="Summoner lookups",
        methods=[
            Method(
                verb="get",
                path="/lol/summoner/v4/summoners/by-puuid/{encryptedPUUID}",
                operation_id="summoner-v4.getByPUUID",
                summary="Get a summoner by PUUID.",
                parameters=[Param(name="encryptedPUUID", location="path", required=True, param_type="string")],
                return_type="SummonerDTO",
                error_responses={"404": "Data not found"},
                platforms_available=["na1", "kr"],
            )
        ],
        dtos={
            "SummonerDTO": Dto(
                name="SummonerDTO",
                description="represents a summoner",
                properties={
                    "puuid": Property(name="puuid", prop_type="string", description="Encrypted PUUID."),
                    "summonerLevel": Property(name="summonerLevel", prop_type="long"),
                },
            )
        },
    )
    tournament = Endpoint(
        name="tournament-stub-v5",
        methods=[
            Method(
                verb="post",
                path="/lol/tournament-stub/v5/codes",
                operation_id="tournament-stub-v5.createTournamentCode",
                parameters=[
                    Param(name="count", location="query", required=False, param_type="int"),
                    Param(name="ids", location="query", required=False, param_type="Set[string]"),
                ],
                request_body="TournamentCodeParametersV5",
                return_type="List[string]",
                platforms_available=["americas", "na1"],
            )
        ],
        dtos={
            "TournamentCodeParametersV5": Dto(
                name="TournamentCodeParametersV5",
                properties={"teamSize": Property(name="teamSize", prop_type="int")},
            ),
        },
    )
    endpoints = [summoner, tournament]
    defaults = dict(endpoints=endpoints, regions=collect_regions(endpoints), description="desc", version="2026-10-18")
    defaults.update(kwargs)
    return RenderData(**defaults)


class TestCommon:
    def test_collect_regions_first_seen_no_duplicates(self):
        assert _make_data().regions == ["na1", "kr", "americas"]

    def test_schema_for_nested_types(self):
        schema = schema_for_type("Map[String, List[TeamDto]]", "match-v5", "#/definitions/")
        assert schema == {
            "type": "object",
            "additionalProperties": {"type": "array", "items": {"$ref": "#/definitions/match-v5.TeamDto"}},
            "x-key": "string",
        }

    def test_set_is_unique_array(self):
        assert schema_for_type("Set[long]", "x", "#/") == {
            "type": "array",
            "items": {"type": "integer", "format": "int64"},
            "uniqueItems": True,
        }

    def test_type_from_schema_prefers_x_type(self):
        assert type_from_schema({"type": "integer", "x-type": "long"}) == "long"

    def test_type_roundtrip_through_schema(self):
        for type_str in ["long", "List[TeamDto]", "Set[string]", "Map[string, List[int]]", "double"]:
            assert type_from_schema(schema_for_type(type_str, "match-v5", "#/components/schemas/")) == type_str

    def test_merge_override_is_deep_and_does_not_mutate(self):
        base = {"type": "object", "properties": {"a": {"type": "string"}}}
        merged = merge_override(base, {"properties": {"b": {"type": "integer"}}, "required": ["a"]})
        assert set(merged["properties"]) == {"a", "b"}
        assert merged["required"] == ["a"]
        assert "b" not in base["properties"]

    def test_component_schemas_apply_overrides(self):
        data = _make_data(schema_overrides={
            "summoner-v4.SummonerDTO": {"required": ["puuid"]},
            "summoner-v4.ExtraDto": {"type": "object", "properties": {}},
        })
        schemas = component_schemas(data, "#/components/schemas/")
        assert schemas["summoner-v4.SummonerDTO"]["required"] == ["puuid"]
        assert schemas["summoner-v4.SummonerDTO"]["properties"]["puuid"]["x-type"] == "string"
        assert "summoner-v4.ExtraDto" in schemas

    def test_description_lists_all_files(self):
        description = build_description(["openapi-3.0.0", "swaggerspec-2.0"])
        assert "`openapi-3.0.0.min.yml`" in description
        assert "`swaggerspec-2.0.json`" in description


class TestOpenApiRenderer:
    def test_document_shape(self):
        spec = OpenApiRenderer().render(_make_data())
        assert spec["openapi"] == "3.0.0"
        assert spec["info"]["version"] == "2026-10-18"
        assert spec["servers"][0]["variables"]["platform"]["enum"] == ["na1", "kr", "americas"]
        assert spec["components"]["securitySchemes"]["api_key"]["name"] == "X-Riot-Token"
        assert [t["name"] for t in spec["tags"]] == ["summoner-v4", "tournament-stub-v5"]

    def test_operation(self):
        spec = OpenApiRenderer().render(_make_data())
        op = spec["paths"]["/lol/summoner/v4/summoners/by-puuid/{encryptedPUUID}"]["get"]
        assert op["operationId"] == "summoner-v4.getByPUUID"
        assert op["parameters"][0]["in"] == "path"
        assert op["parameters"][0]["schema"]["type"] == "string"
        ref = op["responses"]["200"]["content"]["application/json"]["schema"]["$ref"]
        assert ref == "#/components/schemas/summoner-v4.SummonerDTO"
        assert op["responses"]["404"]["description"] == "Data not found"
        assert op["x-platforms-available"] == ["na1", "kr"]

    def test_request_body(self):
        spec = OpenApiRenderer().render(_make_data())
        op = spec["paths"]["/lol/tournament-stub/v5/codes"]["post"]
        body_schema = op["requestBody"]["content"]["application/json"]["schema"]
        assert body_schema == {"$ref": "#/components/schemas/tournament-stub-v5.TournamentCodeParametersV5"}

    def test_property_descriptions(self):
        spec = OpenApiRenderer().render(_make_data())
        dto = spec["components"]["schemas"]["summoner-v4.SummonerDTO"]
        assert dto["title"] == "SummonerDTO"
        assert dto["properties"]["puuid"]["description"] == "Encrypted PUUID."
        assert dto["properties"]["summonerLevel"]["format"] == "int64"

    def test_no_dangling_refs(self):
        assert validate_refs(OpenApiRenderer().render(_make_data())) == {}

    def test_placeholder_dto_rendered_as_empty_object(self):
        data = _make_data()
        data.endpoints[0].dtos["SummonerDTO"] = Dto(name="SummonerDTO")
        schema = OpenApiRenderer().render(data)["components"]["schemas"]["summoner-v4.SummonerDTO"]
        assert schema == {"type": "object", "title": "SummonerDTO", "properties": {}}

    def test_no_regions_uses_default_platform(self):
        spec = OpenApiRenderer().render(_make_data(regions=[]))
        assert spec["servers"][0]["variables"]["platform"] == {"default": "na1"}


class TestSwaggerRenderer:
    def test_document_shape(self):
        spec = SwaggerRenderer().render(_make_data())
        assert spec["swagger"] == "2.0"
        assert spec["host"] == "na1.api.riotgames.com"
        assert spec["x-platforms"] == ["na1", "kr", "americas"]
        assert "summoner-v4.SummonerDTO" in spec["definitions"]

    def test_inline_parameters_and_body(self):
        spec = SwaggerRenderer().render(_make_data())
        params = spec["paths"]["/lol/tournament-stub/v5/codes"]["post"]["parameters"]
        count, ids, body = params
        assert count["type"] == "integer"
        assert ids["type"] == "array"
        assert ids["collectionFormat"] == "multi"
        assert body["in"] == "body"
        assert body["schema"]["$ref"] == "#/definitions/tournament-stub-v5.TournamentCodeParametersV5"

    def test_response_schema(self):
        spec = SwaggerRenderer().render(_make_data())
        op = spec["paths"]["/lol/summoner/v4/summoners/by-puuid/{encryptedPUUID}"]["get"]
        assert op["responses"]["200"]["schema"] == {"$ref": "#/definitions/summoner-v4.SummonerDTO"}

    def test_no_dangling_refs(self):
        assert validate_refs(SwaggerRenderer().render(_make_data())) == {}

    def test_dto_array_parameter_items_inlined(self):
        data = _make_data()
        data.endpoints[0].methods[0].parameters.append(
            Param(name="summoners", location="query", required=False, param_type="List[SummonerDTO]")
        )
        param = SwaggerRenderer().render(data)["paths"]["/lol/summoner/v4/summoners/by-puuid/{encryptedPUUID}"]["get"]["parameters"][1]
        assert param["type"] == "array"
        assert param["items"] == {"type": "string"}
        assert param["x-type"] == "List[SummonerDTO]"
        assert param["collectionFormat"] == "multi"

    def test_map_parameter_falls_back_to_string(self):
        data = _make_data()
        data.endpoints[0].methods[0].parameters.append(
            Param(name="filters", location="query", required=False, param_type="Map[string, int]")
        )
        param = SwaggerRenderer().render(data)["paths"]["/lol/summoner/v4/summoners/by-puuid/{encryptedPUUID}"]["get"]["parameters"][1]
        assert param["type"] == "string"
        assert "additionalProperties" not in param
