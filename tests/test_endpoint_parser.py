from pathlib import Path

import pytest

from riotapi_schema.errors import ParseError
from riotapi_schema.parser.endpoint import parse_endpoint
from riotapi_schema.parser.index import parse_index

FIXTURES = Path(__file__).parent / "fixtures"


def _load(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


class TestIndexParser:
    def test_parse_index_entries(self):
        entries = parse_index(_load("api_methods.html"))
        assert [e.name for e in entries] == ["summoner-v4", "match-v5"]

    def test_description_whitespace_collapsed(self):
        entries = parse_index(_load("api_methods.html"))
        assert entries[0].description == "Summoner lookups by PUUID or account."

    def test_empty_index_raises(self):
        with pytest.raises(ParseError):
            parse_index("<html><body><p>Maintenance</p></body></html>")


class TestSummonerPage:
    def test_endpoint_identity(self):
        result = parse_endpoint(_load("summoner-v4.html"), "Summoner lookups")
        assert result.endpoint.name == "summoner-v4"
        assert result.endpoint.description == "Summoner lookups"

    def test_method_heading(self):
        method = parse_endpoint(_load("summoner-v4.html"), "").endpoint.methods[0]
        assert method.verb == "get"
        assert method.path == "/lol/summoner/v4/summoners/by-puuid/{encryptedPUUID}"
        assert method.operation_id == "summoner-v4.getByPUUID"
        assert method.summary == "Get a summoner by PUUID."
        assert method.description == "Consider using the account endpoints for lookups by Riot ID."

    def test_path_parameter(self):
        method = parse_endpoint(_load("summoner-v4.html"), "").endpoint.methods[0]
        assert len(method.parameters) == 1
        param = method.parameters[0]
        assert param.name == "encryptedPUUID"
        assert param.location == "path"
        assert param.required is True
        assert param.param_type == "string"

    def test_response_and_errors(self):
        method = parse_endpoint(_load("summoner-v4.html"), "").endpoint.methods[0]
        assert method.return_type == "SummonerDTO"
        assert method.error_responses == {"400": "Bad request", "404": "Data not found"}

    def test_platforms_deduplicated_in_order(self):
        method = parse_endpoint(_load("summoner-v4.html"), "").endpoint.methods[0]
        assert method.platforms_available == ["na1", "euw1", "kr"]

    def test_defined_dto_registered(self):
        result = parse_endpoint(_load("summoner-v4.html"), "")
        dto = result.endpoint.dtos["SummonerDTO"]
        assert dto.description == "represents a summoner"
        assert list(dto.properties) == ["accountId", "profileIconId", "revisionDate", "puuid", "summonerLevel"]
        assert dto.properties["revisionDate"].prop_type == "long"
        assert result.missing_dtos == []


class TestMatchPage:
    def test_two_methods(self):
        endpoint = parse_endpoint(_load("match-v5.html"), "").endpoint
        assert [m.operation_id for m in endpoint.methods] == ["match-v5.getMatchIdsByPUUID", "match-v5.getMatch"]

    def test_query_parameters_not_required(self):
        method = parse_endpoint(_load("match-v5.html"), "").endpoint.methods[0]
        query = [p for p in method.parameters if p.location == "query"]
        assert [p.name for p in query] == ["startTime", "queue", "count"]
        assert all(p.required is False for p in query)
        assert query[0].param_type == "long"

    def test_primitive_return_type(self):
        method = parse_endpoint(_load("match-v5.html"), "").endpoint.methods[0]
        assert method.return_type == "List[string]"

    def test_nested_undefined_dto_is_missing_not_placeholder(self):
        result = parse_endpoint(_load("match-v5.html"), "")
        assert result.missing_dtos == ["InfoDto"]
        assert "InfoDto" not in result.endpoint.dtos
        assert set(result.endpoint.dtos) == {"MatchDto", "MetadataDto"}

    def test_empty_definition_is_ignored(self):
        result = parse_endpoint(_load("match-v5.html"), "")
        assert "TimelineDto" not in result.endpoint.dtos
        assert "TimelineDto" not in result.missing_dtos


class TestTournamentStubPage:
    def test_request_body_type(self):
        method = parse_endpoint(_load("tournament-stub-v5.html"), "").endpoint.methods[0]
        assert method.verb == "post"
        assert method.request_body == "TournamentCodeParametersV5"

    def test_required_markers(self):
        method = parse_endpoint(_load("tournament-stub-v5.html"), "").endpoint.methods[0]
        params = {p.name: p for p in method.parameters}
        assert params["count"].required is False
        assert params["tournamentId"].required is True
        assert params["X-Request-Id"].required is True
        assert params["X-Request-Id"].location == "header"

    def test_missing_summary_is_empty(self):
        method = parse_endpoint(_load("tournament-stub-v5.html"), "").endpoint.methods[1]
        assert method.summary == ""

    def test_map_value_dto_reported_once(self):
        result = parse_endpoint(_load("tournament-stub-v5.html"), "")
        assert result.missing_dtos == ["LobbyEventV5DTO"]
        assert result.endpoint.dtos["TournamentCodeParametersV5"].properties["allowedParticipants"].prop_type == "Set[string]"


class TestParseFailures:
    def test_no_resource_raises(self):
        with pytest.raises(ParseError, match="resource"):
            parse_endpoint("<ul><li class='operation'></li></ul>", "")

    def test_no_operations_raises(self):
        with pytest.raises(ParseError, match="No operations"):
            parse_endpoint('<ul><li class="resource" id="resource_champion-v3"></li></ul>', "")

    def test_operation_without_path_raises(self):
        markup = (
            '<ul><li class="resource" id="resource_champion-v3"><ul>'
            '<li class="get operation"><span class="http_method">GET</span></li>'
            "</ul></li></ul>"
        )
        with pytest.raises(ParseError, match="method or path"):
            parse_endpoint(markup, "")

    def test_parameter_heading_without_table_raises(self):
        markup = (
            '<ul><li class="resource" id="resource_champion-v3"><ul>'
            '<li class="get operation"><span class="http_method">GET</span>'
            '<span class="path">/lol/platform/v3/champion-rotations</span>'
            '<div class="api_block"><h4>Query Parameters</h4><p>none</p></div>'
            "</li></ul></li></ul>"
        )
        with pytest.raises(ParseError, match="has no table"):
            parse_endpoint(markup, "")

    def test_malformed_type_raises(self):
        markup = (
            '<ul><li class="resource" id="resource_champion-v3"><ul>'
            '<li class="get operation"><span class="http_method">GET</span>'
            '<span class="path">/lol/platform/v3/champion-rotations</span>'
            '<div class="api_block"><h4>Response Classes</h4><span>Return value: List[ChampionInfo</span></div>'
            "</li></ul></li></ul>"
        )
        with pytest.raises(ParseError, match="Malformed type"):
            parse_endpoint(markup, "")

    def test_operation_id_falls_back_to_verb_and_path(self):
        markup = (
            '<ul><li class="resource" id="resource_champion-v3"><ul>'
            '<li class="get operation"><span class="http_method">GET</span>'
            '<span class="path">/lol/platform/v3/champion-rotations</span>'
            "</li></ul></li></ul>"
        )
        method = parse_endpoint(markup, "").endpoint.methods[0]
        assert method.operation_id == "get /lol/platform/v3/champion-rotations"
