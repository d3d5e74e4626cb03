import json

import pytest

from boamp_mcp.exceptions import InvalidLocatorError, MarketNotFoundError
from boamp_mcp.services.markets import parse_market_uri


def test_search_returns_json_array(service, session, fixed_today, make_response, sample_record):
    session.response = make_response(payload={"results": [sample_record]})

    text = service.search({"keywords": ["informatique"], "limit": 0})

    assert json.loads(text) == [sample_record]
    params = session.calls[0]["params"]
    assert params["limit"] == 1
    assert params["order_by"] == "datelimitereponse ASC"
    assert params["where"] == (
        "(objet LIKE '%informatique%' OR descripteur_libelle LIKE '%informatique%')"
        " AND datelimitereponse >= date'2026-01-15'"
    )


def test_search_tolerates_missing_arguments(service, session, fixed_today):
    assert json.loads(service.search({})) == []
    assert session.calls[0]["params"]["where"] == "datelimitereponse >= date'2026-01-15'"


def test_details_returns_record(service, session, make_response, sample_record):
    session.response = make_response(payload={"results": [sample_record]})

    assert json.loads(service.details("26-12345")) == sample_record


def test_details_not_found(service, session):
    with pytest.raises(MarketNotFoundError):
        service.details("absent")


def test_read_resource(service, session, make_response, sample_record):
    session.response = make_response(payload={"results": [sample_record]})

    text = service.read_resource("boamp://market/ABC123")

    assert json.loads(text) == sample_record
    assert session.calls[0]["params"]["where"] == 'idweb="ABC123"'


@pytest.mark.parametrize(
    "uri",
    ["boamp://market/", "boamp://market/A/B", "http://market/ABC123", "boamp://markets/ABC123", ""],
)
def test_invalid_locator_fails_before_network(service, session, uri):
    with pytest.raises(InvalidLocatorError):
        service.read_resource(uri)

    assert session.calls == []


def test_parse_market_uri():
    assert parse_market_uri("boamp://market/26-12345") == "26-12345"
