"""Fixtures communes : fausse session requests et client BOAMP injecté."""

from datetime import date

import pytest

import boamp_mcp.services.query_builder as query_builder_mod
from boamp_mcp.collectors.boamp_client import BoampClient
from boamp_mcp.services.markets import MarketService

TODAY = date(2026, 1, 15)

SAMPLE_RECORD = {
    "idweb": "26-12345",
    "objet": "Maintenance du parc informatique",
    "dateparution": "2026-01-10",
    "datelimitereponse": "2026-02-01T12:00:00+01:00",
    "nomacheteur": "Ville de Paris",
    "code_departement": ["75"],
    "type_marche_facette": ["Services"],
    "descripteur_libelle": ["Informatique (prestations de services)"],
}


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else repr(payload)

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    """Enregistre les appels GET et renvoie la réponse (ou l'erreur) programmée."""

    def __init__(self, response=None, error=None):
        self.response = response if response is not None else FakeResponse(payload={"results": []})
        self.error = error
        self.calls = []
        self.closed = False

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response

    def close(self):
        self.closed = True


@pytest.fixture
def fixed_today(monkeypatch):
    monkeypatch.setattr(query_builder_mod, "today_utc", lambda: TODAY)
    return TODAY


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def client(session):
    return BoampClient(base_url="https://example.test/records", timeout=5, session=session)


@pytest.fixture
def service(client):
    return MarketService(client)


@pytest.fixture
def sample_record():
    return dict(SAMPLE_RECORD)


@pytest.fixture
def make_response():
    """Fabrique de réponses HTTP factices : make_response(status_code=..., payload=..., text=...)."""
    return FakeResponse


@pytest.fixture
def make_session():
    """Fabrique de sessions factices : make_session(response=..., error=...)."""
    return FakeSession
