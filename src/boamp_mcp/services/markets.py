# src/boamp_mcp/services/markets.py

from __future__ import annotations

import json
import logging
import re
from typing import Any, Mapping

from boamp_mcp.collectors.boamp_client import BoampClient
from boamp_mcp.exceptions import InvalidLocatorError
from boamp_mcp.models.market import SearchParameters

logger = logging.getLogger(__name__)

SEARCH_TOOL = "get_public_markets"
DETAILS_TOOL = "get_market_details"

MARKET_URI_SCHEME = "boamp"
MARKET_URI_TEMPLATE = f"{MARKET_URI_SCHEME}://market/{{idweb}}"
MARKET_URI_PATTERN = re.compile(rf"^{MARKET_URI_SCHEME}://market/([^/]+)$")


def to_json(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2)


def parse_market_uri(uri: str) -> str:
    """
    Extrait l'idweb d'une URI boamp://market/{idweb}.

    Lève InvalidLocatorError si l'URI ne respecte pas ce format
    (segment vide, sous-chemin, autre schéma...).
    """
    match = MARKET_URI_PATTERN.match(uri or "")
    if not match:
        raise InvalidLocatorError(uri)
    return match.group(1)


class MarketService:
    """
    Point d'entrée des appels MCP : arguments bruts en entrée, texte JSON en sortie.

    Les erreurs BoampError remontent telles quelles, c'est la couche serveur
    qui les transforme en réponses d'erreur MCP.
    """

    def __init__(self, client: BoampClient) -> None:
        self.client = client

    def search(self, arguments: Mapping[str, Any]) -> str:
        params = SearchParameters.from_arguments(arguments)
        return to_json(self.client.search_markets(params))

    def details(self, idweb: Any) -> str:
        return to_json(self.client.get_market_details(idweb))

    def read_resource(self, uri: str) -> str:
        """Contenu JSON de la ressource boamp://market/{idweb}."""
        idweb = parse_market_uri(uri)
        logger.info("Lecture de la ressource %s", uri)
        return to_json(self.client.get_market_details(idweb))
