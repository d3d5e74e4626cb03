# src/boamp_mcp/server.py

"""
Serveur MCP pour interroger l'API BOAMP et récupérer les avis de marchés publics.

Expose deux outils (recherche, détails) et un modèle de ressource
boamp://market/{idweb}.
"""

import logging
import sys
from typing import Annotated, List, Optional

from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.exceptions import ResourceError, ToolError
from pydantic import Field

from boamp_mcp.collectors.boamp_client import BoampClient
from boamp_mcp.config import BoampSettings, configure_logging
from boamp_mcp.exceptions import BoampError
from boamp_mcp.models.market import MAX_LIMIT, MIN_LIMIT, MarketType, SortOrder
from boamp_mcp.services.markets import (
    DETAILS_TOOL,
    MARKET_URI_TEMPLATE,
    SEARCH_TOOL,
    MarketService,
)

logger = logging.getLogger(__name__)

SERVER_NAME = "boamp-server"
SERVER_VERSION = "0.1.0"

# Valeurs publiées dans le schéma des outils. La validation reste faite par
# MarketType.parse, SortOrder.parse et resolve_limit.
MARKET_TYPE_CHOICES = [member.value for member in MarketType] + [
    member.name for member in MarketType if member.name != member.value
]
SORT_CHOICES = [member.value for member in SortOrder]


def create_server(service: MarketService) -> FastMCP:
    """
    Crée le serveur FastMCP et y enregistre outils et ressources.

    Les erreurs BOAMP deviennent des résultats d'erreur (ToolError /
    ResourceError) pour que l'agent appelant voie le message.
    Un nom d'outil inconnu est rejeté par FastMCP lui-même, sous forme de
    résultat d'erreur ("Unknown tool: ...").
    """
    mcp = FastMCP(SERVER_NAME, version=SERVER_VERSION)

    @mcp.tool(
        name=SEARCH_TOOL,
        description="Récupère les avis de marchés publics selon divers critères",
    )
    def get_public_markets(
        keywords: Annotated[List[str], Field(description="Liste de mots-clés à rechercher")],
        type: Annotated[
            Optional[str],
            Field(
                description="Type de marché (SERVICES, TRAVAUX, FOURNITURES)",
                json_schema_extra={"enum": MARKET_TYPE_CHOICES},
            ),
        ] = None,
        limit: Annotated[
            Optional[int],
            Field(
                description="Nombre maximum de résultats à retourner (1 à 100, 20 par défaut)",
                json_schema_extra={"minimum": MIN_LIMIT, "maximum": MAX_LIMIT},
            ),
        ] = None,
        sort_by: Annotated[
            Optional[str],
            Field(
                description="Champ de tri (dateparution, datelimitereponse)",
                json_schema_extra={"enum": SORT_CHOICES},
            ),
        ] = None,
        departments: Annotated[
            Optional[List[str]],
            Field(description="Liste des départements (codes)"),
        ] = None,
    ) -> str:
        arguments = {
            "keywords": keywords,
            "type": type,
            "limit": limit,
            "sort_by": sort_by,
            "departments": departments,
        }
        try:
            return service.search(arguments)
        except BoampError as exc:
            logger.error("Erreur lors de la recherche: %s", exc)
            raise ToolError(f"Erreur lors de la recherche: {exc}") from exc

    @mcp.tool(
        name=DETAILS_TOOL,
        description="Récupère les détails complets d'un marché spécifique",
    )
    def get_market_details(
        idweb: Annotated[str, Field(description="Identifiant du marché")],
    ) -> str:
        try:
            return service.details(idweb)
        except BoampError as exc:
            logger.error("Erreur lors de la récupération des détails: %s", exc)
            raise ToolError(f"Erreur lors de la récupération des détails: {exc}") from exc

    @mcp.resource(
        MARKET_URI_TEMPLATE,
        name="Détails d'un marché public",
        description="Détails complets d'un avis de marché public par son identifiant",
        mime_type="application/json",
    )
    def market_details_resource(idweb: str) -> str:
        try:
            return service.read_resource(MARKET_URI_TEMPLATE.format(idweb=idweb))
        except BoampError as exc:
            logger.error("Erreur lors de la lecture de la ressource %s: %s", idweb, exc)
            raise ResourceError(str(exc)) from exc

    return mcp


def main() -> None:
    load_dotenv()
    configure_logging()

    try:
        settings = BoampSettings.from_env()
        logging.getLogger().setLevel(settings.log_level)
        client = BoampClient(base_url=settings.api_url, timeout=settings.timeout)
        mcp = create_server(MarketService(client))
    except Exception as exc:
        logger.error("Erreur fatale au démarrage: %s", exc)
        sys.exit(1)

    logger.info("Démarrage du serveur BOAMP MCP (api=%s)", settings.api_url)
    try:
        mcp.run()
    except KeyboardInterrupt:
        logger.info("Arrêt du serveur BOAMP MCP")
    except Exception as exc:
        logger.error("Erreur fatale: %s", exc)
        sys.exit(1)
    finally:
        client.close()


if __name__ == "__main__":
    main()
