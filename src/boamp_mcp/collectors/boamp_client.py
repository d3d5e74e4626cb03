# src/boamp_mcp/collectors/boamp_client.py

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional

import requests
from requests import Response, Session
from requests.exceptions import RequestException, Timeout

from boamp_mcp.exceptions import BoampApiError, InvalidParametersError, MarketNotFoundError
from boamp_mcp.models.market import MarketRecord, SearchParameters
from boamp_mcp.services.query_builder import build_details_params, build_search_params

logger = logging.getLogger(__name__)

# Endpoint Opendatasoft Explore v2.1 pour le jeu de données BOAMP
BOAMP_API_URL = (
    "https://boamp-datadila.opendatasoft.com/api/explore/v2.1/catalog/datasets/boamp/records"
)
DEFAULT_TIMEOUT = 10.0


def _backend_message(response: Response) -> Optional[str]:
    """
    Extrait le message d'erreur renvoyé par Opendatasoft, s'il y en a un.

    Exemple de corps : {"error_code": "ODSQLError", "message": "..."}
    """
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message")
        if message:
            return str(message)
    return None


class BoampClient:
    """
    Client minimal pour interroger l'API BOAMP via Opendatasoft.

    Une requête GET par appel, sans retry ni cache.
    La session HTTP peut être injectée (tests, configuration des proxies...).
    """

    def __init__(
        self,
        base_url: str = BOAMP_API_URL,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        session: Optional[Session] = None,
    ) -> None:
        self.base_url = base_url
        self.session: Session = session if session is not None else requests.Session()
        # None = pas de timeout côté client
        self.timeout = timeout

    def _request(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Envoie une requête GET à l'API avec gestion d'erreurs.

        Retourne le JSON décodé, ou lève une BoampApiError explicite.
        """
        logger.info("Requête BOAMP: %s", params)
        try:
            response: Response = self.session.get(
                self.base_url,
                params=params,
                timeout=self.timeout,
            )
        except Timeout as exc:
            logger.error("Timeout lors de l'appel à l'API BOAMP: %s", exc)
            raise BoampApiError(str(exc) or "timeout") from exc
        except RequestException as exc:
            logger.error("Erreur réseau lors de l'appel à l'API BOAMP: %s", exc)
            raise BoampApiError(str(exc) or exc.__class__.__name__) from exc

        if not response.ok:
            logger.error(
                "Erreur HTTP BOAMP: status=%s, body=%s",
                response.status_code,
                response.text[:500],
            )
            message = _backend_message(response) or f"statut HTTP {response.status_code}"
            raise BoampApiError(message, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as exc:
            logger.error("Réponse BOAMP non JSON: %s", response.text[:500])
            raise BoampApiError("réponse non JSON", status_code=response.status_code) from exc

        if not isinstance(data, dict):
            logger.error("Réponse BOAMP inattendue: %r", data)
            raise BoampApiError("réponse inattendue", status_code=response.status_code)

        return data

    def search_markets(
        self,
        params: SearchParameters,
        today: Optional[date] = None,
    ) -> List[MarketRecord]:
        """
        Recherche les avis ouverts correspondant aux critères.

        Retourne la liste `results` telle que renvoyée par l'API
        (liste vide si aucun résultat).
        """
        logger.info("Recherche de marchés publics: %s", params)
        data = self._request(build_search_params(params, today))

        results = data.get("results") or []
        logger.info("Nombre de résultats: %d", len(results))
        return results

    def get_market_details(self, idweb: str) -> MarketRecord:
        """
        Récupère un avis par son identifiant `idweb`.

        Lève MarketNotFoundError si l'API ne renvoie aucune ligne.
        """
        if not isinstance(idweb, str) or not idweb.strip():
            raise InvalidParametersError("Identifiant de marché vide")

        logger.info("Récupération des détails du marché: %s", idweb)
        data = self._request(build_details_params(idweb))

        results = data.get("results") or []
        if not results:
            logger.warning("Marché %s non trouvé", idweb)
            raise MarketNotFoundError(idweb)

        return results[0]

    def close(self) -> None:
        self.session.close()
