# src/boamp_mcp/exceptions.py

from __future__ import annotations

from typing import Optional


class BoampError(RuntimeError):
    """
    Erreur de base de l'adaptateur BOAMP.

    Toutes les erreurs "métier" héritent de RuntimeError, comme les erreurs
    levées par les collecteurs HTTP.
    """


class BoampApiError(BoampError):
    """
    Échec de l'appel à l'API BOAMP (réseau, timeout, HTTP, JSON invalide).

    Le message est celui renvoyé par l'API quand il existe, sinon celui de
    l'erreur de transport.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(f"Erreur API BOAMP: {message}")
        self.status_code = status_code


class MarketNotFoundError(BoampError):
    """Aucun avis ne correspond à l'identifiant demandé."""

    def __init__(self, idweb: str) -> None:
        super().__init__(f"Marché avec l'identifiant {idweb} non trouvé")
        self.idweb = idweb


class InvalidLocatorError(BoampError):
    """URI de ressource qui ne respecte pas le format boamp://market/{idweb}."""

    def __init__(self, uri: str) -> None:
        super().__init__(f"Format d'URI invalide: {uri}")
        self.uri = uri


class InvalidParametersError(BoampError):
    """Arguments d'appel mal formés (type de marché inconnu, limite non entière...)."""
