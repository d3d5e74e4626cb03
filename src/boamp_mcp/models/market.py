# src/boamp_mcp/models/market.py

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from boamp_mcp.exceptions import InvalidParametersError

# Un avis BOAMP tel que renvoyé par l'API : on ne touche à aucun champ.
# Champs usuels : idweb, objet, dateparution, datelimitereponse,
# datefindiffusion, nomacheteur, code_departement, procedure_libelle,
# nature_libelle, type_marche_facette, descripteur_libelle, famille_libelle,
# donnees...
MarketRecord = Dict[str, Any]

DEFAULT_LIMIT = 20
MIN_LIMIT = 1
MAX_LIMIT = 100


class MarketType(Enum):
    """
    Type de marché, avec la valeur attendue par la facette BOAMP "type_marche".
    """

    SERVICES = "SERVICES"
    WORKS = "TRAVAUX"
    SUPPLIES = "FOURNITURES"

    @classmethod
    def parse(cls, value: Any) -> "MarketType":
        """
        Accepte le nom anglais (WORKS) comme la valeur BOAMP (TRAVAUX),
        sans tenir compte de la casse.
        """
        if isinstance(value, str):
            key = value.strip().upper()
            for member in cls:
                if key in (member.name, member.value):
                    return member
        raise InvalidParametersError(
            f"Type de marché inconnu: {value!r} "
            f"(attendu: {', '.join(m.value for m in cls)})"
        )


class SortOrder(Enum):
    PUBLICATION_ASC = "dateparution ASC"
    PUBLICATION_DESC = "dateparution DESC"
    DEADLINE_ASC = "datelimitereponse ASC"
    DEADLINE_DESC = "datelimitereponse DESC"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortOrder":
        """
        Tout ce qui n'est pas l'un des quatre littéraux retombe sur le tri
        par défaut (date limite de réponse croissante).
        """
        if value is not None:
            for member in cls:
                if value == member.value:
                    return member
        return cls.DEADLINE_ASC


def resolve_limit(value: Any) -> int:
    """
    Ramène la limite dans [1, 100].

    - None -> 20
    - entier hors bornes -> borné
    - autre chose (texte, booléen, flottant non entier) -> InvalidParametersError
    """
    if value is None:
        return DEFAULT_LIMIT
    if isinstance(value, bool):
        raise InvalidParametersError(f"Limite invalide: {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidParametersError(f"Limite invalide: {value!r}")
        value = int(value)
    if not isinstance(value, int):
        raise InvalidParametersError(f"Limite invalide: {value!r}")
    return max(MIN_LIMIT, min(MAX_LIMIT, value))


def _clean_strings(values: Optional[Iterable[str]], label: str) -> Tuple[str, ...]:
    if values is None:
        return ()
    if isinstance(values, str):
        # Un seul mot-clé passé en texte brut
        values = [values]

    cleaned = []
    for value in values:
        if not isinstance(value, str):
            raise InvalidParametersError(f"{label} invalide: {value!r}")
        value = value.strip()
        if value and value not in cleaned:
            cleaned.append(value)
    return tuple(cleaned)


@dataclass(frozen=True)
class SearchParameters:
    """
    Critères d'une recherche d'avis BOAMP.

    Construits à chaque appel, immuables ensuite.
    """

    keywords: Tuple[str, ...] = ()
    market_type: Optional[MarketType] = None
    limit: int = DEFAULT_LIMIT
    sort_by: SortOrder = SortOrder.DEADLINE_ASC
    departments: Tuple[str, ...] = ()

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any]) -> "SearchParameters":
        """
        Construit les paramètres à partir des arguments bruts de l'outil MCP
        (keywords, type, limit, sort_by, departments).
        """
        raw_type = arguments.get("type")
        market_type = MarketType.parse(raw_type) if raw_type else None

        return cls(
            keywords=_clean_strings(arguments.get("keywords"), "Mot-clé"),
            market_type=market_type,
            limit=resolve_limit(arguments.get("limit")),
            sort_by=SortOrder.parse(arguments.get("sort_by")),
            departments=_clean_strings(arguments.get("departments"), "Département"),
        )
