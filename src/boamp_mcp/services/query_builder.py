# src/boamp_mcp/services/query_builder.py

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, Optional

from boamp_mcp.models.market import SearchParameters

# Champs BOAMP utilisés dans les filtres
SUBJECT_FIELD = "objet"
DESCRIPTOR_FIELD = "descripteur_libelle"
DEADLINE_FIELD = "datelimitereponse"
DEPARTMENT_FIELD = "code_departement"
IDWEB_FIELD = "idweb"
MARKET_TYPE_FACET = "type_marche"


def today_utc() -> date:
    """Date du jour en UTC, sans heure."""
    return datetime.now(timezone.utc).date()


def escape_literal(value: str, quote: str) -> str:
    """
    Échappe une valeur avant de l'insérer dans un littéral ODSQL
    délimité par `quote`.

    Exemple : l'entreprise -> l\\'entreprise (pour quote="'")
    """
    return value.replace("\\", "\\\\").replace(quote, "\\" + quote)


def build_keyword_clause(keywords: Iterable[str]) -> Optional[str]:
    """
    Construit le groupe de mots-clés :

    ["a", "b"] -> "((objet LIKE '%a%' OR descripteur_libelle LIKE '%a%') OR (...b...))"

    Retourne None si aucun mot-clé.
    """
    conditions = []
    for keyword in keywords:
        escaped = escape_literal(keyword, "'")
        conditions.append(
            f"({SUBJECT_FIELD} LIKE '%{escaped}%' "
            f"OR {DESCRIPTOR_FIELD} LIKE '%{escaped}%')"
        )
    if not conditions:
        return None
    return f"({' OR '.join(conditions)})"


def build_deadline_clause(today: date) -> str:
    # Uniquement les avis encore ouverts à la réponse
    return f"{DEADLINE_FIELD} >= date'{today.isoformat()}'"


def _double_quoted(value: str) -> str:
    return '"' + escape_literal(value, '"') + '"'


def build_department_clause(departments: Iterable[str]) -> Optional[str]:
    conditions = [f"{DEPARTMENT_FIELD}={_double_quoted(code)}" for code in departments]
    if not conditions:
        return None
    return f"({' OR '.join(conditions)})"


def build_where_clause(params: SearchParameters, today: Optional[date] = None) -> str:
    """
    Assemble la clause `where` complète :

    [mots-clés AND] date limite >= aujourd'hui [AND départements]
    """
    if today is None:
        today = today_utc()

    parts = []
    keyword_clause = build_keyword_clause(params.keywords)
    if keyword_clause:
        parts.append(keyword_clause)

    parts.append(build_deadline_clause(today))

    department_clause = build_department_clause(params.departments)
    if department_clause:
        parts.append(department_clause)

    return " AND ".join(parts)


def build_search_params(params: SearchParameters, today: Optional[date] = None) -> Dict[str, Any]:
    """
    Paramètres de la requête GET de recherche (where, limit, order_by, refine).

    Le type de marché passe par `refine` (facette), jamais par `where`.
    """
    request_params: Dict[str, Any] = {
        "where": build_where_clause(params, today),
        "limit": params.limit,
        "order_by": params.sort_by.value,
    }
    if params.market_type is not None:
        request_params["refine"] = f"{MARKET_TYPE_FACET}:{params.market_type.value}"
    return request_params


def build_details_params(idweb: str) -> Dict[str, Any]:
    return {
        "where": f"{IDWEB_FIELD}={_double_quoted(idweb)}",
        "limit": 1,
    }
