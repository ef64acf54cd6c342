"""Keyword search over endpoint paths, summaries and descriptions."""
from typing import Any, Dict, Iterable, List, Tuple

from swagger_explorer.introspection.endpoint_resolver import iter_operations
from swagger_explorer.schema.models import SearchMatch

PATH_WEIGHT = 10
SUMMARY_WEIGHT = 5
DESCRIPTION_WEIGHT = 1
MATCHED_TERM_BONUS = 20  # Favors endpoints matching several terms


def tokenize(query: str) -> List[str]:
    return [term for term in query.lower().split() if term]


def score_operation(terms: List[str], path: str, operation: Dict[str, Any]) -> int:
    """
    Score one operation against the search terms.

    Returns:
        0 when no term matches
    """
    summary = str(operation.get("summary") or "").lower()
    description = str(operation.get("description") or "").lower()
    path_lower = path.lower()

    score = 0
    matched_terms = 0
    for term in terms:
        term_score = 0
        if term in path_lower:
            term_score += PATH_WEIGHT
        if term in summary:
            term_score += SUMMARY_WEIGHT
        if term in description:
            term_score += DESCRIPTION_WEIGHT
        if term_score > 0:
            score += term_score
            matched_terms += 1

    if score > 0:
        score += matched_terms * MATCHED_TERM_BONUS
    return score


def rank(
    query: str,
    documents: Iterable[Tuple[str, Dict[str, Any]]],
    limit: int = 50,
) -> List[SearchMatch]:
    """
    Rank operations of several documents.

    Args:
        query: Whitespace-separated keywords
        documents: (service_name, document) pairs
        limit: Maximum number of matches

    Returns:
        Matches sorted by score, best first (ties keep document order)
    """
    terms = tokenize(query)
    if not terms:
        return []

    matches = []
    for service, document in documents:
        for path, method, operation in iter_operations(document):
            score = score_operation(terms, path, operation)
            if score > 0:
                matches.append(SearchMatch(
                    service=service,
                    method=method,
                    path=path,
                    summary=str(operation.get("summary") or ""),
                    score=score,
                ))

    matches.sort(key=lambda m: m.score, reverse=True)
    return matches[:limit]
