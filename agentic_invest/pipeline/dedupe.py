"""Citation deduplication."""

from collections.abc import Iterable

from .models import Citation


def dedupe_citations(citations: Iterable[Citation]) -> list[Citation]:
    """Drop repeated citations by ``uri``, keeping the first occurrence in order.

    Citations missing a uri or a title are discarded. Lists are expected to be
    small (tens of items).
    """
    seen: set[str] = set()
    unique: list[Citation] = []
    for citation in citations:
        if not citation.uri or not citation.title:
            continue
        if citation.uri in seen:
            continue
        seen.add(citation.uri)
        unique.append(citation)
    return unique
