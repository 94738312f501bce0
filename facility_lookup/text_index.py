"""Free-text relevance search over facility name, suburb and brigade."""

import re
from typing import List, Optional, Sequence

from .models import FacilityRecord, LookupResult
from .normalizer import coerce_limit

# Score bands. Each band sits strictly below the one before it.
EXACT_NAME_SCORE = 1.0
NAME_PREFIX_BASE, NAME_PREFIX_SPAN = 0.75, 0.15
NAME_CONTAINS_BASE, NAME_CONTAINS_SPAN = 0.6, 0.15
EXACT_OTHER_SCORE = 0.55
OTHER_CONTAINS_BASE, OTHER_CONTAINS_SPAN = 0.3, 0.2


def fold(text: Optional[str]) -> str:
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip().casefold()


def score_fields(term: str, name: str, suburb: str, brigade: str) -> float:
    """
    Relevance of an already-folded query against already-folded fields.

    Returns 0.0 for no match. Partial matches scale with how much of the
    field the query covers, so "bulli" ranks "BULLI HEIGHTS" above
    "BULLI PASS SOUTHERN HIGHLANDS".
    """
    if name == term:
        return EXACT_NAME_SCORE
    pos = name.find(term)
    if pos >= 0:
        ratio = len(term) / len(name)
        if pos == 0:
            return NAME_PREFIX_BASE + NAME_PREFIX_SPAN * ratio
        return NAME_CONTAINS_BASE + NAME_CONTAINS_SPAN * ratio

    best = 0.0
    for other in (suburb, brigade):
        if not other:
            continue
        if other == term:
            return EXACT_OTHER_SCORE
        if term in other:
            best = max(best, OTHER_CONTAINS_BASE + OTHER_CONTAINS_SPAN * len(term) / len(other))
    return best


class TextIndex:
    """Folded copies of searchable fields, built once per dataset load."""

    def __init__(self, records: Sequence[FacilityRecord]):
        self._records = records
        self._folded = [
            (fold(r.name), fold(r.suburb), "" if r.brigade == r.name else fold(r.brigade))
            for r in records
        ]

    def __len__(self) -> int:
        return len(self._records)

    def search(self, query: Optional[str], limit: Optional[int] = None) -> List[LookupResult]:
        if not isinstance(query, str):
            return []
        term = fold(query)
        if not term:
            return []
        if limit is not None:
            limit = coerce_limit(limit)
            if limit is None or limit <= 0:
                return []

        hits = []
        for record, (name, suburb, brigade) in zip(self._records, self._folded):
            score = score_fields(term, name, suburb, brigade)
            if score > 0:
                hits.append((score, record))

        # list.sort is stable, so equal scores keep dataset order
        hits.sort(key=lambda h: -h[0])
        if limit is not None:
            hits = hits[:limit]
        return [LookupResult.from_record(r, relevance_score=s) for s, r in hits]
