# =============================================================================
# core/matching.py  —  Ranked Substring Matching over Corpus Listings
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Given whatever the user typed ("notes", "Research Notes", a bare corpus
#   id, a full resource name) and a snapshot of the registry listing, picks
#   the corpus they most likely meant.
#
# SCORING:
#   Every corpus contributes three candidate strings, each with a fixed
#   preference weight:
#
#       display name            → 30
#       trailing id segment     → 20
#       full resource name      → 10
#
#   A candidate matches when its lower-cased text CONTAINS the lower-cased,
#   trimmed query.  Its score is:
#
#       len(query) * 100 + weight - index_of_match
#
#   The single best score across all corpora wins.  Ties keep the first
#   one seen (listing order, then candidate order above).
#
#   This is substring matching, not edit distance.  "notes" finds
#   "Research Notes"; "ntoes" finds nothing.
# =============================================================================

from typing import Iterable, Optional

from core.models import CorpusHandle, CorpusRecord

DISPLAY_NAME_WEIGHT = 30
CORPUS_ID_WEIGHT = 20
RESOURCE_NAME_WEIGHT = 10


def _candidates(record: CorpusRecord) -> list[tuple[str, int]]:
    return [
        (record.display_name, DISPLAY_NAME_WEIGHT),
        (record.corpus_id, CORPUS_ID_WEIGHT),
        (record.resource_name, RESOURCE_NAME_WEIGHT),
    ]


def score_candidate(query: str, candidate: str, weight: int) -> Optional[int]:
    """Score one candidate string against an already-normalized query.

    Returns None when the candidate does not contain the query.
    """
    index = (candidate or "").lower().find(query)
    if index == -1:
        return None
    return len(query) * 100 + weight - index


def find_best_match(
    query: str,
    records: Iterable[CorpusRecord],
) -> Optional[CorpusHandle]:
    """Return the best-scoring corpus for `query`, or None if nothing matches.

    Args:
        query: Free-form identifier.  Trimmed and lower-cased before use;
            an empty result never matches.
        records: Registry listing, in listing order.

    Returns:
        A CorpusHandle for the winning corpus, or None.
    """
    normalized = (query or "").strip().lower()
    if not normalized:
        return None

    best: Optional[CorpusRecord] = None
    best_score = float("-inf")

    for record in records:
        for candidate, weight in _candidates(record):
            score = score_candidate(normalized, candidate, weight)
            if score is not None and score > best_score:
                best_score = score
                best = record

    return CorpusHandle.from_record(best) if best is not None else None


def find_exact_match(
    identifier: str,
    canonical_name: str,
    records: Iterable[CorpusRecord],
) -> Optional[CorpusHandle]:
    """Return the corpus whose resource name equals `canonical_name`, else
    the first whose display name equals `identifier` exactly."""
    records = list(records)
    for record in records:
        if record.resource_name == canonical_name:
            return CorpusHandle.from_record(record)
    for record in records:
        if record.display_name and record.display_name == identifier:
            return CorpusHandle.from_record(record)
    return None
