from dataclasses import dataclass
from typing import Iterable, List, Optional

from rapidfuzz.distance import Levenshtein


@dataclass
class VenueMatch:
    title: str
    similarity_score: float


def edit_distance(s1: str, s2: str) -> int:
    """
    Plain Levenshtein distance: unit cost insertions, deletions and substitutions, no transpositions.
    """
    return Levenshtein.distance(s1, s2)


def similarity_score(s1: str, s2: str) -> float:
    """
    Case-insensitive similarity between two strings in [0, 1].

    Computed as (longest length - edit distance) / longest length, so two
    strings sharing no structure score 0 and identical strings score 1.
    """
    s1 = (s1 or "").lower()
    s2 = (s2 or "").lower()

    if s1 == s2:
        return 1.0
    if not s1 or not s2:
        return 0.0

    longest = max(len(s1), len(s2))
    return (longest - edit_distance(s1, s2)) / longest


def rank_venue_matches(query: str, candidates: Iterable[str], top_k: Optional[int] = None) -> List[VenueMatch]:
    """
    Score every candidate against the query, best first.
    Equal scores are ordered by candidate name.
    """
    matches = [VenueMatch(title=candidate, similarity_score=similarity_score(query, candidate))
               for candidate in set(candidates) if candidate]
    matches.sort(key=lambda x: (-x.similarity_score, x.title))
    return matches[:top_k] if top_k is not None else matches


def find_best_match(query: str, candidates: Iterable[str], threshold: float) -> Optional[VenueMatch]:
    """
    Return the best candidate whose score is strictly above the threshold.
    """
    matches = rank_venue_matches(query, candidates, top_k=1)
    if matches and matches[0].similarity_score > threshold:
        return matches[0]
    return None
