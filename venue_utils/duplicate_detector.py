import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Tuple

from venue_utils.db_management import VenueLookup
from venue_utils.merge_plan import MergeRecord
from venue_utils.venue_resolver import VenueResolver
from venue_utils.venue_similarity_search import similarity_score

logger = logging.getLogger(__name__)

DEFAULT_DUPLICATE_THRESHOLD = 0.7
# Pairwise scoring is quadratic in the number of distinct venues
MAX_VENUES_FOR_PAIRWISE_SCORING = 2000


@dataclass
class DuplicateGroup:
    primary: str
    similar_venues: List[Tuple[str, float]] = field(default_factory=list)

    def venues(self) -> List[str]:
        return [self.primary] + [venue for venue, _ in self.similar_venues]


def find_duplicate_groups(venues: Iterable[str], similarity_threshold: float = DEFAULT_DUPLICATE_THRESHOLD) -> Dict[str, DuplicateGroup]:
    """
    Group venue names whose similarity is strictly above the threshold.

    Names are compared in sorted order and each group is keyed by the
    earliest name that has a match, so the primary of a group is the
    lexicographically smallest name in it. A name can appear in more than
    one group.
    """
    distinct_venues = sorted({venue for venue in venues if venue})
    logger.info("Checking %d distinct venues with similarity threshold %s", len(distinct_venues), similarity_threshold)
    if len(distinct_venues) > MAX_VENUES_FOR_PAIRWISE_SCORING:
        logger.warning(
            "Scoring %d distinct venues pairwise (%d comparisons); this does not scale much further",
            len(distinct_venues), len(distinct_venues) * (len(distinct_venues) - 1) // 2,
        )

    duplicates: Dict[str, DuplicateGroup] = {}
    for i, venue1 in enumerate(distinct_venues):
        for venue2 in distinct_venues[i + 1:]:
            similarity = similarity_score(venue1, venue2)
            if similarity > similarity_threshold:
                group = duplicates.setdefault(venue1, DuplicateGroup(primary=venue1))
                group.similar_venues.append((venue2, similarity))
    logger.info("Found %d potential duplicate groups", len(duplicates))
    return duplicates


def identify_duplicates(venue_lookup: VenueLookup, similarity_threshold: float = DEFAULT_DUPLICATE_THRESHOLD) -> Dict[str, DuplicateGroup]:
    """
    Fetch the stored venues once and group likely duplicates. Read errors propagate to the caller.
    """
    return find_duplicate_groups(venue_lookup.get_distinct_venues(), similarity_threshold)


def suggest_alias_merges(venues: Iterable[str], resolver: VenueResolver) -> List[MergeRecord]:
    """
    Stored venue names that the alias table maps to a different canonical name.
    """
    variations_by_canonical = defaultdict(list)
    for venue in sorted({venue for venue in venues if venue}):
        canonical = resolver.lookup_alias(venue)
        if canonical is not None and canonical != venue:
            variations_by_canonical[canonical].append(venue)

    return [
        MergeRecord(variations=variations, canonical=canonical, reason="Known alias")
        for canonical, variations in sorted(variations_by_canonical.items())
    ]


def groups_to_merge_records(groups: Dict[str, DuplicateGroup], resolver: VenueResolver,
                            existing_records: Sequence[MergeRecord] = ()) -> List[MergeRecord]:
    """
    Draft merge records from duplicate groups, using the resolved name of each primary as the canonical.

    A name is merged by at most one record and is never both a variation and
    a canonical, counting existing_records too. Groups whose canonical was
    already merged away are redirected to where it went.
    """
    merged_into: Dict[str, str] = {}
    canonicals = set()
    for record in existing_records:
        canonicals.add(record.canonical)
        for variation in record.variations:
            merged_into[variation] = record.canonical

    records = []
    for primary, group in groups.items():
        canonical = resolver.resolve(primary)
        canonical = merged_into.get(canonical, canonical)
        variations = [
            venue for venue in group.venues()
            if venue != canonical and venue not in merged_into and venue not in canonicals
        ]
        if not variations:
            continue
        for variation in variations:
            merged_into[variation] = canonical
        canonicals.add(canonical)
        best = max(score for _, score in group.similar_venues)
        records.append(MergeRecord(variations=variations, canonical=canonical, reason=f"Similar names ({best:.2f})"))
    return records
