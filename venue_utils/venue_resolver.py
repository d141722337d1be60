import logging
from typing import Iterable, Optional

from venue_utils.alias_table import AliasTable
from venue_utils.db_management import VenueLookup
from venue_utils.text_normalization import UNKNOWN_VENUE, format_venue_name
from venue_utils.venue_similarity_search import VenueMatch, find_best_match

logger = logging.getLogger(__name__)

DEFAULT_SIMILARITY_THRESHOLD = 0.75


class VenueResolver:
    """
    Maps raw scraped venue names onto canonical venue names.

    Resolution order: alias table, then the closest venue already stored
    (when a snapshot is given), then a freshly formatted name.
    """

    def __init__(
        self,
        alias_table: AliasTable,
        venue_lookup: Optional[VenueLookup] = None,
        similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    ):
        if not 0.0 <= similarity_threshold <= 1.0:
            raise ValueError(f"Similarity threshold must be between 0 and 1, got {similarity_threshold}")
        self.alias_table = alias_table
        self.venue_lookup = venue_lookup
        self.similarity_threshold = similarity_threshold

    def lookup_alias(self, raw_venue: str) -> Optional[str]:
        """
        Alias for the raw name, or for its formatted form.

        Short alias keys only match whole names, and a whole name can appear
        once suffixes and parentheticals are stripped ("CSC Club" -> "Csc").
        """
        canonical = self.alias_table.lookup(raw_venue)
        if canonical is None and isinstance(raw_venue, str) and raw_venue.strip():
            canonical = self.alias_table.lookup(format_venue_name(raw_venue))
        return canonical

    def normalize_venue_name(self, raw_venue) -> str:
        """Canonical name from the alias table alone, without looking at stored venues."""
        if not isinstance(raw_venue, str) or not raw_venue.strip():
            return UNKNOWN_VENUE
        canonical = self.lookup_alias(raw_venue)
        if canonical is not None:
            return canonical
        return format_venue_name(raw_venue)

    def find_similar_venue(self, raw_venue: str, existing_venues: Iterable[str]) -> Optional[VenueMatch]:
        """
        Find the stored venue closest to raw_venue, compared in canonical form.
        """
        candidate = self.normalize_venue_name(raw_venue)
        existing_canonical = {
            self.normalize_venue_name(venue)
            for venue in existing_venues
            if isinstance(venue, str) and venue.strip()
        }
        return find_best_match(candidate, existing_canonical, self.similarity_threshold)

    def resolve(self, raw_venue, existing_venues: Optional[Iterable[str]] = None) -> str:
        if not isinstance(raw_venue, str) or not raw_venue.strip():
            return UNKNOWN_VENUE

        canonical = self.lookup_alias(raw_venue)
        if canonical is not None:
            logger.debug("Venue '%s' -> alias '%s'", raw_venue, canonical)
            return canonical

        if existing_venues is not None:
            match = self.find_similar_venue(raw_venue, existing_venues)
            if match is not None:
                logger.debug("Venue '%s' -> using existing '%s' (%.2f)", raw_venue, match.title, match.similarity_score)
                return match.title

        formatted = format_venue_name(raw_venue)
        logger.debug("Venue '%s' -> normalized to '%s'", raw_venue, formatted)
        return formatted

    def resolve_with_lookup(self, raw_venue) -> str:
        """
        Resolve against the venues currently in storage.
        If storage cannot be read, resolution continues without it.
        """
        if self.venue_lookup is None:
            return self.resolve(raw_venue)
        # Alias hits, blank and malformed input never need the stored venues
        if not isinstance(raw_venue, str) or not raw_venue.strip() or self.lookup_alias(raw_venue) is not None:
            return self.resolve(raw_venue)
        try:
            existing_venues = self.venue_lookup.get_distinct_venues()
        except Exception as e:
            logger.warning("Could not read stored venues, resolving '%s' without them: %s", raw_venue, e)
            existing_venues = None
        return self.resolve(raw_venue, existing_venues)
