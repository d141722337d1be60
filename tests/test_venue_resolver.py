import logging

import pytest

from venue_utils.alias_table import AliasTable
from venue_utils.db_management import VenueLookup
from venue_utils.venue_aliases import DEFAULT_VENUE_ALIASES
from venue_utils.venue_resolver import VenueResolver


class StaticLookup(VenueLookup):
    def __init__(self, venues):
        self.venues = venues
        self.calls = 0

    def get_distinct_venues(self):
        self.calls += 1
        return list(self.venues)


class FailingLookup(VenueLookup):
    def get_distinct_venues(self):
        raise ValueError("Failed to get distinct venues: database is locked")


@pytest.fixture
def resolver():
    return VenueResolver(AliasTable.default())


@pytest.fixture
def aliasless_resolver():
    return VenueResolver(AliasTable({}))


@pytest.mark.parametrize("raw", ["", None, "   ", 17])
def test_malformed_input_is_unknown_venue(resolver, raw):
    assert resolver.resolve(raw) == "Unknown Venue"


def test_spelling_variants_converge(resolver):
    raw_names = ["La Estacion", "la estación   ", "ESTACION", "La Estaci\u00c3\u00b3n"]
    assert {resolver.resolve(raw) for raw in raw_names} == {"La Estación Córdoba"}


def test_most_specific_alias_wins(resolver):
    assert resolver.resolve("La Estacion Outdoor") == "La Estación Córdoba - Outdoor"
    assert resolver.resolve("La Estacion Indoor") == "La Estación Córdoba - Indoor"


def test_alias_is_tried_before_similarity(resolver, aliasless_resolver):
    assert resolver.resolve("Chilli") == "Chilli Street Club"
    assert resolver.resolve("Chilli", ["Chilli Street Club"]) == "Chilli Street Club"
    # Without the alias, similarity alone does not reach the canonical name
    assert aliasless_resolver.resolve("Chilli") == "Chilli"
    assert aliasless_resolver.resolve("Chilli", ["Chilli Street Club"]) == "Chilli"


def test_reuses_close_existing_venue(aliasless_resolver):
    assert aliasless_resolver.resolve("velvet lounje", ["Velvet Lounge", "Canario Disco"]) == "Velvet Lounge"


def test_existing_venue_must_exceed_threshold():
    resolver = VenueResolver(AliasTable({}), similarity_threshold=12 / 13)
    assert resolver.resolve("velvet lounje", ["Velvet Lounge"]) == "Velvet Lounje"


def test_existing_venues_are_compared_in_canonical_form(resolver):
    # Stored "Cazona" resolves to its alias before scoring
    assert resolver.resolve("Cazonna Casa Club Bar", ["Cazona"]) == "Cazona Casa Club"


def test_fallback_formats_new_venue(resolver):
    assert resolver.resolve("  teatro LIBERTADOR (ex gran rex) ") == "Teatro Libertador"
    assert resolver.resolve("VELVET  CLUB") == "Velvet"
    assert resolver.resolve("VELVET  CLUB", []) == "Velvet"


@pytest.mark.parametrize("raw", [
    "La Estacion Outdoor",
    "Chilli",
    "VELVET  CLUB",
    "tbd",
    "Teatro Libertador (ex Gran Rex)",
    "lima2 - multiespacio",
    "Online - Streaming",
    "CSC Club",
    "CSC (Nueva C\u00f3rdoba)",
    "TBD Teatro",
    "tbd (a confirmar)",
    "",
])
def test_resolution_is_idempotent(resolver, raw):
    resolved = resolver.resolve(raw)
    assert resolver.resolve(resolved) == resolved


def test_resolution_with_snapshot_is_idempotent(aliasless_resolver):
    existing = ["Velvet Lounge", "Lima2 - Multiespacio"]
    resolved = aliasless_resolver.resolve("velvet lounje", existing)
    assert aliasless_resolver.resolve(resolved, existing) == resolved


def test_equal_scores_pick_smallest_name(aliasless_resolver):
    assert aliasless_resolver.resolve("Velvet Loungx", ["Velvet Loungz", "Velvet Loungy"]) == "Velvet Loungy"


def test_resolve_with_lookup_uses_stored_venues():
    lookup = StaticLookup(["Velvet Lounge"])
    resolver = VenueResolver(AliasTable({}), lookup)
    assert resolver.resolve_with_lookup("velvet lounje") == "Velvet Lounge"
    assert lookup.calls == 1


def test_resolve_with_lookup_skips_storage_on_alias_hit():
    lookup = StaticLookup(["Velvet Lounge"])
    resolver = VenueResolver(AliasTable.default(), lookup)
    assert resolver.resolve_with_lookup("Canario") == "Canario Disco"
    assert resolver.resolve_with_lookup(None) == "Unknown Venue"
    assert lookup.calls == 0


def test_resolve_with_lookup_degrades_when_storage_fails(caplog):
    resolver = VenueResolver(AliasTable({}), FailingLookup())
    with caplog.at_level(logging.WARNING, logger="venue_utils.venue_resolver"):
        assert resolver.resolve_with_lookup("velvet lounje") == "Velvet Lounje"
    assert "database is locked" in caplog.text


def test_resolve_with_lookup_without_lookup(resolver):
    assert resolver.resolve_with_lookup("la barra boliche") == "La Barra Boliche"


def test_invalid_threshold_is_rejected():
    with pytest.raises(ValueError):
        VenueResolver(AliasTable({}), similarity_threshold=1.5)


def test_short_alias_matches_after_formatting(resolver):
    assert resolver.resolve("CSC Club") == "Chilli Street Club"
    assert resolver.resolve("CSC (Nueva C\u00f3rdoba)") == "Chilli Street Club"
    assert resolver.resolve("TBD Teatro") == "To Be Determined"
    assert resolver.normalize_venue_name("tbd (a confirmar)") == "To Be Determined"


def test_short_alias_is_tried_before_similarity(resolver):
    assert resolver.resolve("CSC Club", ["Cse"]) == "Chilli Street Club"
    match = resolver.find_similar_venue("CSC Club", ["Chilli Street Club"])
    assert match.title == "Chilli Street Club"
    assert match.similarity_score == 1.0


@pytest.mark.parametrize("suffix", ["", " Club", " (x)"])
def test_every_default_alias_is_idempotent(resolver, suffix):
    for variant in DEFAULT_VENUE_ALIASES:
        resolved = resolver.resolve(variant + suffix)
        assert resolver.resolve(resolved) == resolved, variant + suffix


def test_resolve_with_lookup_skips_storage_on_blank_input():
    lookup = StaticLookup(["Velvet Lounge"])
    resolver = VenueResolver(AliasTable.default(), lookup)
    assert resolver.resolve_with_lookup("   ") == "Unknown Venue"
    assert lookup.calls == 0
