import random

import pytest

from venue_utils.alias_table import AliasTable
from venue_utils.db_management import VenueLookup
from venue_utils.duplicate_detector import (
    find_duplicate_groups,
    groups_to_merge_records,
    identify_duplicates,
    suggest_alias_merges,
)
from venue_utils.venue_resolver import VenueResolver


class FailingLookup(VenueLookup):
    def get_distinct_venues(self):
        raise ValueError("Failed to get distinct venues: no such table: shows")


def test_groups_similar_venues():
    duplicates = find_duplicate_groups(["VELVET  CLUB", "VELVET CLUB", "Teatro Real"])
    assert list(duplicates) == ["VELVET  CLUB"]
    group = duplicates["VELVET  CLUB"]
    assert group.venues() == ["VELVET  CLUB", "VELVET CLUB"]
    assert group.similar_venues[0][1] == pytest.approx(11 / 12)


def test_threshold_is_strict():
    assert find_duplicate_groups(["abcdefghij", "abcdefgxyz"], 0.7) == {}

    above = "a" * 71 + "b" * 29
    duplicates = find_duplicate_groups(["a" * 100, above], 0.7)
    assert duplicates["a" * 100].venues() == ["a" * 100, above]


def test_case_only_variants_are_duplicates():
    duplicates = find_duplicate_groups(["la barra boliche", "La Barra Boliche"])
    assert duplicates["La Barra Boliche"].similar_venues == [("la barra boliche", 1.0)]


def test_primary_does_not_depend_on_input_order():
    venues = ["Petalos de sol", "Pétalos de Sol", "Pétalos de sol", "Canario Disco", "Canario Disc0"]
    expected = find_duplicate_groups(venues)
    shuffled = list(venues)
    random.Random(7).shuffle(shuffled)
    assert find_duplicate_groups(shuffled) == expected
    assert list(expected) == ["Canario Disc0", "Petalos de sol", "Pétalos de Sol"]


def test_ignores_empty_and_repeated_venues():
    assert find_duplicate_groups(["", "Canario Disco", "Canario Disco"]) == {}


def test_identify_duplicates_reads_store(venue_store):
    duplicates = identify_duplicates(venue_store, 0.7)
    assert "VELVET  CLUB" in duplicates
    assert "VELVET CLUB" in duplicates["VELVET  CLUB"].venues()


def test_identify_duplicates_propagates_read_errors():
    with pytest.raises(ValueError, match="no such table"):
        identify_duplicates(FailingLookup())


def test_suggest_alias_merges():
    records = suggest_alias_merges(["Chilli", "Chilli Street Club", "CSC", "Velvet"], VenueResolver(AliasTable.default()))
    assert len(records) == 1
    assert records[0].canonical == "Chilli Street Club"
    assert records[0].variations == ["CSC", "Chilli"]


def test_groups_to_merge_records():
    duplicates = find_duplicate_groups(["VELVET  CLUB", "VELVET CLUB"])
    records = groups_to_merge_records(duplicates, VenueResolver(AliasTable({})))
    assert len(records) == 1
    assert records[0].canonical == "Velvet"
    assert records[0].variations == ["VELVET  CLUB", "VELVET CLUB"]
    assert records[0].reason == "Similar names (0.92)"


def test_groups_to_merge_records_skips_groups_already_canonical():
    duplicates = find_duplicate_groups(["Canario Disco", "canario disco"])
    records = groups_to_merge_records(duplicates, VenueResolver(AliasTable.default()))
    assert records[0].canonical == "Canario Disco"
    assert records[0].variations == ["canario disco"]


def test_suggest_alias_merges_matches_short_aliases_after_formatting():
    records = suggest_alias_merges(["CSC Club", "TBD Teatro"], VenueResolver(AliasTable.default()))
    assert [(record.canonical, record.variations) for record in records] == [
        ("Chilli Street Club", ["CSC Club"]),
        ("To Be Determined", ["TBD Teatro"]),
    ]


def test_groups_to_merge_records_merges_each_name_once():
    duplicates = find_duplicate_groups(["Velvet Clubx", "Velvet Cluby", "Velvet Clubz"])
    assert list(duplicates) == ["Velvet Clubx", "Velvet Cluby"]
    records = groups_to_merge_records(duplicates, VenueResolver(AliasTable({})))
    assert len(records) == 1
    assert records[0].canonical == "Velvet Clubx"
    assert records[0].variations == ["Velvet Cluby", "Velvet Clubz"]


def test_groups_to_merge_records_skips_names_in_existing_records(venue_store):
    resolver = VenueResolver(AliasTable.default())
    venues = venue_store.get_distinct_venues()
    alias_records = suggest_alias_merges(venues, resolver)
    records = groups_to_merge_records(find_duplicate_groups(venues), resolver, alias_records)
    assert [record.canonical for record in records] == ["Velvet"]

    variations = [v for record in alias_records + records for v in record.variations]
    assert len(variations) == len(set(variations))
    assert not set(variations) & {record.canonical for record in alias_records + records}
