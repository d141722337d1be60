import pytest

from venue_utils.db_management import VenueStore, initialize_db


class InMemoryVenueStore(VenueStore):
    """Venue store over a {venue: show_count} dict; updates of failing venues raise."""

    def __init__(self, venue_counts, failing=()):
        self.venue_counts = dict(venue_counts)
        self.failing = set(failing)
        self.update_calls = []
        self.read_calls = 0

    def get_distinct_venues(self):
        self.read_calls += 1
        return sorted(venue for venue in self.venue_counts if venue)

    def update_venue(self, variation, canonical):
        self.update_calls.append((variation, canonical))
        if variation in self.failing:
            raise ValueError("Failed to update venue: database is locked")
        count = self.venue_counts.pop(variation, 0)
        if count:
            self.venue_counts[canonical] = self.venue_counts.get(canonical, 0) + count
        return count


@pytest.fixture
def venue_store():
    return InMemoryVenueStore({
        "Chilli": 3,
        "Chilli Street": 1,
        "CSC": 2,
        "Chilli Street Club": 5,
        "VELVET  CLUB": 1,
        "VELVET CLUB": 4,
    })


@pytest.fixture
def db_manager(tmp_path):
    db_manager = initialize_db(str(tmp_path / "shows.db"))
    yield db_manager
    db_manager.close()
