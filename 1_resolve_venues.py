import argparse
import json
import logging
import sys
from typing import List

from tqdm import tqdm

from venue_utils.conf_management import load_venue_conf, load_alias_table
from venue_utils.db_management import DBManager, ShowData, build_show_data, initialize_db
from venue_utils.pretty_print_utils import pretty_print, format_color_string, setup_logging
from venue_utils.text_normalization import validate_venue_name
from venue_utils.venue_resolver import VenueResolver

logger = logging.getLogger(__name__)

venue_conf = load_venue_conf()


def load_scraped_shows(input_file: str) -> List[dict]:
    """
    Load scraped shows from a JSON file, either a list of shows or {"shows": [...]}.
    """
    with open(input_file, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("shows", [])
    return [show for show in data if isinstance(show, dict)]


def resolve_shows(raw_shows: List[dict], resolver: VenueResolver, existing_venues: List[str] = None) -> List[ShowData]:
    """
    Resolve the venue of every scraped show.
    Newly minted venue names join the snapshot so later shows converge on them.
    """
    snapshot = set(existing_venues) if existing_venues is not None else None
    resolved_shows = []
    for raw_show in tqdm(raw_shows, desc="Resolving venues"):
        raw_venue = raw_show.get("venue")
        venue = resolver.resolve(raw_venue, snapshot)
        valid, error = validate_venue_name(venue)
        if not valid:
            logger.warning("Skipping show '%s': %s", raw_show.get("name", ""), error)
            continue
        if snapshot is not None:
            snapshot.add(venue)
        resolved_shows.append(build_show_data(raw_show, venue))
    return resolved_shows


def main(input_file: str, db_path: str, alias_file: str, similarity_threshold: float, check_existing: bool):
    db_manager = initialize_db(db_path)
    try:
        resolver = VenueResolver(load_alias_table(alias_file), similarity_threshold=similarity_threshold)
        raw_shows = load_scraped_shows(input_file)
        pretty_print(f"Scraped shows: {len(raw_shows)}")

        existing_venues = None
        if check_existing:
            try:
                existing_venues = db_manager.get_distinct_venues()
            except ValueError as e:
                logger.warning("Resolving without stored venues: %s", e)
        shows = resolve_shows(raw_shows, resolver, existing_venues)

        inserted = db_manager.insert_show_data(shows)
        venues = sorted({show.venue for show in shows})
        pretty_print(f"Venues: {len(venues)}")
        for venue in venues:
            pretty_print(f"  {format_color_string(venue, 'magenta', 'bold')}")
        pretty_print(f"Inserted {inserted} new shows out of {len(shows)}")
    finally:
        db_manager.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description='Resolve venue names of scraped shows and store them')
    parser.add_argument('--input_file', help='JSON file with scraped shows', type=str, required=True)
    parser.add_argument('--db_path', help='db path', type=str, default=venue_conf["db_path"])
    parser.add_argument('--alias_file', help='JSON alias table (default: built-in table)', type=str, default=venue_conf["alias_file"])
    parser.add_argument('--similarity_threshold', help='Similarity needed to reuse a stored venue (0.0-1.0)',
                        type=float, default=venue_conf["similarity_threshold"])
    parser.add_argument('--no_check_existing', help='Do not match against venues already stored', action='store_true')
    parser.add_argument('--verbose', action='store_true')
    args = parser.parse_args()
    setup_logging(args.verbose)
    try:
        main(args.input_file, args.db_path, args.alias_file, args.similarity_threshold, not args.no_check_existing)
    except (OSError, ValueError) as e:
        pretty_print(format_color_string(f"Error: {e}", "red", "bold"))
        sys.exit(1)
