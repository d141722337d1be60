import argparse
import sys

from tabulate import tabulate

from venue_utils.conf_management import load_venue_conf, load_alias_table
from venue_utils.db_management import DBManager
from venue_utils.duplicate_detector import (
    find_duplicate_groups,
    suggest_alias_merges,
    groups_to_merge_records,
)
from venue_utils.merge_plan import save_merge_records
from venue_utils.pretty_print_utils import pretty_print, format_color_string, setup_logging
from venue_utils.venue_resolver import VenueResolver

venue_conf = load_venue_conf()


def display_duplicate_groups(duplicates):
    if not duplicates:
        pretty_print(format_color_string("No potential duplicates found!", "green", "bold"))
        return
    pretty_print(f"Found {len(duplicates)} potential duplicate groups:\n")
    for i, group in enumerate(duplicates.values(), 1):
        rows = [(group.primary, "primary")] + [(venue, f"{score * 100:.1f}%") for venue, score in group.similar_venues]
        pretty_print(format_color_string(f"Group {i}", "magenta", "bold"))
        print(tabulate(rows, headers=["Venue", "Match"], tablefmt="grid", stralign="left", disable_numparse=True), "\n")


def display_merge_records(records, title: str):
    if not records:
        return
    pretty_print(format_color_string(title, "magenta", "bold"))
    rows = [(", ".join(record.variations), record.canonical, record.reason) for record in records]
    print(tabulate(rows, headers=["Variations", "Canonical", "Reason"], tablefmt="grid", stralign="left", disable_numparse=True), "\n")


def find_duplicate_venues(db_manager: DBManager, resolver: VenueResolver, similarity_threshold: float, output_plan: str = ""):
    """
    Report venues that look like duplicates. Nothing in the database is changed.
    """
    venues = db_manager.get_distinct_venues()
    duplicates = find_duplicate_groups(venues, similarity_threshold)
    display_duplicate_groups(duplicates)

    alias_records = suggest_alias_merges(venues, resolver)
    display_merge_records(alias_records, "Suggested merges based on known aliases:")

    if output_plan:
        records = alias_records + groups_to_merge_records(duplicates, resolver, alias_records)
        save_merge_records(records, output_plan)
        pretty_print(f"Draft merge plan with {len(records)} merges written to {output_plan}")
        pretty_print("Review it, then run 3_merge_venues.py --plan_file " + output_plan)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description='Find duplicate venues')
    parser.add_argument('--db_path', help='db path', type=str, default=venue_conf["db_path"])
    parser.add_argument('--alias_file', help='JSON alias table (default: built-in table)', type=str, default=venue_conf["alias_file"])
    parser.add_argument('--similarity_threshold', help='Venue name similarity threshold (0.0-1.0)',
                        type=float, default=venue_conf["duplicate_threshold"])
    parser.add_argument('--output_plan', help='Write a draft merge plan to this JSON file', type=str, default="")
    parser.add_argument('--verbose', action='store_true')
    args = parser.parse_args()
    setup_logging(args.verbose)

    db_manager = DBManager(args.db_path)
    try:
        resolver = VenueResolver(load_alias_table(args.alias_file), db_manager, venue_conf["similarity_threshold"])
        find_duplicate_venues(db_manager, resolver, args.similarity_threshold, args.output_plan)
    except (OSError, ValueError) as e:
        pretty_print(format_color_string(f"Error: {e}", "red", "bold"))
        sys.exit(1)
    finally:
        db_manager.close()
