import argparse
import sys
from typing import List

from tabulate import tabulate

from venue_utils.conf_management import load_venue_conf
from venue_utils.db_management import DBManager
from venue_utils.merge_plan import (
    MergePlan,
    MergeRecord,
    MergeNotConfirmedError,
    apply_merge_plan,
    load_merge_records,
)
from venue_utils.pretty_print_utils import pretty_print, format_color_string, prompt_input, setup_logging

venue_conf = load_venue_conf()


def display_merge_plan(records: List[MergeRecord]):
    rows = [(i, "\n".join(record.variations), record.canonical, record.reason) for i, record in enumerate(records, 1)]
    print(tabulate(rows, headers=["#", "Variations", "Canonical", "Reason"], tablefmt="grid", stralign="left", disable_numparse=True))


def confirm_merge_plan(records: List[MergeRecord], confirmation: str, expected: str) -> MergePlan:
    """
    Build the merge plan from the operator's confirmation, asking for it if it was not given.
    """
    if confirmation is None:
        confirmation = prompt_input(
            f"\nThis will rewrite the venue of every matching show. Type {format_color_string(expected, 'red', 'bold')} to proceed"
        )
    return MergePlan.confirm(records, confirmation, expected)


def merge_venues(db_manager: DBManager, plan: MergePlan):
    total_updated = 0
    total_rows = 0
    total_errors = 0

    results = apply_merge_plan(db_manager, plan)
    for record, result in zip(plan, results):
        variations = '", "'.join(record.variations)
        pretty_print(f'\nMerging: "{format_color_string(variations, "magenta", "bold")}" -> "{format_color_string(record.canonical, "magenta", "bold")}"')
        if record.reason:
            pretty_print(f"   Reason: {record.reason}")
        if result.updated > 0:
            pretty_print(format_color_string(f"   Merged {result.updated} variations ({result.rows_updated} shows)", "green", ""))
        for error in result.errors:
            pretty_print(format_color_string(f"   {error}", "red", ""))
        total_updated += result.updated
        total_rows += result.rows_updated
        total_errors += len(result.errors)

    pretty_print(format_color_string("\nMerge complete!", "green", "bold"))
    pretty_print(f"   Total variations merged: {total_updated}")
    pretty_print(f"   Total shows updated: {total_rows}")
    pretty_print(f"   Total errors: {total_errors}")
    return total_errors


def display_top_venues(db_manager: DBManager, top_k: int = 10):
    stats = db_manager.get_venue_stats()
    pretty_print(f"\nTotal unique venues: {len(stats)}")
    pretty_print(f"Top {top_k} venues by show count:")
    print(tabulate([(stat.name, stat.show_count) for stat in stats[:top_k]], headers=["Venue", "Shows"], tablefmt="grid"))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description='Merge venue variations into their canonical names')
    parser.add_argument('--plan_file', help='JSON file with the merges to apply', type=str, required=True)
    parser.add_argument('--db_path', help='db path', type=str, default=venue_conf["db_path"])
    parser.add_argument('--confirm', help='Confirmation text, skips the interactive prompt', type=str, default=None)
    parser.add_argument('--verbose', action='store_true')
    args = parser.parse_args()
    setup_logging(args.verbose)

    try:
        records = load_merge_records(args.plan_file)
    except (OSError, ValueError) as e:
        pretty_print(format_color_string(f"Error: {e}", "red", "bold"))
        sys.exit(1)
    if not records:
        pretty_print("Nothing to merge.")
        sys.exit(0)

    display_merge_plan(records)
    try:
        plan = confirm_merge_plan(records, args.confirm, venue_conf["confirmation_text"])
    except MergeNotConfirmedError as e:
        pretty_print(format_color_string(f"{e}. Nothing was changed.", "yellow", "bold"))
        sys.exit(1)

    db_manager = DBManager(args.db_path)
    try:
        errors = merge_venues(db_manager, plan)
        display_top_venues(db_manager)
    except ValueError as e:
        pretty_print(format_color_string(f"Error: {e}", "red", "bold"))
        sys.exit(1)
    finally:
        db_manager.close()
    sys.exit(1 if errors else 0)
