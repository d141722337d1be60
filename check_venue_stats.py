import argparse

import pandas as pd
from tabulate import tabulate

from venue_utils.conf_management import load_venue_conf, load_alias_table
from venue_utils.db_management import DBManager

venue_conf = load_venue_conf()


def check_venue_stats(db_path: str, top_k: int = 0, output_path: str = ""):
    db_manager = DBManager(db_path)
    try:
        stats = db_manager.get_venue_stats()
    finally:
        db_manager.close()

    print(f"Current venues ({len(stats)} total):")
    shown = stats[:top_k] if top_k else stats
    print(tabulate([(stat.name, stat.show_count) for stat in shown], headers=["Venue", "Shows"], tablefmt="grid"))

    if output_path:
        venue_stats = pd.DataFrame([{"venue": stat.name, "shows": stat.show_count} for stat in stats])
        venue_stats.to_csv(output_path, index=False)
        print(f"Venue statistics written to {output_path}")


def show_aliases(alias_file: str):
    alias_table = load_alias_table(alias_file)
    variations = alias_table.variations_by_canonical()
    print(f"Known venues ({len(variations)} canonical names, {len(alias_table)} aliases):")
    print(tabulate([(canonical, ", ".join(keys)) for canonical, keys in variations.items()], headers=["Canonical", "Aliases"], tablefmt="grid"))


def parse_args():
    parser = argparse.ArgumentParser(description='Show how many shows each venue has')
    parser.add_argument("--db_path", type=str, default=venue_conf["db_path"])
    parser.add_argument("--top_k", help="only show the venues with most shows", type=int, default=0)
    parser.add_argument("--output_path", help="csv file to export the statistics", type=str, default="")
    parser.add_argument("--alias_file", help="JSON alias table (default: built-in table)", type=str, default=venue_conf["alias_file"])
    parser.add_argument("--show_aliases", help="list the known venue aliases instead", action="store_true")
    return parser.parse_args()

if __name__ == "__main__":
    args = parse_args()
    if args.show_aliases:
        show_aliases(args.alias_file)
    else:
        check_venue_stats(args.db_path, args.top_k, args.output_path)
