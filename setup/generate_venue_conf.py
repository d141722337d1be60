import json

from argparse import ArgumentParser


def generate_threshold(label: str, default: float):
    while True:
        value = input(f"Enter the {label} similarity threshold (leave it blank to use {default}): ").strip()
        if value == "":
            return default
        try:
            threshold = float(value)
        except ValueError:
            print("Invalid threshold. Please enter a number between 0 and 1.")
            continue
        if 0.0 <= threshold <= 1.0:
            return threshold
        print("Invalid threshold. Please enter a number between 0 and 1.")

def generate_db_path():
    while True:
        db_path = input("Enter the db path: ")
        if db_path == "":
            continue
        else:
            return db_path

def generate_alias_file():
    return input("Enter the path to a JSON alias table (leave it blank to use the built-in table): ").strip()

def generate_confirmation_text():
    text = input("Enter the text operators must type to confirm merges (leave it blank to use CONFIRM): ").strip()
    return text if text else "CONFIRM"

def generate_venue_conf(args):
    db_path = args.db_path if args.db_path else generate_db_path()
    alias_file = args.alias_file if args.alias_file is not None else generate_alias_file()
    similarity_threshold = args.similarity_threshold if args.similarity_threshold is not None else generate_threshold("venue resolution", 0.75)
    duplicate_threshold = args.duplicate_threshold if args.duplicate_threshold is not None else generate_threshold("duplicate detection", 0.7)
    confirmation_text = args.confirmation_text if args.confirmation_text else generate_confirmation_text()

    return {
        "db_path": db_path,
        "alias_file": alias_file,
        "similarity_threshold": similarity_threshold,
        "duplicate_threshold": duplicate_threshold,
        "confirmation_text": confirmation_text
    }


def parse_args():
    parser = ArgumentParser(description='Generate venue configuration')
    parser.add_argument('--db_path', type=str, default="")
    parser.add_argument('--alias_file', type=str, default=None)
    parser.add_argument('--similarity_threshold', type=float, default=None)
    parser.add_argument('--duplicate_threshold', type=float, default=None)
    parser.add_argument('--confirmation_text', type=str, default="")
    parser.add_argument('--output', type=str, default="venue_conf.json")
    return parser.parse_args()

if __name__ == "__main__":
    args = parse_args()
    venue_conf = generate_venue_conf(args)
    with open(args.output, "w") as f:
        json.dump(venue_conf, f, indent=4)
