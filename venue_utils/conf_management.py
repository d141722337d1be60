import os
import json
from typing import Any, Dict

from dotenv import load_dotenv

from venue_utils.alias_table import AliasTable

VENUE_CONF_PATH = "venue_conf.json"

DEFAULT_VENUE_CONF = {
    "db_path": "shows.db",
    "alias_file": "",
    "similarity_threshold": 0.75,
    "duplicate_threshold": 0.7,
    "confirmation_text": "CONFIRM",
}

# Environment variables that override values from the conf file
ENV_OVERRIDES = {
    "VENUE_DB_PATH": "db_path",
    "VENUE_ALIAS_FILE": "alias_file",
}


def load_venue_conf(conf_path: str = VENUE_CONF_PATH) -> Dict[str, Any]:
    """
    Load the venue configuration, falling back to defaults for anything missing.
    """
    load_dotenv()
    venue_conf = dict(DEFAULT_VENUE_CONF)
    if os.path.exists(conf_path):
        with open(conf_path, "r") as f:
            venue_conf.update(json.load(f))

    for env_name, key in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            venue_conf[key] = value

    for key in ("similarity_threshold", "duplicate_threshold"):
        venue_conf[key] = float(venue_conf[key])
        if not 0.0 <= venue_conf[key] <= 1.0:
            raise ValueError(f"{key} must be between 0 and 1, got {venue_conf[key]}")
    return venue_conf


def load_alias_table(alias_file: str = "") -> AliasTable:
    return AliasTable.from_json(alias_file) if alias_file else AliasTable.default()
