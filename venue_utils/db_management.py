import sqlite3
import hashlib
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from typing import List

from venue_utils.text_normalization import clean_text

logger = logging.getLogger(__name__)


class VenueLookup(ABC):
    """Read access to the venue names currently stored."""

    @abstractmethod
    def get_distinct_venues(self) -> List[str]:
        pass


class VenueStore(VenueLookup):
    """Venue lookup that can also rewrite stored venue names."""

    @abstractmethod
    def update_venue(self, variation: str, canonical: str) -> int:
        """Rewrite every record whose venue equals variation. Returns the number of records changed."""
        pass


@dataclass
class ShowData:
    id: str = ""
    name: str = ""
    artist: str = ""
    venue: str = ""
    date: str = ""
    description: str = ""
    image_url: str = ""
    source: str = ""


@dataclass
class VenueStat:
    name: str
    show_count: int


def make_show_id(name: str, date: str, venue: str) -> str:
    key = f"{name.lower().strip()}|{date.strip()}|{venue.lower().strip()}"
    return hashlib.sha1(key.encode("utf-8")).hexdigest()


def build_show_data(raw_show: dict, venue: str) -> ShowData:
    """
    Build the stored show from a scraped record and its resolved venue.
    """
    show_info = {}
    show_info["name"] = clean_text(raw_show.get("name", ""))
    show_info["artist"] = clean_text(raw_show.get("artist", ""))
    show_info["venue"] = venue
    show_info["date"] = str(raw_show.get("date", "") or "").strip()
    show_info["description"] = clean_text(raw_show.get("description", ""))
    show_info["image_url"] = raw_show.get("imageUrl", raw_show.get("image_url", "")) or ""
    show_info["source"] = raw_show.get("source", "") or ""
    show_info["id"] = make_show_id(show_info["name"], show_info["date"], venue)
    return ShowData(**show_info)


class DBManager(VenueStore):
    SQL_TYPES = {
        str: 'TEXT',
        int: 'INTEGER',
        float: 'REAL',
        bool: 'BOOLEAN'
    }
    TABLE_NAME = "shows"

    def __init__(self, db_path: str):
        self.conn = sqlite3.connect(db_path)
        self.cursor = self.conn.cursor()

    def close(self):
        self.cursor.close()
        self.conn.close()

    # -------------------------- Shows Table Methods --------------------------

    def create_shows_table(self):
        table_name = self.TABLE_NAME
        try:
            tables_found = self.cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name=?", (table_name,)
            ).fetchall()
            if tables_found != []:
                return

            field_definitions = []
            for field in fields(ShowData):
                if field.type not in self.SQL_TYPES:
                    raise ValueError(f"Unsupported field type: {field.type}")
                definition = f"{field.name} {self.SQL_TYPES[field.type]}"
                if field.name == "id":
                    definition += " PRIMARY KEY"
                field_definitions.append(definition)

            self.cursor.execute(f"CREATE TABLE IF NOT EXISTS {table_name} ({', '.join(field_definitions)})")
            self.cursor.execute(f"CREATE INDEX IF NOT EXISTS idx_{table_name}_venue ON {table_name} (venue)")
            self.conn.commit()
        except Exception as e:
            self.conn.rollback()
            raise ValueError(f"Failed to create shows table: {e}")

    def insert_show_data(self, data: List[ShowData]) -> int:
        """Insert shows, ignoring ones already stored. Returns the number of new rows."""
        table_name = self.TABLE_NAME
        if not data:
            return 0
        try:
            data_dicts = [{field.name: getattr(show, field.name) for field in fields(ShowData)} for show in data]
            columns = ', '.join(data_dicts[0].keys())
            placeholders = ', '.join(['?'] * len(data_dicts[0]))
            sql_query = f"INSERT OR IGNORE INTO {table_name} ({columns}) VALUES ({placeholders})"

            before = self.conn.total_changes
            self.cursor.executemany(sql_query, [tuple(data_dict.values()) for data_dict in data_dicts])
            self.conn.commit()
            return self.conn.total_changes - before
        except Exception as e:
            self.conn.rollback()
            raise ValueError(f"Could not add shows to table: {e}")

    def get_show_data(self, **kwargs) -> List[ShowData]:
        table_name = self.TABLE_NAME
        known_fields = {field.name for field in fields(ShowData)}
        unknown = set(kwargs) - known_fields
        if unknown:
            raise ValueError(f"Unknown show fields: {', '.join(sorted(unknown))}")
        try:
            columns = ', '.join(field.name for field in fields(ShowData))
            if kwargs:
                conditions = ' AND '.join([f"{key} = ?" for key in kwargs.keys()])
                self.cursor.execute(f"SELECT {columns} FROM {table_name} WHERE {conditions}", list(kwargs.values()))
            else:
                self.cursor.execute(f"SELECT {columns} FROM {table_name}")

            rows = self.cursor.fetchall()
            return [ShowData(*row) for row in rows]
        except Exception as e:
            self.conn.rollback()
            raise ValueError(f"Failed to get show data: {e}")

    # -------------------------- Venue Methods --------------------------

    def get_distinct_venues(self) -> List[str]:
        table_name = self.TABLE_NAME
        try:
            self.cursor.execute(
                f"SELECT DISTINCT venue FROM {table_name} WHERE venue IS NOT NULL AND venue != '' ORDER BY venue"
            )
            return [row[0] for row in self.cursor.fetchall()]
        except Exception as e:
            self.conn.rollback()
            raise ValueError(f"Failed to get distinct venues: {e}")

    def update_venue(self, variation: str, canonical: str) -> int:
        table_name = self.TABLE_NAME
        try:
            self.cursor.execute(f"UPDATE {table_name} SET venue = ? WHERE venue = ?", (canonical, variation))
            updated = self.cursor.rowcount
            self.conn.commit()
            logger.debug("Rewrote %d shows from '%s' to '%s'", updated, variation, canonical)
            return updated
        except Exception as e:
            self.conn.rollback()
            raise ValueError(f"Failed to update venue: {e}")

    def get_venue_stats(self) -> List[VenueStat]:
        table_name = self.TABLE_NAME
        try:
            self.cursor.execute(
                f"""SELECT venue, COUNT(*) FROM {table_name}
                    WHERE venue IS NOT NULL AND venue != ''
                    GROUP BY venue ORDER BY COUNT(*) DESC, venue"""
            )
            return [VenueStat(name=venue, show_count=count) for venue, count in self.cursor.fetchall()]
        except Exception as e:
            self.conn.rollback()
            raise ValueError(f"Failed to get venue stats: {e}")


def initialize_db(db_path: str) -> DBManager:
    db_manager = DBManager(db_path)
    db_manager.create_shows_table()
    return db_manager
