import re
import html
from typing import Optional, Tuple

from unidecode import unidecode

UNKNOWN_VENUE = "Unknown Venue"

MIN_VENUE_NAME_LENGTH = 2
MAX_VENUE_NAME_LENGTH = 255

# Trailing words that describe the kind of place rather than the place itself
VENUE_TYPE_SUFFIXES = (
    "centro cultural",
    "teatro",
    "club",
    "venue",
    "stadium",
    "estadio",
    "arena",
    "coliseum",
    "auditorium",
    "centro",
    "espacio",
    "lugar",
)

_ZERO_WIDTH_RE = re.compile(r"[\u200b-\u200d\ufeff]")
_WHITESPACE_RE = re.compile(r"\s+")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")
_PARENTHETICAL_RE = re.compile(r"\s*\([^)]*\)\s*")
_SUFFIX_RE = re.compile(
    r"\s+(?:" + "|".join(re.escape(s) for s in VENUE_TYPE_SUFFIXES) + r")\s*$",
    flags=re.I,
)
# Byte sequences left behind when UTF-8 text is decoded as Latin-1
_MOJIBAKE_RE = re.compile(r"[\u00c2\u00c3][\u0080-\u00bf]")


def _repair_mojibake(s: str) -> str:
    if not _MOJIBAKE_RE.search(s):
        return s
    try:
        return s.encode("latin-1").decode("utf-8")
    except (UnicodeEncodeError, UnicodeDecodeError):
        return s


def clean_text(raw) -> str:
    """
    Clean scraped text for display: unescape entities, repair encoding and collapse whitespace.
    Case, accents and punctuation are kept.
    """
    if not isinstance(raw, str):
        return ""
    s = html.unescape(raw)
    s = _repair_mojibake(s)
    s = _ZERO_WIDTH_RE.sub("", s).replace("\u00a0", " ")
    return _WHITESPACE_RE.sub(" ", s).strip()


def normalize_venue_key(raw) -> str:
    """
    Normalize a venue string into the form used for matching.

    The key is lowercase ASCII with every run of whitespace or punctuation
    collapsed to a single space, so "La Estación  (Córdoba)" and
    "la estacion cordoba" produce the same key.
    """
    s = clean_text(raw)
    if not s:
        return ""
    s = unidecode(s).lower()
    return _NON_ALNUM_RE.sub(" ", s).strip()


def strip_venue_suffixes(name: str) -> str:
    """Remove parenthetical asides and trailing venue-type words."""
    name = _PARENTHETICAL_RE.sub(" ", name).strip()
    while True:
        stripped = _SUFFIX_RE.sub("", name).strip()
        if stripped == name:
            return name
        name = stripped


def title_case(name: str) -> str:
    return " ".join(word[:1].upper() + word[1:].lower() for word in name.split())


def format_venue_name(raw) -> str:
    """
    Mint a display name for a venue that has no known canonical form.
    """
    cleaned = clean_text(raw)
    if not cleaned:
        return UNKNOWN_VENUE
    stripped = _WHITESPACE_RE.sub(" ", strip_venue_suffixes(cleaned)).strip()
    return title_case(stripped or cleaned)


def validate_venue_name(venue) -> Tuple[bool, Optional[str]]:
    if not isinstance(venue, str) or len(venue) == 0:
        return False, "Venue name cannot be empty"
    if len(venue) > MAX_VENUE_NAME_LENGTH:
        return False, "Venue name is too long"
    if len(venue) < MIN_VENUE_NAME_LENGTH:
        return False, "Venue name is too short"
    return True, None
