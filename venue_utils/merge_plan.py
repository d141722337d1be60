import json
import logging
from dataclasses import dataclass, field, asdict
from typing import List, Sequence

from venue_utils.db_management import VenueStore

logger = logging.getLogger(__name__)

DEFAULT_CONFIRMATION_TEXT = "CONFIRM"

_CONFIRMED = object()


class MergeNotConfirmedError(Exception):
    pass


@dataclass
class MergeRecord:
    variations: List[str]
    canonical: str
    reason: str = ""

    def __post_init__(self):
        if not isinstance(self.canonical, str) or not self.canonical.strip():
            raise ValueError("Merge record needs a canonical venue name")
        if not self.variations or not all(isinstance(v, str) and v for v in self.variations):
            raise ValueError(f"Merge record for '{self.canonical}' needs at least one non-empty variation")
        self.variations = list(self.variations)

    @classmethod
    def from_dict(cls, data: dict) -> "MergeRecord":
        if not isinstance(data, dict):
            raise ValueError(f"Merge entry must be an object with variations and canonical, got {data!r}")
        return cls(
            variations=data.get("variations", []),
            canonical=data.get("canonical", ""),
            reason=data.get("reason", ""),
        )


@dataclass
class MergeResult:
    canonical: str
    updated: int = 0
    rows_updated: int = 0
    errors: List[str] = field(default_factory=list)


class MergePlan:
    """
    Merge records an operator has confirmed.

    Plans are only built through MergePlan.confirm, which checks the
    confirmation text, so code holding a MergePlan can apply it without
    prompting again.
    """

    def __init__(self, records: Sequence[MergeRecord], _token=None):
        if _token is not _CONFIRMED:
            raise TypeError("Use MergePlan.confirm to build a merge plan")
        self.records = list(records)

    @classmethod
    def confirm(cls, records: Sequence[MergeRecord], confirmation: str,
                expected: str = DEFAULT_CONFIRMATION_TEXT) -> "MergePlan":
        if (confirmation or "").strip() != expected:
            raise MergeNotConfirmedError(f"Merge not confirmed: expected '{expected}'")
        return cls(records, _token=_CONFIRMED)

    def __len__(self):
        return len(self.records)

    def __iter__(self):
        return iter(self.records)


def load_merge_records(path: str) -> List[MergeRecord]:
    """
    Read merge records from a JSON file, either {"merges": [...]} or a bare list.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("merges", [])
    if not isinstance(data, list):
        raise ValueError(f"Merge file {path} must contain a list of merges")
    return [MergeRecord.from_dict(entry) for entry in data]


def save_merge_records(records: Sequence[MergeRecord], path: str):
    with open(path, "w", encoding="utf-8") as f:
        json.dump({"merges": [asdict(record) for record in records]}, f, indent=4, ensure_ascii=False)


def merge_variations(venue_store: VenueStore, variations: Sequence[str], canonical: str) -> MergeResult:
    """
    Rewrite every stored show whose venue is one of the variations to the canonical name.

    Each variation is updated on its own; a failed update is recorded in
    errors and the remaining variations are still processed.
    """
    result = MergeResult(canonical=canonical)
    for variation in variations:
        try:
            rows = venue_store.update_venue(variation, canonical)
            result.updated += 1
            result.rows_updated += rows or 0
            logger.info("Merged '%s' into '%s' (%s shows)", variation, canonical, rows)
        except Exception as e:
            error_msg = f'Failed to merge "{variation}": {e}'
            result.errors.append(error_msg)
            logger.error(error_msg)
    return result


def apply_merge_plan(venue_store: VenueStore, plan: MergePlan) -> List[MergeResult]:
    if not isinstance(plan, MergePlan):
        raise TypeError("apply_merge_plan needs a confirmed MergePlan")
    return [merge_variations(venue_store, record.variations, record.canonical) for record in plan]
