"""Record rules: dedup keeps first-seen order; exclusion returns (passed, explanation, rule_id)."""

import re
from typing import Iterable

from conversion_report.models.record import RawRecord


def dedupe_records(records: Iterable[RawRecord], key_field: str) -> list[RawRecord]:
    """
    Keep the first record per distinct key value, in input order.
    Records without a key value cannot collide and are all kept.
    Idempotent: deduping the output again returns it unchanged.
    """
    seen: set = set()
    unique: list[RawRecord] = []
    for record in records:
        key = record.get_path(key_field) if key_field else None
        if key is None:
            unique.append(record)
            continue
        marker = key if isinstance(key, (str, int, float, bool)) else repr(key)
        if marker in seen:
            continue
        seen.add(marker)
        unique.append(record)
    return unique


def apply_exclusion_rule(
    record: RawRecord,
    field: str,
    pattern: re.Pattern[str] | None,
) -> tuple[bool, str, str]:
    """Exclude a record whose URL field matches the pattern (searched anywhere in the value)."""
    if pattern is None or not field:
        return True, "Exclusion filter not set", "exclusion"
    value = record.get_path(field)
    if not isinstance(value, str) or not value:
        return True, f"No {field} on record", "exclusion"
    if pattern.search(value):
        return False, f"Excluded: {field} {value} matches {pattern.pattern}", "exclusion"
    return True, f"Kept: {field} {value}", "exclusion"
