# -*- coding: utf-8 -*-
"""
LocForge Translation Statistics & Search

Completion counters and the case-insensitive search used by the editor.
"""

import math
from typing import List, Sequence

from models.bilingual_entry import BilingualEntry, TranslationStats


def _round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; 12.5 must give 13
    return int(math.floor(value + 0.5))


def compute_stats(entries: Sequence[BilingualEntry]) -> TranslationStats:
    """
    Count total / missing / complete entries.

    complete = total - max(missing_primary, missing_secondary). This is an
    approximation kept for compatibility with the web editor: it is not an
    exact count of entries present in both languages when the two languages
    miss different keys.
    """
    total = len(entries)
    missing_primary = sum(1 for e in entries if e.is_missing_primary)
    missing_secondary = sum(1 for e in entries if e.is_missing_secondary)
    complete = total - max(missing_primary, missing_secondary)
    completion = _round_half_up(complete / total * 100) if total > 0 else 0

    return TranslationStats(
        total=total,
        missing_primary=missing_primary,
        missing_secondary=missing_secondary,
        complete=complete,
        completion_percent=completion,
    )


def entry_matches(entry: BilingualEntry, query: str) -> bool:
    """Case-insensitive substring match on key, primary or secondary value."""
    if not query:
        return True
    term = query.lower()
    return (
        term in entry.key.lower()
        or term in (entry.primary_value or "").lower()
        or term in (entry.secondary_value or "").lower()
    )


def filter_entries(entries: Sequence[BilingualEntry], query: str) -> List[BilingualEntry]:
    """Entries matching query, in their original order. Empty query returns everything."""
    if not query:
        return list(entries)
    return [e for e in entries if entry_matches(e, query)]
