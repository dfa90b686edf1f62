# -*- coding: utf-8 -*-
"""
LocForge Entry Models

- BilingualEntry: one translation key paired across both languages
- TranslationStats: completion counters for a list of entries
- EditDraft: values of an edit in progress
"""

from dataclasses import dataclass
from typing import Optional

from locforge_config import MISSING_PLACEHOLDER, PRIMARY_LANGUAGE, SECONDARY_LANGUAGE


def is_missing(value: Optional[str]) -> bool:
    """Absent (None) and empty values both count as untranslated."""
    return not value


@dataclass(frozen=True)
class BilingualEntry:
    """
    One translation unit of a namespace.

    None means the key does not exist in that language's bundle;
    "" means it exists with an explicitly empty value.
    """
    key: str
    primary_value: Optional[str]
    secondary_value: Optional[str]
    namespace: str

    @property
    def is_missing_primary(self) -> bool:
        return is_missing(self.primary_value)

    @property
    def is_missing_secondary(self) -> bool:
        return is_missing(self.secondary_value)

    @property
    def is_complete(self) -> bool:
        return not (self.is_missing_primary or self.is_missing_secondary)

    def value_for(self, language: str) -> Optional[str]:
        if language == PRIMARY_LANGUAGE:
            return self.primary_value
        if language == SECONDARY_LANGUAGE:
            return self.secondary_value
        raise ValueError(f"Unsupported language: '{language}'")

    def display_value(self, language: str) -> str:
        value = self.value_for(language)
        return value if not is_missing(value) else MISSING_PLACEHOLDER


@dataclass(frozen=True)
class TranslationStats:
    total: int = 0
    missing_primary: int = 0
    missing_secondary: int = 0
    complete: int = 0
    completion_percent: int = 0

    def as_dict(self) -> dict:
        return {
            "total": self.total,
            "missing_primary": self.missing_primary,
            "missing_secondary": self.missing_secondary,
            "complete": self.complete,
            "completion_percent": self.completion_percent,
        }


@dataclass
class EditDraft:
    """Mutable values of the entry being edited."""
    key: str
    primary_value: str = ""
    secondary_value: str = ""
