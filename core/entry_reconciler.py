# -*- coding: utf-8 -*-
"""
LocForge Entry Reconciler

Joins the flattened primary and secondary trees of a namespace into a sorted
list of BilingualEntry, one per key present in either language.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from core.bundle_store import LocaleBundleStore
from core.locale_tree import flatten, leaf_to_text
from locforge_config import PRIMARY_LANGUAGE, SECONDARY_LANGUAGE
from locforge_logger import get_logger
from models.bilingual_entry import BilingualEntry

logger = get_logger("core.entry_reconciler")


class EntryReconciler:
    """
    Pure function of the store's current trees, cached per store version.

    While the loader reports the namespace as LOADING, reconcile() returns an
    empty list so partially written bundles are never shown.
    """

    def __init__(self, store: LocaleBundleStore, loader=None,
                 languages: Sequence[str] = (PRIMARY_LANGUAGE, SECONDARY_LANGUAGE)):
        self.store = store
        self.loader = loader
        self.primary_language, self.secondary_language = languages
        self._cache: Dict[str, Tuple[int, List[BilingualEntry]]] = {}

    def reconcile(self, namespace: str) -> List[BilingualEntry]:
        if self.loader is not None and self.loader.is_loading(namespace):
            return []

        version = self.store.version
        cached = self._cache.get(namespace)
        if cached is not None and cached[0] == version:
            return list(cached[1])

        entries = self._build(namespace)
        self._cache[namespace] = (version, entries)
        return list(entries)

    def _build(self, namespace: str) -> List[BilingualEntry]:
        primary_flat = flatten(self.store.get_bundle(self.primary_language, namespace))
        secondary_flat = flatten(self.store.get_bundle(self.secondary_language, namespace))

        keys = set(primary_flat) | set(secondary_flat)
        entries = [
            BilingualEntry(
                key=key,
                primary_value=self._text(primary_flat, key),
                secondary_value=self._text(secondary_flat, key),
                namespace=namespace,
            )
            for key in keys
        ]
        # A key holding null in both bundles carries no value at all
        entries = [e for e in entries if not (e.primary_value is None and e.secondary_value is None)]
        # Code point order, deterministic across runs
        entries.sort(key=lambda e: e.key)

        logger.debug(
            f"Reconciled '{namespace}': {len(entries)} keys "
            f"({len(primary_flat)} {self.primary_language}, {len(secondary_flat)} {self.secondary_language})"
        )
        return entries

    @staticmethod
    def _text(flat: dict, key: str) -> Optional[str]:
        if key not in flat:
            return None
        return leaf_to_text(flat[key])

    def invalidate(self, namespace: Optional[str] = None):
        if namespace is None:
            self._cache.clear()
        else:
            self._cache.pop(namespace, None)
