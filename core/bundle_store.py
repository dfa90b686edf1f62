# -*- coding: utf-8 -*-
"""
LocForge Locale Bundle Store

In-memory registry mapping (language, namespace) -> locale tree.
Created once by the composition root and passed by reference to the loader,
reconciler, overlay and localization runtime.
"""

import copy
from typing import Callable, Dict, List, Optional, Tuple

from core.locale_tree import LocaleTree, deep_merge
from locforge_logger import get_logger

logger = get_logger("core.bundle_store")


class LocaleBundleStore:
    """
    Registry of locale trees with a version counter.

    Every mutation bumps `version` and notifies listeners with the new value.
    Trees returned by get_bundle() are live references; callers that mutate
    them in place must call touch() afterwards.
    """

    def __init__(self):
        self._bundles: Dict[Tuple[str, str], LocaleTree] = {}
        self._version = 0
        self._listeners: List[Callable[[int], None]] = []

    # =========================================================================
    # QUERIES
    # =========================================================================

    @property
    def version(self) -> int:
        return self._version

    def has_bundle(self, language: str, namespace: str) -> bool:
        return (language, namespace) in self._bundles

    def get_bundle(self, language: str, namespace: str) -> Optional[LocaleTree]:
        return self._bundles.get((language, namespace))

    def languages(self) -> List[str]:
        return sorted({lang for lang, _ in self._bundles})

    def namespaces(self, language: Optional[str] = None) -> List[str]:
        return sorted({ns for lang, ns in self._bundles if language is None or lang == language})

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def add_bundle(self, language: str, namespace: str, tree: LocaleTree,
                   deep: bool = False, overwrite: bool = False) -> LocaleTree:
        """
        Register a tree for (language, namespace).

        - No existing bundle: a copy of tree is stored.
        - deep=True: tree is merged into the existing bundle; incoming leaves
          replace existing ones only when overwrite is set.
        - deep=False: the existing bundle is replaced when overwrite is set,
          otherwise only missing top-level keys are added.

        The existing tree object is kept whenever one exists, so references
        held elsewhere stay valid.
        """
        key = (language, namespace)
        existing = self._bundles.get(key)

        if existing is None:
            self._bundles[key] = copy.deepcopy(tree)
        elif deep:
            deep_merge(existing, tree, overwrite=overwrite)
        elif overwrite:
            existing.clear()
            existing.update(copy.deepcopy(tree))
        else:
            for k, v in tree.items():
                if k not in existing:
                    existing[k] = copy.deepcopy(v)

        logger.debug(f"Bundle registered: {language}/{namespace} (deep={deep}, overwrite={overwrite})")
        self._bump()
        return self._bundles[key]

    def ensure_bundle(self, language: str, namespace: str) -> LocaleTree:
        """Return the live tree for (language, namespace), creating an empty one."""
        key = (language, namespace)
        if key not in self._bundles:
            self._bundles[key] = {}
            self._bump()
        return self._bundles[key]

    def remove_bundle(self, language: str, namespace: str) -> bool:
        if self._bundles.pop((language, namespace), None) is None:
            return False
        self._bump()
        return True

    def touch(self, language: Optional[str] = None, namespace: Optional[str] = None) -> int:
        """Record an in-place mutation of a live tree."""
        if language and namespace:
            logger.debug(f"Bundle touched: {language}/{namespace}")
        return self._bump()

    def clear(self):
        self._bundles.clear()
        self._bump()

    # =========================================================================
    # LISTENERS
    # =========================================================================

    def add_listener(self, callback: Callable[[int], None]):
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[int], None]):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _bump(self) -> int:
        self._version += 1
        for cb in list(self._listeners):
            try:
                cb(self._version)
            except Exception as e:
                logger.error(f"Error in bundle store listener: {e}")
        return self._version
