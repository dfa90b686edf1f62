# -*- coding: utf-8 -*-
"""
LocForge Namespace Loader

Makes sure both languages' bundles of a namespace are present in the
LocaleBundleStore, fetching the missing ones concurrently.

State machine per namespace:
    NOT_REQUESTED -> LOADING -> LOADED | PARTIAL | FAILED
PARTIAL and FAILED namespaces retry their missing languages on the next
ensure_loaded(); LOADED namespaces never touch the network again.
"""

import asyncio
import threading
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple, TYPE_CHECKING

from core.bundle_fetcher import BundleFetcher
from core.bundle_store import LocaleBundleStore
from locforge_config import PRIMARY_LANGUAGE, SECONDARY_LANGUAGE
from locforge_enums import LoadState
from locforge_exceptions import NamespaceUnavailableError, NetworkFailureError
from locforge_logger import get_logger

if TYPE_CHECKING:
    from core.edit_overlay import EditOverlay

logger = get_logger("core.namespace_loader")


class NamespaceLoader:
    """
    Loads (language, namespace) bundles into the store exactly once.

    The LOADING transition is taken synchronously before any await, so a
    second request for a namespace that is already loading returns LOADING
    instead of issuing duplicate retrievals. No timeout or cancellation:
    a hung fetch keeps the namespace in LOADING.
    """

    def __init__(self, store: LocaleBundleStore, fetcher: BundleFetcher,
                 languages: Sequence[str] = (PRIMARY_LANGUAGE, SECONDARY_LANGUAGE),
                 overlay: Optional['EditOverlay'] = None):
        self.store = store
        self.fetcher = fetcher
        self.languages = tuple(languages)
        self._overlay = overlay
        self._states: Dict[str, LoadState] = {}
        self._fetched: Set[Tuple[str, str]] = set()
        self._state_lock = threading.Lock()
        self._listeners: List[Callable[[str, LoadState], None]] = []

    # =========================================================================
    # STATE
    # =========================================================================

    def get_state(self, namespace: str) -> LoadState:
        with self._state_lock:
            return self._states.get(namespace, LoadState.NOT_REQUESTED)

    def states(self) -> Dict[str, LoadState]:
        with self._state_lock:
            return dict(self._states)

    def is_loading(self, namespace: str) -> bool:
        return self.get_state(namespace) == LoadState.LOADING

    def attach_overlay(self, overlay: Optional['EditOverlay']):
        """Persisted edits of the overlay are replayed onto every freshly loaded bundle."""
        self._overlay = overlay

    def _set_state(self, namespace: str, state: LoadState):
        with self._state_lock:
            self._states[namespace] = state
        logger.debug(f"Namespace '{namespace}' -> {state.value}")
        self._notify_listeners(namespace, state)

    def _begin_loading(self, namespace: str) -> Optional[LoadState]:
        """
        Atomically decide whether a load must start.

        Returns the state to report when no load is needed, or None after
        switching the namespace to LOADING.
        """
        with self._state_lock:
            state = self._states.get(namespace, LoadState.NOT_REQUESTED)
            if state in (LoadState.LOADED, LoadState.LOADING):
                return state
            if state == LoadState.NOT_REQUESTED:
                # Bundles registered before the first request count as fetched
                for lang in self.languages:
                    if self.store.has_bundle(lang, namespace):
                        self._fetched.add((lang, namespace))
            if not self._missing_languages(namespace):
                self._states[namespace] = LoadState.LOADED
                result = LoadState.LOADED
            else:
                self._states[namespace] = LoadState.LOADING
                result = None

        self._notify_listeners(namespace, result or LoadState.LOADING)
        return result

    def _missing_languages(self, namespace: str) -> List[str]:
        return [lang for lang in self.languages if (lang, namespace) not in self._fetched]

    # =========================================================================
    # LOADING
    # =========================================================================

    async def ensure_loaded(self, namespace: str) -> LoadState:
        """
        Fetch every missing language of `namespace` concurrently and register it.

        Returns the resulting LoadState. Failures are logged, never raised.
        """
        settled = self._begin_loading(namespace)
        if settled is not None:
            return settled

        with self._state_lock:
            missing = self._missing_languages(namespace)
        logger.info(f"Loading namespace '{namespace}' for: {', '.join(missing)}")

        async with self.fetcher.open() as fetcher:
            results = await asyncio.gather(
                *(fetcher.fetch(lang, namespace) for lang in missing),
                return_exceptions=True,
            )

        failures = 0
        for lang, result in zip(missing, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, BaseException):
                failures += 1
                if isinstance(result, NetworkFailureError):
                    logger.warning(f"Error loading translations: {result}")
                else:
                    logger.error(f"Unexpected error loading {lang}/{namespace}: {result}")
                continue
            self._register(lang, namespace, result)

        if failures == 0:
            state = LoadState.LOADED
        elif len(self._missing_languages(namespace)) < len(self.languages):
            state = LoadState.PARTIAL
            logger.warning(
                f"Namespace '{namespace}' partially loaded: "
                f"{failures} of {len(missing)} retrievals failed"
            )
        else:
            state = LoadState.FAILED
            logger.error(str(NamespaceUnavailableError(
                f"No translations available for namespace '{namespace}'",
                namespace=namespace,
            )))

        self._set_state(namespace, state)
        return state

    async def ensure_all(self, namespaces: Iterable[str]) -> Dict[str, LoadState]:
        """Load several namespaces concurrently."""
        namespaces = list(namespaces)
        states = await asyncio.gather(*(self.ensure_loaded(ns) for ns in namespaces))
        return dict(zip(namespaces, states))

    async def reload(self, namespace: str) -> LoadState:
        """Drop the namespace's bundles and fetch them again (wholesale replacement)."""
        with self._state_lock:
            if self._states.get(namespace) == LoadState.LOADING:
                return LoadState.LOADING
            self._states.pop(namespace, None)
            self._fetched.difference_update((lang, namespace) for lang in self.languages)
        for lang in self.languages:
            self.store.remove_bundle(lang, namespace)
        return await self.ensure_loaded(namespace)

    def _register(self, language: str, namespace: str, tree):
        # deep + overwrite: a repeated load merges into the single live tree
        self.store.add_bundle(language, namespace, tree, deep=True, overwrite=True)
        with self._state_lock:
            self._fetched.add((language, namespace))
        if self._overlay is not None:
            replayed = self._overlay.replay(namespace, languages=[language])
            if replayed:
                logger.info(f"Replayed {replayed} saved edit(s) onto {language}/{namespace}")

    # =========================================================================
    # LISTENERS
    # =========================================================================

    def add_listener(self, callback: Callable[[str, LoadState], None]):
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[str, LoadState], None]):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify_listeners(self, namespace: str, state: LoadState):
        for cb in list(self._listeners):
            try:
                cb(namespace, state)
            except Exception as e:
                logger.error(f"Error in loader listener: {e}")
