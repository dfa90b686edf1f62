# -*- coding: utf-8 -*-
"""
LocForge Translation Editor Controller

Coordinates the editing surface with the engine: namespace selection and
loading, search, statistics, edit sessions, export and clear.

Namespace loads run on the Qt thread pool. Store and loader callbacks may
fire on a worker thread, so they are re-emitted through private signals and
handled on the controller's thread.
"""

import asyncio
from pathlib import Path
from typing import List, Optional, Union

from gui.qt import QObject, QRunnable, QThreadPool, Signal, Slot

import locforge_config as config
from core.bundle_store import LocaleBundleStore
from core.edit_overlay import EditOverlay
from core.entry_reconciler import EntryReconciler
from core.namespace_loader import NamespaceLoader
from core.translation_stats import compute_stats, filter_entries
from locforge_enums import LoadState, NoticeLevel
from locforge_exceptions import CommitError, EmptyOverlayError, NoActiveEditError, StorageError
from locforge_logger import get_logger
from models.bilingual_entry import BilingualEntry, EditDraft, TranslationStats

logger = get_logger("controllers.editor")


class NamespaceLoadWorkerSignals(QObject):
    """Signals for the NamespaceLoadWorker."""
    finished = Signal(str, str)  # namespace, LoadState value
    error = Signal(str, str)     # namespace, message


class NamespaceLoadWorker(QRunnable):
    """Runs one namespace load (or reload) in its own event loop."""

    def __init__(self, loader: NamespaceLoader, namespace: str, reload: bool = False):
        super().__init__()
        self.loader = loader
        self.namespace = namespace
        self.reload = reload
        self.signals = NamespaceLoadWorkerSignals()

    def run(self):
        try:
            if self.reload:
                state = asyncio.run(self.loader.reload(self.namespace))
            else:
                state = asyncio.run(self.loader.ensure_loaded(self.namespace))
        except Exception as e:
            logger.exception(f"Load worker failed for '{self.namespace}'")
            self.signals.error.emit(self.namespace, str(e))
            return
        self.signals.finished.emit(self.namespace, state.value)


class TranslationEditorController(QObject):
    """
    Controller for the translation editor panel.

    Signals:
        entries_changed(list): Visible (filtered) entries
        stats_changed(object): TranslationStats of the whole namespace
        load_state_changed(str, str): namespace, LoadState value
        notice(str, str): NoticeLevel value, message
        editing_changed(str): key being edited, '' when none
    """

    entries_changed = Signal(list)
    stats_changed = Signal(object)
    load_state_changed = Signal(str, str)
    notice = Signal(str, str)
    editing_changed = Signal(str)

    _store_changed = Signal(int)
    _loader_changed = Signal(str, str)

    def __init__(self, store: LocaleBundleStore, loader: NamespaceLoader,
                 reconciler: EntryReconciler, overlay: EditOverlay,
                 namespace: Optional[str] = None, thread_pool: Optional[QThreadPool] = None,
                 parent=None):
        super().__init__(parent)
        self.store = store
        self.loader = loader
        self.reconciler = reconciler
        self.overlay = overlay
        self.thread_pool = thread_pool or QThreadPool.globalInstance()

        self._namespace = namespace or overlay.active_namespace
        self.overlay.active_namespace = self._namespace
        self._query = ""
        self._entries: List[BilingualEntry] = []
        self._workers = set()

        self._store_changed.connect(self._on_store_changed)
        self._loader_changed.connect(self._on_loader_changed)
        self.store.add_listener(self._emit_store_changed)
        self.loader.add_listener(self._emit_loader_changed)

        logger.debug(f"TranslationEditorController initialized (namespace={self._namespace})")

    def shutdown(self):
        """Detach from the engine's listener lists."""
        self.store.remove_listener(self._emit_store_changed)
        self.loader.remove_listener(self._emit_loader_changed)

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def search_query(self) -> str:
        return self._query

    @property
    def load_state(self) -> LoadState:
        return self.loader.get_state(self._namespace)

    @property
    def editing_key(self) -> Optional[str]:
        draft = self.overlay.draft
        return draft.key if draft else None

    def entries(self) -> List[BilingualEntry]:
        """All entries of the active namespace."""
        return list(self._entries)

    def visible_entries(self) -> List[BilingualEntry]:
        return filter_entries(self._entries, self._query)

    def stats(self) -> TranslationStats:
        return compute_stats(self._entries)

    def match_summary(self) -> str:
        """'N of M' for the search box."""
        return f"{len(self.visible_entries())} of {len(self._entries)}"

    # =========================================================================
    # NAMESPACE / LOADING
    # =========================================================================

    def set_namespace(self, namespace: str):
        if namespace == self._namespace:
            return

        was_editing = self.overlay.is_editing
        # Setter cancels an edit that belongs to the previous namespace
        self.overlay.active_namespace = namespace
        self._namespace = namespace
        if was_editing:
            self.editing_changed.emit("")

        logger.info(f"Active namespace: {namespace}")
        self.refresh()
        self.load_namespace(namespace)

    def load_namespace(self, namespace: Optional[str] = None, reload: bool = False) -> bool:
        """
        Start a background load. Returns False when nothing needed loading.
        """
        namespace = namespace or self._namespace
        state = self.loader.get_state(namespace)
        if state == LoadState.LOADING:
            return False
        if state == LoadState.LOADED and not reload:
            self.refresh()
            return False

        worker = NamespaceLoadWorker(self.loader, namespace, reload=reload)
        worker.signals.finished.connect(self._on_load_finished)
        worker.signals.error.connect(self._on_load_error)
        self._workers.add(worker)
        worker.signals.finished.connect(lambda *_: self._workers.discard(worker))
        worker.signals.error.connect(lambda *_: self._workers.discard(worker))
        self.thread_pool.start(worker)
        return True

    def reload(self) -> bool:
        return self.load_namespace(self._namespace, reload=True)

    def set_search(self, query: str):
        self._query = query or ""
        self.entries_changed.emit(self.visible_entries())

    def refresh(self):
        """Reconcile the active namespace and publish entries and stats."""
        self._entries = self.reconciler.reconcile(self._namespace)
        self.entries_changed.emit(self.visible_entries())
        self.stats_changed.emit(self.stats())

    # =========================================================================
    # EDITING
    # =========================================================================

    def begin_edit(self, key: str) -> EditDraft:
        draft = self.overlay.begin_edit(key)
        self.editing_changed.emit(key)
        return draft

    def update_draft(self, primary_value: Optional[str] = None,
                     secondary_value: Optional[str] = None) -> Optional[EditDraft]:
        try:
            return self.overlay.update_draft(primary_value, secondary_value)
        except NoActiveEditError as e:
            logger.warning(str(e))
            return None

    def commit_edit(self, primary_value: Optional[str] = None,
                    secondary_value: Optional[str] = None) -> bool:
        key = self.editing_key
        if key is None:
            self.notice.emit(NoticeLevel.WARNING.value, "No edit in progress")
            return False

        try:
            self.overlay.commit(key, primary_value, secondary_value, namespace=self._namespace)
        except CommitError as e:
            self.notice.emit(NoticeLevel.ERROR.value, e.message)
            return False

        self.editing_changed.emit("")
        self.notice.emit(NoticeLevel.SUCCESS.value, f"Saved '{key}'")
        return True

    def cancel_edit(self):
        if self.overlay.is_editing:
            self.overlay.cancel()
            self.editing_changed.emit("")

    # =========================================================================
    # OVERLAY FILE
    # =========================================================================

    def has_edits(self) -> bool:
        return self.overlay.has_edits()

    def export_edits(self, destination: Union[str, Path]) -> Optional[Path]:
        try:
            path = self.overlay.export(destination)
        except EmptyOverlayError:
            self.notice.emit(NoticeLevel.INFO.value, "No edits to export yet")
            return None
        except OSError as e:
            logger.error(f"Export failed: {e}")
            self.notice.emit(NoticeLevel.ERROR.value, f"Export failed: {e}")
            return None

        self.notice.emit(NoticeLevel.SUCCESS.value, f"Exported edits to {path}")
        return path

    def clear_edits(self) -> bool:
        """
        Forget all saved edits. Values already applied stay in memory until
        the namespaces are reloaded.
        """
        try:
            removed = self.overlay.clear()
        except StorageError as e:
            self.notice.emit(NoticeLevel.ERROR.value, e.message)
            return False

        if removed:
            self.notice.emit(NoticeLevel.INFO.value, "Saved edits cleared")
        return removed

    def default_export_path(self) -> Path:
        return Path.home() / config.EXPORT_FILE_NAME

    # =========================================================================
    # CALLBACKS
    # =========================================================================

    def _emit_store_changed(self, version: int):
        self._store_changed.emit(version)

    def _emit_loader_changed(self, namespace: str, state: LoadState):
        self._loader_changed.emit(namespace, state.value)

    @Slot(int)
    def _on_store_changed(self, version: int):
        if self.loader.is_loading(self._namespace):
            return
        self.refresh()

    @Slot(str, str)
    def _on_loader_changed(self, namespace: str, state: str):
        self.load_state_changed.emit(namespace, state)
        if namespace == self._namespace:
            self.refresh()

    @Slot(str, str)
    def _on_load_finished(self, namespace: str, state: str):
        if state == LoadState.FAILED.value:
            self.notice.emit(NoticeLevel.ERROR.value,
                             f"Translations for '{namespace}' could not be loaded")
        elif state == LoadState.PARTIAL.value:
            self.notice.emit(NoticeLevel.WARNING.value,
                             f"Translations for '{namespace}' are only partially available")

    @Slot(str, str)
    def _on_load_error(self, namespace: str, message: str):
        self.notice.emit(NoticeLevel.ERROR.value, message)
