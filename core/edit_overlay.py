# -*- coding: utf-8 -*-
"""
LocForge Edit Overlay

User edits layered on top of the loaded bundles.

Persisted record (JSON string under OVERLAY_STORAGE_KEY):
    {namespace: {key.path: {"primary": str, "secondary": str}}}
A later commit for the same (namespace, key) replaces the earlier one.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from core.bundle_store import LocaleBundleStore
from core.kv_storage import KeyValueStorage
from core.locale_tree import get_at_path, leaf_to_text, set_at_path
from locforge_config import (
    DEFAULT_NAMESPACE, EXPORT_FILE_NAME, OVERLAY_STORAGE_KEY,
    PRIMARY_LANGUAGE, SECONDARY_LANGUAGE,
)
from locforge_exceptions import (
    CommitError, EmptyOverlayError, NoActiveEditError, StorageSaveError,
)
from locforge_logger import get_logger
from models.bilingual_entry import EditDraft

logger = get_logger("core.edit_overlay")

OverlayRecord = Dict[str, Dict[str, Dict[str, str]]]

FIELD_PRIMARY = "primary"
FIELD_SECONDARY = "secondary"


class EditOverlay:
    """
    Edit session + persistent overlay for the active namespace.

    commit() is all-or-nothing: the record is written to storage first and
    the live trees are only touched once that write succeeded.
    """

    def __init__(self, store: LocaleBundleStore, storage: KeyValueStorage,
                 namespace: str = DEFAULT_NAMESPACE,
                 primary_language: str = PRIMARY_LANGUAGE,
                 secondary_language: str = SECONDARY_LANGUAGE,
                 storage_key: str = OVERLAY_STORAGE_KEY):
        self.store = store
        self.storage = storage
        self.storage_key = storage_key
        self.primary_language = primary_language
        self.secondary_language = secondary_language
        self._namespace = namespace
        self._draft: Optional[EditDraft] = None

    # =========================================================================
    # EDIT SESSION
    # =========================================================================

    @property
    def active_namespace(self) -> str:
        return self._namespace

    @active_namespace.setter
    def active_namespace(self, namespace: str):
        if namespace != self._namespace:
            self.cancel()
            self._namespace = namespace

    @property
    def draft(self) -> Optional[EditDraft]:
        return self._draft

    @property
    def is_editing(self) -> bool:
        return self._draft is not None

    def current_values(self, key: str, namespace: Optional[str] = None) -> Tuple[str, str]:
        """Current (primary, secondary) text of key; missing values are ''."""
        namespace = namespace or self._namespace
        values = []
        for lang in (self.primary_language, self.secondary_language):
            leaf = get_at_path(self.store.get_bundle(lang, namespace), key)
            # A subtree is not an editable value
            values.append("" if isinstance(leaf, dict) else (leaf_to_text(leaf) or ""))
        return values[0], values[1]

    def begin_edit(self, key: str) -> EditDraft:
        primary, secondary = self.current_values(key)
        self._draft = EditDraft(key=key, primary_value=primary, secondary_value=secondary)
        logger.debug(f"Editing {self._namespace}:{key}")
        return self._draft

    def update_draft(self, primary_value: Optional[str] = None,
                     secondary_value: Optional[str] = None) -> EditDraft:
        if self._draft is None:
            raise NoActiveEditError("No edit in progress")
        if primary_value is not None:
            self._draft.primary_value = primary_value
        if secondary_value is not None:
            self._draft.secondary_value = secondary_value
        return self._draft

    def cancel(self):
        if self._draft is not None:
            logger.debug(f"Edit cancelled: {self._namespace}:{self._draft.key}")
        self._draft = None

    # =========================================================================
    # COMMIT
    # =========================================================================

    def commit(self, key: Optional[str] = None, primary_value: Optional[str] = None,
               secondary_value: Optional[str] = None, namespace: Optional[str] = None) -> EditDraft:
        """
        Persist and apply an edit.

        Missing arguments come from the draft (or, for a key that is not being
        edited, from the current values). Raises CommitError when the record
        cannot be written; nothing is applied in that case.
        """
        namespace = namespace or self._namespace
        draft = self._draft

        if key is None:
            if draft is None:
                raise NoActiveEditError("Nothing to commit: no key given and no edit in progress")
            key = draft.key

        if draft is not None and draft.key == key:
            base_primary, base_secondary = draft.primary_value, draft.secondary_value
        else:
            base_primary, base_secondary = self.current_values(key, namespace)

        primary = base_primary if primary_value is None else primary_value
        secondary = base_secondary if secondary_value is None else secondary_value

        # (a) persist
        record = self.record()
        record.setdefault(namespace, {})[key] = {FIELD_PRIMARY: primary, FIELD_SECONDARY: secondary}
        try:
            self._save_record(record)
        except StorageSaveError as e:
            logger.error(f"Commit failed for {namespace}:{key}: {e}")
            raise CommitError(f"Could not save edit for '{key}'", namespace=namespace, key=key) from e

        # (b) apply to live trees, (c) bump version
        self._apply(namespace, key, {self.primary_language: primary, self.secondary_language: secondary})
        self.store.touch(namespace=namespace)

        if draft is not None and draft.key == key:
            self._draft = None

        logger.info(f"Saved edit {namespace}:{key}")
        return EditDraft(key=key, primary_value=primary, secondary_value=secondary)

    def _apply(self, namespace: str, key: str, values: Dict[str, Optional[str]]):
        for lang, value in values.items():
            if value is None:
                continue
            set_at_path(self.store.ensure_bundle(lang, namespace), key, value)

    # =========================================================================
    # RECORD
    # =========================================================================

    def record(self) -> OverlayRecord:
        """The persisted record, read fresh from storage ({} when absent or corrupt)."""
        raw = self.storage.get_item(self.storage_key)
        if not raw:
            return {}
        try:
            loaded = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"Saved edits are corrupted, ignoring them: {e}")
            return {}
        if not isinstance(loaded, dict):
            logger.warning("Saved edits have an invalid format, ignoring them")
            return {}
        return {ns: keys for ns, keys in loaded.items() if isinstance(keys, dict)}

    def _save_record(self, record: OverlayRecord):
        self.storage.set_item(self.storage_key, json.dumps(record, ensure_ascii=False))

    def edits_for(self, namespace: str) -> Dict[str, Dict[str, str]]:
        return dict(self.record().get(namespace, {}))

    def has_edits(self) -> bool:
        return any(self.record().values())

    def edit_count(self) -> int:
        return sum(len(keys) for keys in self.record().values())

    def _language_value(self, values: Any, language: str) -> Optional[str]:
        if not isinstance(values, dict):
            return None
        field = FIELD_PRIMARY if language == self.primary_language else FIELD_SECONDARY
        # Records exported by the web editor use language codes as field names
        value = values.get(field, values.get(language))
        return value if isinstance(value, str) else None

    def replay(self, namespace: str, languages: Optional[Iterable[str]] = None) -> int:
        """Re-apply persisted edits of namespace onto the store. Returns the number of keys applied."""
        edits = self.record().get(namespace, {})
        if not edits:
            return 0

        languages = list(languages or (self.primary_language, self.secondary_language))
        applied = 0
        for key, values in edits.items():
            per_lang = {lang: self._language_value(values, lang) for lang in languages}
            if all(v is None for v in per_lang.values()):
                continue
            self._apply(namespace, key, per_lang)
            applied += 1

        if applied:
            self.store.touch(namespace=namespace)
        return applied

    # =========================================================================
    # EXPORT / CLEAR
    # =========================================================================

    def export(self, destination: Union[str, Path]) -> Path:
        """
        Write the stored record to destination, unchanged.

        A directory destination gets EXPORT_FILE_NAME appended.
        Raises EmptyOverlayError (and writes nothing) when there are no edits.
        """
        raw = self.storage.get_item(self.storage_key)
        if not raw or not self.has_edits():
            raise EmptyOverlayError("No edits to export")

        target = Path(destination)
        if target.is_dir():
            target = target / EXPORT_FILE_NAME
        target.parent.mkdir(parents=True, exist_ok=True)

        with target.open('w', encoding='utf-8', newline='') as f:
            f.write(raw)

        logger.info(f"Exported {self.edit_count()} edit(s) to {target}")
        return target

    def clear(self) -> bool:
        """Forget all persisted edits. Already applied values stay in the store until reload."""
        self.cancel()
        removed = self.storage.remove_item(self.storage_key)
        if removed:
            logger.info("Saved edits cleared")
        return removed
