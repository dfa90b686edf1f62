# -*- coding: utf-8 -*-
"""
Tests for EditOverlay

Edit sessions, commit persistence/atomicity, replay, export and clear.
"""

import json

import pytest

from core.bundle_store import LocaleBundleStore
from core.edit_overlay import EditOverlay
from core.entry_reconciler import EntryReconciler
from locforge_exceptions import (
    CommitError, EmptyOverlayError, NoActiveEditError, StorageSaveError,
)


class TestEditSession:
    """begin_edit / update_draft / cancel."""

    def test_begin_edit_returns_current_values(self, overlay):
        draft = overlay.begin_edit("buttons.save")
        assert (draft.key, draft.primary_value, draft.secondary_value) == ("buttons.save", "Lưu", "Save")
        assert overlay.is_editing

    def test_missing_values_start_empty(self, overlay):
        draft = overlay.begin_edit("only_vi")
        assert draft.secondary_value == ""

        draft = overlay.begin_edit("brand.new.key")
        assert (draft.primary_value, draft.secondary_value) == ("", "")

    def test_cancel_discards_draft(self, overlay, loaded_store):
        version = loaded_store.version
        overlay.begin_edit("title")
        overlay.update_draft(primary_value="changed")
        overlay.cancel()

        assert not overlay.is_editing
        assert loaded_store.get_bundle("vi", "common")["title"] == "Học chữ Hán"
        assert loaded_store.version == version
        assert overlay.record() == {}

    def test_update_draft_without_edit(self, overlay):
        with pytest.raises(NoActiveEditError):
            overlay.update_draft(primary_value="x")

    def test_namespace_switch_cancels_edit(self, overlay):
        overlay.begin_edit("title")
        overlay.active_namespace = "controls"
        assert not overlay.is_editing
        assert overlay.active_namespace == "controls"


class TestCommit:
    """commit() persists, applies and bumps the version."""

    def test_commit_applies_and_persists(self, overlay, loaded_store, kv_storage):
        version = loaded_store.version
        overlay.begin_edit("buttons.save")

        result = overlay.commit(primary_value="Lưu lại", secondary_value="Save now")

        assert result.primary_value == "Lưu lại"
        assert not overlay.is_editing
        assert loaded_store.get_bundle("vi", "common")["buttons"]["save"] == "Lưu lại"
        assert loaded_store.get_bundle("en", "common")["buttons"]["save"] == "Save now"
        assert loaded_store.version > version

        stored = json.loads(kv_storage.get_item("translation-edits"))
        assert stored == {"common": {"buttons.save": {"primary": "Lưu lại", "secondary": "Save now"}}}

    def test_commit_uses_draft_values(self, overlay, loaded_store):
        overlay.begin_edit("only_vi")
        overlay.update_draft(secondary_value="Vietnamese only")
        overlay.commit()

        assert loaded_store.get_bundle("en", "common")["only_vi"] == "Vietnamese only"
        assert overlay.edits_for("common")["only_vi"] == {
            "primary": "Chỉ có tiếng Việt", "secondary": "Vietnamese only"}

    def test_commit_is_visible_to_reconciler(self, overlay, loaded_store):
        reconciler = EntryReconciler(loaded_store)
        reconciler.reconcile("common")

        overlay.commit("only_en", primary_value="Chỉ tiếng Anh")

        by_key = {e.key: e for e in reconciler.reconcile("common")}
        assert by_key["only_en"].primary_value == "Chỉ tiếng Anh"
        assert by_key["only_en"].secondary_value == "English only"

    def test_later_commit_replaces_earlier(self, overlay):
        overlay.commit("title", "A", "B")
        overlay.commit("title", "C", "D")
        assert overlay.edits_for("common") == {"title": {"primary": "C", "secondary": "D"}}
        assert overlay.edit_count() == 1

    def test_commit_into_leaf_intermediate_overwrites(self, overlay, loaded_store):
        overlay.commit("title.sub", "x", "y")
        assert loaded_store.get_bundle("vi", "common")["title"] == {"sub": "x"}

    def test_commit_without_key_or_draft(self, overlay):
        with pytest.raises(NoActiveEditError):
            overlay.commit()

    def test_failed_save_applies_nothing(self, overlay, loaded_store, monkeypatch):
        """A storage failure leaves trees, version and draft untouched."""
        def fail(key, value):
            raise StorageSaveError("disk full")

        monkeypatch.setattr(overlay.storage, "set_item", fail)
        overlay.begin_edit("title")
        version = loaded_store.version

        with pytest.raises(CommitError) as exc_info:
            overlay.commit(primary_value="new")

        assert exc_info.value.key == "title"
        assert loaded_store.get_bundle("vi", "common")["title"] == "Học chữ Hán"
        assert loaded_store.version == version
        assert overlay.is_editing


class TestReplay:
    """Persisted edits survive a restart."""

    def test_replay_after_restart(self, kv_storage, loaded_store):
        EditOverlay(loaded_store, kv_storage).commit("buttons.cancel", "Thôi", "Never mind")

        # Fresh store, as after a restart
        store = LocaleBundleStore()
        store.add_bundle("vi", "common", {"buttons": {"cancel": "Hủy"}})
        store.add_bundle("en", "common", {"buttons": {"cancel": "Cancel"}})
        applied = EditOverlay(store, kv_storage).replay("common")

        assert applied == 1
        assert store.get_bundle("vi", "common")["buttons"]["cancel"] == "Thôi"
        assert store.get_bundle("en", "common")["buttons"]["cancel"] == "Never mind"

    def test_replay_single_language(self, overlay, kv_storage):
        overlay.commit("title", "A", "B")
        store = LocaleBundleStore()
        store.add_bundle("en", "common", {"title": "orig"})

        EditOverlay(store, kv_storage).replay("common", languages=["en"])

        assert store.get_bundle("en", "common")["title"] == "B"
        assert not store.has_bundle("vi", "common")

    def test_replay_accepts_language_code_fields(self, kv_storage, store):
        kv_storage.set_item("translation-edits", json.dumps({"common": {"k": {"vi": "V", "en": "E"}}}))
        assert EditOverlay(store, kv_storage).replay("common") == 1
        assert store.get_bundle("vi", "common") == {"k": "V"}

    def test_corrupt_record_is_ignored(self, kv_storage, store):
        kv_storage.set_item("translation-edits", "{broken")
        overlay = EditOverlay(store, kv_storage)
        assert overlay.record() == {}
        assert overlay.replay("common") == 0
        assert not overlay.has_edits()


class TestExportAndClear:
    """export() and clear()."""

    def test_export_empty_raises(self, overlay, tmp_path):
        with pytest.raises(EmptyOverlayError):
            overlay.export(tmp_path)
        assert not (tmp_path / "translation-edits.json").exists()

    def test_export_is_byte_for_byte(self, overlay, kv_storage, tmp_path):
        overlay.commit("title", "Tiêu đề", "Title")
        overlay.commit("buttons.save", "Lưu", "Save", namespace="controls")

        path = overlay.export(tmp_path)

        assert path == tmp_path / "translation-edits.json"
        assert path.read_text(encoding='utf-8') == kv_storage.get_item("translation-edits")
        assert set(json.loads(path.read_text(encoding='utf-8'))) == {"common", "controls"}

    def test_export_to_file_path(self, overlay, tmp_path):
        overlay.commit("title", "a", "b")
        target = tmp_path / "out" / "edits.json"
        assert overlay.export(target) == target
        assert target.is_file()

    def test_clear(self, overlay, loaded_store, tmp_path):
        overlay.commit("title", "a", "b")
        assert overlay.clear() is True
        assert not overlay.has_edits()
        assert overlay.clear() is False
        # Applied values stay until reload
        assert loaded_store.get_bundle("vi", "common")["title"] == "a"
        with pytest.raises(EmptyOverlayError):
            overlay.export(tmp_path)
