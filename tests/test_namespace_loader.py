# -*- coding: utf-8 -*-
"""
Tests for NamespaceLoader

Loading is driven with asyncio.run against the in-memory FakeFetcher.
"""

import asyncio
import json

from conftest import EN_COMMON, VI_COMMON, FakeFetcher
from core.edit_overlay import EditOverlay
from core.entry_reconciler import EntryReconciler
from core.namespace_loader import NamespaceLoader
from locforge_enums import LoadState


class TestEnsureLoaded:
    """Basic loading and idempotency."""

    def test_loads_both_languages(self, store, fake_fetcher):
        loader = NamespaceLoader(store, fake_fetcher)

        state = asyncio.run(loader.ensure_loaded("common"))

        assert state == LoadState.LOADED
        assert loader.get_state("common") == LoadState.LOADED
        assert store.get_bundle("vi", "common") == VI_COMMON
        assert store.get_bundle("en", "common") == EN_COMMON
        assert sorted(fake_fetcher.calls) == [("en", "common"), ("vi", "common")]

    def test_idempotent(self, store, fake_fetcher):
        """A loaded namespace performs no further retrievals."""
        loader = NamespaceLoader(store, fake_fetcher)
        asyncio.run(loader.ensure_loaded("common"))
        fake_fetcher.calls.clear()

        assert asyncio.run(loader.ensure_loaded("common")) == LoadState.LOADED
        assert fake_fetcher.calls == []

    def test_already_present_bundles_skip_network(self, loaded_store, fake_fetcher):
        loader = NamespaceLoader(loaded_store, fake_fetcher)
        assert asyncio.run(loader.ensure_loaded("common")) == LoadState.LOADED
        assert fake_fetcher.calls == []

    def test_only_missing_language_is_fetched(self, store, fake_fetcher):
        store.add_bundle("vi", "common", VI_COMMON)
        loader = NamespaceLoader(store, fake_fetcher)

        asyncio.run(loader.ensure_loaded("common"))

        assert fake_fetcher.calls == [("en", "common")]

    def test_unknown_namespace_is_not_restricted(self, store):
        fetcher = FakeFetcher({("vi", "custom"): {"a": "1"}, ("en", "custom"): {"a": "one"}})
        loader = NamespaceLoader(store, fetcher)
        assert asyncio.run(loader.ensure_loaded("custom")) == LoadState.LOADED


class TestConcurrency:
    """Duplicate requests while loading."""

    def test_concurrent_requests_fetch_once(self, store):
        fetcher = FakeFetcher({("vi", "common"): VI_COMMON, ("en", "common"): EN_COMMON},
                              delay=0.01)
        loader = NamespaceLoader(store, fetcher)

        async def run():
            return await asyncio.gather(loader.ensure_loaded("common"),
                                        loader.ensure_loaded("common"))

        first, second = asyncio.run(run())

        assert first == LoadState.LOADED
        assert second == LoadState.LOADING
        assert len(fetcher.calls) == 2

    def test_reconciler_sees_nothing_while_loading(self, store):
        fetcher = FakeFetcher({("vi", "common"): VI_COMMON, ("en", "common"): EN_COMMON},
                              delay=0.01)
        loader = NamespaceLoader(store, fetcher)
        reconciler = EntryReconciler(store, loader=loader)
        observed = []

        async def run():
            task = asyncio.ensure_future(loader.ensure_loaded("common"))
            await asyncio.sleep(0)
            observed.append((loader.get_state("common"), reconciler.reconcile("common")))
            await task

        asyncio.run(run())

        assert observed == [(LoadState.LOADING, [])]
        assert reconciler.reconcile("common")

    def test_ensure_all(self, store):
        fetcher = FakeFetcher({
            ("vi", "common"): VI_COMMON, ("en", "common"): EN_COMMON,
            ("vi", "board"): {"title": "Bảng"}, ("en", "board"): {"title": "Board"},
        })
        loader = NamespaceLoader(store, fetcher)

        states = asyncio.run(loader.ensure_all(["common", "board"]))

        assert states == {"common": LoadState.LOADED, "board": LoadState.LOADED}


class TestFailures:
    """Partial and total failures."""

    def test_partial_failure_keeps_other_language(self, store):
        fetcher = FakeFetcher({("vi", "common"): VI_COMMON})
        loader = NamespaceLoader(store, fetcher)

        state = asyncio.run(loader.ensure_loaded("common"))

        assert state == LoadState.PARTIAL
        assert store.has_bundle("vi", "common")
        assert not store.has_bundle("en", "common")

        entries = EntryReconciler(store, loader=loader).reconcile("common")
        assert entries
        assert all(e.secondary_value is None for e in entries)

    def test_total_failure(self, store):
        loader = NamespaceLoader(store, FakeFetcher({}))
        assert asyncio.run(loader.ensure_loaded("common")) == LoadState.FAILED
        assert store.namespaces() == []

    def test_partial_retries_missing_language(self, store):
        fetcher = FakeFetcher({("vi", "common"): VI_COMMON})
        loader = NamespaceLoader(store, fetcher)
        asyncio.run(loader.ensure_loaded("common"))

        fetcher.bundles[("en", "common")] = EN_COMMON
        fetcher.calls.clear()

        assert asyncio.run(loader.ensure_loaded("common")) == LoadState.LOADED
        assert fetcher.calls == [("en", "common")]

    def test_edit_in_partial_namespace_does_not_stop_retry(self, store, kv_storage):
        """A commit creates a stub en bundle; the next load must still fetch en."""
        fetcher = FakeFetcher({("vi", "common"): VI_COMMON})
        overlay = EditOverlay(store, kv_storage, namespace="common")
        loader = NamespaceLoader(store, fetcher, overlay=overlay)
        assert asyncio.run(loader.ensure_loaded("common")) == LoadState.PARTIAL

        overlay.commit("title", "Tiêu đề", "Title")
        assert store.has_bundle("en", "common")

        fetcher.bundles[("en", "common")] = EN_COMMON
        fetcher.calls.clear()

        assert asyncio.run(loader.ensure_loaded("common")) == LoadState.LOADED
        assert fetcher.calls == [("en", "common")]
        en = store.get_bundle("en", "common")
        assert en["buttons"]["save"] == EN_COMMON["buttons"]["save"]
        assert en["title"] == "Title"

    def test_edit_in_failed_namespace_does_not_stop_retry(self, store, kv_storage):
        fetcher = FakeFetcher({})
        overlay = EditOverlay(store, kv_storage, namespace="common")
        loader = NamespaceLoader(store, fetcher, overlay=overlay)
        assert asyncio.run(loader.ensure_loaded("common")) == LoadState.FAILED

        overlay.commit("title", "Tiêu đề", "Title")
        fetcher.calls.clear()

        assert asyncio.run(loader.ensure_loaded("common")) == LoadState.FAILED
        assert sorted(fetcher.calls) == [("en", "common"), ("vi", "common")]

        fetcher.bundles.update({("vi", "common"): VI_COMMON, ("en", "common"): EN_COMMON})
        assert asyncio.run(loader.ensure_loaded("common")) == LoadState.LOADED
        assert store.get_bundle("vi", "common")["title"] == "Tiêu đề"

    def test_unexpected_error_is_contained(self, store):
        class Broken(FakeFetcher):
            async def fetch(self, language, namespace):
                raise RuntimeError("boom")

        loader = NamespaceLoader(store, Broken())
        assert asyncio.run(loader.ensure_loaded("common")) == LoadState.FAILED


class TestListenersAndReload:
    """State notifications, reload and overlay replay."""

    def test_state_transitions_are_notified(self, store, fake_fetcher):
        loader = NamespaceLoader(store, fake_fetcher)
        seen = []
        loader.add_listener(lambda ns, state: seen.append((ns, state)))

        asyncio.run(loader.ensure_loaded("common"))

        assert seen == [("common", LoadState.LOADING), ("common", LoadState.LOADED)]

    def test_reload_replaces_bundles(self, store, fake_fetcher):
        loader = NamespaceLoader(store, fake_fetcher)
        asyncio.run(loader.ensure_loaded("common"))
        store.get_bundle("vi", "common")["stale"] = "x"

        assert asyncio.run(loader.reload("common")) == LoadState.LOADED
        assert "stale" not in store.get_bundle("vi", "common")

    def test_saved_edits_are_replayed_on_load(self, store, fake_fetcher, kv_storage):
        kv_storage.set_item("translation-edits", json.dumps(
            {"common": {"buttons.save": {"primary": "Lưu lại", "secondary": "Save now"}}}))
        overlay = EditOverlay(store, kv_storage)
        loader = NamespaceLoader(store, fake_fetcher, overlay=overlay)

        asyncio.run(loader.ensure_loaded("common"))

        assert store.get_bundle("vi", "common")["buttons"]["save"] == "Lưu lại"
        assert store.get_bundle("en", "common")["buttons"]["save"] == "Save now"
