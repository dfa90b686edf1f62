# -*- coding: utf-8 -*-
"""
Unit Tests for LocaleBundleStore
"""

from core.bundle_store import LocaleBundleStore


class TestBundleRegistry:
    """Registration and lookup."""

    def test_add_and_get(self, store):
        tree = {"a": "1"}
        store.add_bundle("vi", "common", tree)

        assert store.has_bundle("vi", "common")
        assert not store.has_bundle("en", "common")
        assert store.get_bundle("vi", "common") == {"a": "1"}
        assert store.get_bundle("en", "common") is None

    def test_first_add_copies_tree(self, store):
        """Mutating the caller's dict does not change the stored bundle."""
        tree = {"a": {"b": "1"}}
        store.add_bundle("vi", "common", tree)
        tree["a"]["b"] = "changed"
        assert store.get_bundle("vi", "common") == {"a": {"b": "1"}}

    def test_languages_and_namespaces(self, loaded_store):
        loaded_store.add_bundle("vi", "controls", {})
        assert loaded_store.languages() == ["en", "vi"]
        assert loaded_store.namespaces() == ["common", "controls"]
        assert loaded_store.namespaces("en") == ["common"]

    def test_remove_bundle(self, loaded_store):
        assert loaded_store.remove_bundle("vi", "common") is True
        assert loaded_store.remove_bundle("vi", "common") is False
        assert not loaded_store.has_bundle("vi", "common")

    def test_ensure_bundle_creates_empty_tree(self, store):
        tree = store.ensure_bundle("en", "messages")
        assert tree == {}
        assert store.get_bundle("en", "messages") is tree


class TestRepeatedAdd:
    """A second add for the same pair never creates a second tree."""

    def test_deep_overwrite_keeps_single_live_tree(self, store):
        first = store.add_bundle("vi", "common", {"a": {"b": "1", "c": "2"}})
        second = store.add_bundle("vi", "common", {"a": {"b": "new"}, "d": "3"},
                                  deep=True, overwrite=True)

        assert first is second
        assert store.get_bundle("vi", "common") == {"a": {"b": "new", "c": "2"}, "d": "3"}

    def test_deep_without_overwrite_keeps_existing_leaves(self, store):
        store.add_bundle("vi", "common", {"a": "1"})
        store.add_bundle("vi", "common", {"a": "2", "b": "3"}, deep=True)
        assert store.get_bundle("vi", "common") == {"a": "1", "b": "3"}

    def test_shallow_overwrite_replaces_contents(self, store):
        live = store.add_bundle("vi", "common", {"a": "1"})
        store.add_bundle("vi", "common", {"b": "2"}, overwrite=True)
        assert live == {"b": "2"}

    def test_shallow_add_only_missing_top_level(self, store):
        store.add_bundle("vi", "common", {"a": {"x": "1"}})
        store.add_bundle("vi", "common", {"a": {"y": "2"}, "b": "3"})
        assert store.get_bundle("vi", "common") == {"a": {"x": "1"}, "b": "3"}


class TestVersioning:
    """Every mutation bumps the version and notifies listeners."""

    def test_version_bumps(self, store):
        versions = [store.version]
        store.add_bundle("vi", "common", {})
        versions.append(store.version)
        store.touch("vi", "common")
        versions.append(store.version)
        store.remove_bundle("vi", "common")
        versions.append(store.version)
        store.clear()
        versions.append(store.version)

        assert versions == sorted(set(versions))

    def test_listeners(self, store):
        seen = []
        store.add_listener(seen.append)
        store.add_bundle("vi", "common", {})
        store.touch()
        store.remove_listener(seen.append)
        store.touch()

        assert seen == [1, 2]

    def test_failing_listener_does_not_break_mutation(self, store):
        def broken(_version):
            raise RuntimeError("boom")

        store.add_listener(broken)
        store.add_bundle("vi", "common", {"a": "1"})
        assert store.has_bundle("vi", "common")

    def test_stores_are_independent(self):
        a, b = LocaleBundleStore(), LocaleBundleStore()
        a.add_bundle("vi", "common", {})
        assert not b.has_bundle("vi", "common")
        assert b.version == 0
