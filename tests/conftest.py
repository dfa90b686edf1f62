# -*- coding: utf-8 -*-
"""
LocForge Test Fixtures

Shared fixtures for all tests.
"""

import pytest
import sys
import os
import json
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from core.bundle_fetcher import BundleFetcher  # noqa: E402
from locforge_exceptions import NetworkFailureError  # noqa: E402


# =============================================================================
# SAMPLE DATA
# =============================================================================

VI_COMMON = {
    "buttons": {"save": "Lưu", "cancel": "Hủy", "close": "Đóng"},
    "title": "Học chữ Hán",
    "only_vi": "Chỉ có tiếng Việt",
    "empty_both": "",
}

EN_COMMON = {
    "buttons": {"save": "Save", "cancel": "Cancel"},
    "title": "Kanji study",
    "only_en": "English only",
    "empty_both": "",
}


class FakeFetcher(BundleFetcher):
    """
    In-memory fetcher.

    bundles: {(language, namespace): tree}; a missing pair raises
    NetworkFailureError. Every call is recorded in `calls`.
    """

    def __init__(self, bundles=None, delay: float = 0.0):
        self.bundles = dict(bundles or {})
        self.delay = delay
        self.calls = []

    def describe(self, language, namespace):
        return f"memory://{language}/{namespace}"

    async def fetch(self, language, namespace):
        import asyncio
        self.calls.append((language, namespace))
        if self.delay:
            await asyncio.sleep(self.delay)
        if (language, namespace) not in self.bundles:
            raise NetworkFailureError(f"Not found: {language}/{namespace}",
                                      language=language, namespace=namespace)
        return json.loads(json.dumps(self.bundles[(language, namespace)]))


# =============================================================================
# ENGINE FIXTURES
# =============================================================================

@pytest.fixture
def store():
    """Empty LocaleBundleStore."""
    from core.bundle_store import LocaleBundleStore
    return LocaleBundleStore()


@pytest.fixture
def loaded_store(store):
    """Store with the sample common namespace in both languages."""
    store.add_bundle("vi", "common", VI_COMMON)
    store.add_bundle("en", "common", EN_COMMON)
    return store


@pytest.fixture
def fake_fetcher():
    """FakeFetcher serving the sample common namespace."""
    return FakeFetcher({("vi", "common"): VI_COMMON, ("en", "common"): EN_COMMON})


@pytest.fixture
def kv_storage(tmp_path):
    """KeyValueStorage backed by a temp file."""
    from core.kv_storage import KeyValueStorage
    return KeyValueStorage(tmp_path / "storage.json")


@pytest.fixture
def overlay(loaded_store, kv_storage):
    """EditOverlay on the sample common namespace."""
    from core.edit_overlay import EditOverlay
    return EditOverlay(loaded_store, kv_storage, namespace="common")


@pytest.fixture
def locales_dir(tmp_path) -> Path:
    """Directory laid out as <lang>/<namespace>.json with the sample bundles."""
    root = tmp_path / "locales"
    for lang, tree in (("vi", VI_COMMON), ("en", EN_COMMON)):
        (root / lang).mkdir(parents=True)
        (root / lang / "common.json").write_text(
            json.dumps(tree, ensure_ascii=False), encoding='utf-8')
    return root


# =============================================================================
# SETTINGS FIXTURES
# =============================================================================

@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point settings at a temp file and reset the singletons around each test."""
    import locforge_config as config
    from models.settings_model import SettingsModel

    monkeypatch.setattr(config, "SETTINGS_FILE_PATH", tmp_path / "settings.json")
    SettingsModel.reset_instance()
    _reset_shortcuts()
    yield
    _reset_shortcuts()
    SettingsModel.reset_instance()


def _reset_shortcuts():
    # Qt is optional for engine-only test runs
    if "gui.shortcuts.shortcut_manager" in sys.modules:
        sys.modules["gui.shortcuts.shortcut_manager"].ShortcutManager.reset_instance()


@pytest.fixture
def settings_model():
    """Fresh SettingsModel instance for testing."""
    from models.settings_model import SettingsModel
    return SettingsModel.instance()
