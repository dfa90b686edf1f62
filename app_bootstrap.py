# -*- coding: utf-8 -*-
"""
LocForge Application Bootstrap (Composition Root)

Creates and wires the main components:
- Engine: bundle store, fetcher, storage, overlay, loader, reconciler, runtime
- Controller and main window (GUI only)
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

import locforge_config as config
from core.bundle_fetcher import BundleFetcher, DirectoryBundleFetcher, HttpBundleFetcher
from core.bundle_store import LocaleBundleStore
from core.edit_overlay import EditOverlay
from core.entry_reconciler import EntryReconciler
from core.kv_storage import KeyValueStorage
from core.localization_runtime import LocalizationRuntime, detect_language
from core.namespace_loader import NamespaceLoader
from locforge_logger import get_logger
from models.settings_model import SettingsModel

logger = get_logger("bootstrap")


@dataclass
class Engine:
    """The wired engine components."""
    store: LocaleBundleStore
    fetcher: BundleFetcher
    storage: KeyValueStorage
    overlay: EditOverlay
    loader: NamespaceLoader
    reconciler: EntryReconciler
    runtime: LocalizationRuntime


def make_fetcher(settings: SettingsModel, locales_dir: Optional[Union[str, Path]] = None,
                 base_url: Optional[str] = None) -> BundleFetcher:
    """Pick the bundle source: explicit arguments win over settings."""
    if base_url:
        return HttpBundleFetcher(base_url)
    if locales_dir:
        return DirectoryBundleFetcher(locales_dir)
    if settings.locales_source == config.LOCALES_SOURCE_HTTP:
        return HttpBundleFetcher(settings.locales_base_url)
    return DirectoryBundleFetcher(settings.locales_dir)


def build_engine(settings: Optional[SettingsModel] = None,
                 fetcher: Optional[BundleFetcher] = None,
                 storage_path: Optional[Union[str, Path]] = None,
                 namespace: Optional[str] = None,
                 language: Optional[str] = None) -> Engine:
    """
    Compose the engine without any GUI.

    Args:
        settings: Settings to read defaults from (singleton if omitted)
        fetcher: Bundle source (chosen from settings if omitted)
        storage_path: Persistent storage file (config default if omitted)
        namespace: Namespace the overlay starts on
        language: UI language (detected if omitted)
    """
    settings = settings or SettingsModel.instance()
    fetcher = fetcher or make_fetcher(settings)

    store = LocaleBundleStore()
    storage = KeyValueStorage(storage_path or config.STORAGE_FILE_PATH)
    overlay = EditOverlay(store, storage, namespace=namespace or settings.active_namespace)
    loader = NamespaceLoader(store, fetcher, overlay=overlay)
    reconciler = EntryReconciler(store, loader=loader)
    runtime = LocalizationRuntime(store, language=detect_language(language or settings.ui_language))

    logger.info(f"Engine ready: source={fetcher.describe('{lang}', '{ns}')}, "
                f"language={runtime.language}, namespace={overlay.active_namespace}")
    return Engine(store, fetcher, storage, overlay, loader, reconciler, runtime)


def bootstrap(engine: Optional[Engine] = None) -> Tuple['TranslationEditorController', 'MainWindow']:
    """
    Build the controller and main window on top of the engine.

    A QApplication must already exist.
    """
    logger.info("=== LocForge Bootstrap Starting ===")
    engine = engine or build_engine()

    # Import here so headless use never loads Qt
    from controllers.editor_controller import TranslationEditorController
    from gui.main_window import MainWindow

    settings = SettingsModel.instance()
    controller = TranslationEditorController(
        engine.store, engine.loader, engine.reconciler, engine.overlay,
    )
    window = MainWindow(controller, runtime=engine.runtime)

    # Remember the namespace across sessions
    window.editor_panel.namespace_segment.currentItemChanged.connect(
        lambda ns: settings.set(SettingsModel.KEY_ACTIVE_NAMESPACE, ns, save=True))

    # Window texts live in the default namespace; load it and the active one
    controller.load_namespace(config.DEFAULT_NAMESPACE)
    if controller.namespace != config.DEFAULT_NAMESPACE:
        controller.load_namespace(controller.namespace)

    logger.info("=== LocForge Bootstrap Complete ===")
    return controller, window
