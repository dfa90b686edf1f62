# -*- coding: utf-8 -*-
"""
LocForge Main Window

Hosts the translation editor panel. Ctrl+Alt+T shows/hides the panel and
Escape cancels the current edit or hides it. A header combo box switches
the interface language. Namespace loading does not depend on the panel
being visible.
"""

from gui.qt import Qt, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout

from qfluentwidgets import BodyLabel, ComboBox, TitleLabel

import locforge_config as config
from controllers.editor_controller import TranslationEditorController
from core.localization_runtime import LocalizationRuntime
from gui.shortcuts.shortcut_manager import ShortcutManager
from gui.widgets.translation_editor_panel import TranslationEditorPanel
from locforge_logger import get_logger
from models.settings_model import SettingsModel

logger = get_logger("gui.main_window")


class MainWindow(QMainWindow):
    """Application window with a toggleable translation editor."""

    def __init__(self, controller: TranslationEditorController,
                 runtime: LocalizationRuntime = None, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.runtime = runtime
        self.settings = SettingsModel.instance()

        self.setWindowTitle(f"{config.APP_NAME} {config.VERSION}")
        self.resize(*self.settings.window_size)

        self._setup_ui()
        self._init_shortcuts()

        if self.runtime is not None:
            self.runtime.add_listener(self._on_language_changed)
        # Edits to the common namespace can change the window texts
        self.controller.entries_changed.connect(lambda _entries: self._update_texts())

        self.set_editor_visible(self.settings.editor_visible)
        logger.debug("MainWindow initialized")

    def _setup_ui(self):
        central = QWidget(self)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(24, 24, 24, 24)

        header = QHBoxLayout()
        self.title_label = TitleLabel(config.APP_NAME)
        header.addWidget(self.title_label)
        header.addStretch()
        self.language_label = BodyLabel("Language")
        header.addWidget(self.language_label)
        self.language_combo = ComboBox()
        for code, name in config.SUPPORTED_LANGUAGES.items():
            self.language_combo.addItem(name, userData=code)
        self._sync_language_combo()
        self.language_combo.currentIndexChanged.connect(self._on_language_selected)
        header.addWidget(self.language_combo)
        layout.addLayout(header)

        self.hint_label = BodyLabel("")
        layout.addWidget(self.hint_label)

        self.editor_panel = TranslationEditorPanel(self.controller, central)
        self.editor_panel.close_requested.connect(lambda: self.set_editor_visible(False))
        layout.addWidget(self.editor_panel, 1)
        layout.addStretch()

        self.setCentralWidget(central)
        self._update_texts()

    def _init_shortcuts(self):
        mgr = ShortcutManager.instance()
        mgr.bind(self, "editor.toggle", self.toggle_editor, Qt.ApplicationShortcut)
        mgr.bind(self, "editor.close", self._on_escape)

    # =========================================================================
    # EDITOR VISIBILITY
    # =========================================================================

    @property
    def editor_visible(self) -> bool:
        return not self.editor_panel.isHidden()

    def set_editor_visible(self, visible: bool):
        self.editor_panel.setVisible(visible)
        if not visible:
            self.controller.cancel_edit()
        self.settings.editor_visible = visible

    def toggle_editor(self):
        self.set_editor_visible(not self.editor_visible)

    def _on_escape(self):
        if not self.editor_visible:
            return
        self.editor_panel.cancel_or_close()

    # =========================================================================
    # LANGUAGE
    # =========================================================================

    def _current_language(self) -> str:
        if self.runtime is not None:
            return self.runtime.language
        return self.settings.ui_language or config.FALLBACK_LANGUAGE

    def _sync_language_combo(self):
        index = self.language_combo.findData(self._current_language())
        if index >= 0 and index != self.language_combo.currentIndex():
            self.language_combo.blockSignals(True)
            self.language_combo.setCurrentIndex(index)
            self.language_combo.blockSignals(False)

    def _on_language_selected(self, index: int):
        language = self.language_combo.itemData(index)
        if language is not None:
            self.set_ui_language(language)

    def set_ui_language(self, language: str):
        """Switch the interface language and remember the choice."""
        if self.runtime is not None and not self.runtime.change_language(language):
            return
        self.settings.ui_language = language
        self.settings.save()
        self._sync_language_combo()
        logger.info(f"UI language switched to '{language}'")

    # =========================================================================
    # TEXTS
    # =========================================================================

    def _update_texts(self):
        sequence = ShortcutManager.instance().get_sequence("editor.toggle") or config.EDITOR_TOGGLE_SHORTCUT
        if self.runtime is None:
            self.hint_label.setText(f"Press {sequence} to open the translation editor")
            return
        self.title_label.setText(self.runtime.t("app.title", default=config.APP_NAME))
        self.language_label.setText(self.runtime.t("labels.language", default="Language"))
        self.hint_label.setText(self.runtime.t(
            "editor.hint", default=f"Press {sequence} to open the translation editor",
            shortcut=sequence))

    def _on_language_changed(self, language: str):
        self._sync_language_combo()
        self._update_texts()

    def closeEvent(self, event):
        """Persist window state and detach from the engine."""
        self.settings.window_size = (self.width(), self.height())
        if self.settings.is_dirty:
            self.settings.save()
        if self.runtime is not None:
            self.runtime.remove_listener(self._on_language_changed)
        self.controller.shutdown()
        super().closeEvent(event)
