# -*- coding: utf-8 -*-
"""
LocForge Shortcut Manager

Keyboard shortcuts for the translation editor. Custom sequences are stored
in SettingsModel; live QShortcut objects are rebuilt when they change.
"""

from typing import Callable, Dict, List, Optional

from gui.qt import QObject, Signal, Qt, QKeySequence, QShortcut

import locforge_config as config
from locforge_logger import get_logger
from models.settings_model import SettingsModel

logger = get_logger("gui.shortcuts")


class ShortcutManager(QObject):
    """
    Keyboard shortcut registry.

    Usage:
        mgr = ShortcutManager.instance()
        mgr.bind(window, "editor.toggle", window.toggle_editor)
    """

    _instance = None

    shortcuts_changed = Signal()

    # action_id -> {default, name, desc}
    DEFAULT_KEYMAP = {
        "editor.toggle": {
            "default": config.EDITOR_TOGGLE_SHORTCUT,
            "name": "Toggle Translation Editor",
            "desc": "Show or hide the translation editor panel"
        },
        "editor.close": {
            "default": config.EDITOR_CLOSE_SHORTCUT,
            "name": "Close Translation Editor",
            "desc": "Cancel the current edit, or hide the editor"
        },
    }

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if getattr(self, '_initialized', False):
            return

        super().__init__()
        self._settings = SettingsModel.instance()
        self._handlers: List[dict] = []

        self._settings.subscribe(SettingsModel.KEY_SHORTCUTS, self._on_settings_changed)
        self._settings.subscribe(SettingsModel.KEY_SHORTCUTS_ENABLED, self._on_settings_changed)

        self._initialized = True
        logger.debug("ShortcutManager initialized")

    @classmethod
    def instance(cls) -> 'ShortcutManager':
        if cls._instance is None:
            cls._instance = ShortcutManager()
        return cls._instance

    @classmethod
    def reset_instance(cls):
        """Reset singleton (for testing)."""
        inst = cls._instance
        if inst is not None and getattr(inst, '_initialized', False):
            inst._settings.unsubscribe(SettingsModel.KEY_SHORTCUTS, inst._on_settings_changed)
            inst._settings.unsubscribe(SettingsModel.KEY_SHORTCUTS_ENABLED, inst._on_settings_changed)
        cls._instance = None

    # =========================================================================
    # KEYMAP
    # =========================================================================

    def get_action_map(self) -> Dict[str, dict]:
        """All known actions with defaults merged with overrides."""
        overrides = self._settings.keyboard_shortcuts
        return {
            action_id: {
                "name": info["name"],
                "desc": info["desc"],
                "default": info["default"],
                "sequence": overrides.get(action_id, info["default"]),
            }
            for action_id, info in self.DEFAULT_KEYMAP.items()
        }

    def get_sequence(self, action_id: str) -> str:
        if not self._settings.keyboard_shortcuts_enabled:
            return ""
        default = self.DEFAULT_KEYMAP.get(action_id, {}).get("default", "")
        return self._settings.keyboard_shortcuts.get(action_id, default)

    def set_sequence(self, action_id: str, sequence_str: str):
        """
        Change the key sequence of an action and persist it.

        Raises:
            ValueError: If the sequence is already used by another action
        """
        if action_id not in self.DEFAULT_KEYMAP:
            logger.warning(f"Attempt to set unknown action: {action_id}")
            return

        owner = self.check_conflict(sequence_str, exclude_action=action_id)
        if owner:
            raise ValueError(f"Shortcut already in use by: {self.DEFAULT_KEYMAP[owner]['name']}")

        current_map = self._settings.keyboard_shortcuts.copy()
        if sequence_str == self.DEFAULT_KEYMAP[action_id]["default"]:
            current_map.pop(action_id, None)
        else:
            current_map[action_id] = sequence_str

        # Observer rebuilds the live shortcuts
        self._settings.keyboard_shortcuts = current_map
        self._settings.save()
        self.shortcuts_changed.emit()

    def check_conflict(self, sequence_str: str, exclude_action: Optional[str] = None) -> Optional[str]:
        """Return the action_id already using the sequence, or None."""
        if not sequence_str:
            return None

        wanted = QKeySequence(sequence_str).toString(QKeySequence.PortableText)
        for action_id, info in self.get_action_map().items():
            if action_id == exclude_action:
                continue
            if QKeySequence(info["sequence"]).toString(QKeySequence.PortableText) == wanted:
                return action_id
        return None

    # =========================================================================
    # BINDING
    # =========================================================================

    def bind(self, parent_widget, action_id: str, callback: Callable,
             context: Qt.ShortcutContext = Qt.WindowShortcut) -> Optional[QShortcut]:
        """Create a live QShortcut on parent_widget for an action."""
        handler = {
            'action_id': action_id,
            'parent': parent_widget,
            'callback': callback,
            'context': context,
            'shortcut_obj': None,
        }
        self._create_shortcut_object(handler)
        self._handlers.append(handler)
        logger.debug(f"Bound action '{action_id}' to {type(parent_widget).__name__}")
        return handler['shortcut_obj']

    def shortcut_for(self, action_id: str) -> Optional[QShortcut]:
        """Most recently bound live shortcut for an action."""
        for handler in reversed(self._handlers):
            if handler['action_id'] == action_id:
                return handler['shortcut_obj']
        return None

    def _create_shortcut_object(self, handler: dict):
        seq_str = self.get_sequence(handler['action_id'])
        if not seq_str:
            handler['shortcut_obj'] = None
            return

        sc = QShortcut(QKeySequence(seq_str), handler['parent'])
        sc.setContext(handler['context'])
        sc.activated.connect(handler['callback'])
        handler['shortcut_obj'] = sc

    def _refresh_handlers(self):
        logger.debug("Refreshing shortcut bindings...")
        for handler in self._handlers:
            old = handler['shortcut_obj']
            if old is not None:
                old.setEnabled(False)
                old.setParent(None)
                old.deleteLater()
                handler['shortcut_obj'] = None
            self._create_shortcut_object(handler)

    def _on_settings_changed(self, value):
        self._refresh_handlers()
