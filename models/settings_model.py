# -*- coding: utf-8 -*-
"""
LocForge Settings Model

Abstracts application settings with:
- Type-safe access to settings
- Change notifications (observer callbacks)
- Validation and defaults
- JSON persistence in ~/.locforge/settings.json
"""

from typing import Optional, Dict, Any, List, Callable
import json

from locforge_logger import get_logger
import locforge_config as config

logger = get_logger("models.settings")


class SettingsModel:
    """
    Singleton model for application settings.

    Provides:
    - Type-safe property access
    - Change notifications (Observer pattern)
    - Explicit persistence via save()
    - Validation
    """

    _instance: Optional['SettingsModel'] = None
    _initialized: bool = False

    # Setting keys
    KEY_UI_LANGUAGE = "ui_language"
    KEY_LOCALES_SOURCE = "locales_source"      # "directory" | "http"
    KEY_LOCALES_BASE_URL = "locales_base_url"
    KEY_LOCALES_DIR = "locales_dir"
    KEY_ACTIVE_NAMESPACE = "active_namespace"
    KEY_EDITOR_VISIBLE = "editor_visible"
    KEY_WINDOW_W = "window_size_w"
    KEY_WINDOW_H = "window_size_h"

    # Keyboard Shortcuts
    KEY_SHORTCUTS = "keyboard_shortcuts"  # Dict[str, str] - action_id -> sequence string
    KEY_SHORTCUTS_ENABLED = "keyboard_shortcuts_enabled"

    def __new__(cls) -> 'SettingsModel':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if SettingsModel._initialized:
            return

        self._settings: Dict[str, Any] = {}
        self._observers: Dict[str, List[Callable]] = {}
        self._dirty = False

        self._load()

        SettingsModel._initialized = True
        logger.debug("SettingsModel initialized")

    # =============================================================================
    # SINGLETON ACCESS
    # =============================================================================

    @classmethod
    def instance(cls) -> 'SettingsModel':
        """Get the singleton instance."""
        if cls._instance is None:
            cls._instance = SettingsModel()
        return cls._instance

    @classmethod
    def reset_instance(cls):
        """Reset singleton (for testing)."""
        cls._instance = None
        cls._initialized = False

    # =============================================================================
    # PERSISTENCE
    # =============================================================================

    def _get_defaults(self) -> Dict[str, Any]:
        """Get default settings."""
        return {
            self.KEY_UI_LANGUAGE: None,  # None = detect from system locale
            self.KEY_LOCALES_SOURCE: config.DEFAULT_LOCALES_SOURCE,
            self.KEY_LOCALES_BASE_URL: config.DEFAULT_LOCALES_BASE_URL,
            self.KEY_LOCALES_DIR: str(config.LOCALES_DIR),
            self.KEY_ACTIVE_NAMESPACE: config.DEFAULT_NAMESPACE,
            self.KEY_EDITOR_VISIBLE: False,
            self.KEY_WINDOW_W: 1200,
            self.KEY_WINDOW_H: 800,
            self.KEY_SHORTCUTS: {},  # Empty means use manager defaults
            self.KEY_SHORTCUTS_ENABLED: True,
        }

    def _load(self):
        """Load settings from file."""
        self._settings = self._get_defaults()
        settings_file = config.SETTINGS_FILE_PATH

        if not settings_file.is_file():
            logger.info("Settings file not found, using defaults")
            return

        try:
            with settings_file.open('r', encoding='utf-8') as f:
                loaded = json.load(f)

            if isinstance(loaded, dict):
                self._settings.update(loaded)
                self._validate_all()
                logger.debug("Settings loaded successfully")
            else:
                logger.warning("Settings file format invalid, using defaults")

        except json.JSONDecodeError:
            logger.error("Settings file corrupted, using defaults")
        except OSError as e:
            logger.error(f"Error loading settings: {e}")

    def save(self) -> bool:
        """Save settings to file."""
        settings_file = config.SETTINGS_FILE_PATH

        try:
            settings_file.parent.mkdir(parents=True, exist_ok=True)

            with settings_file.open('w', encoding='utf-8') as f:
                json.dump(self._settings, f, indent=4, ensure_ascii=False)

            self._dirty = False
            logger.info("Settings saved successfully")
            return True

        except (OSError, TypeError) as e:
            logger.error(f"Failed to save settings: {e}")
            return False

    def _validate_all(self):
        """Validate all settings."""
        defaults = self._get_defaults()

        if self._settings.get(self.KEY_UI_LANGUAGE) not in [None, *config.SUPPORTED_LANGUAGES]:
            self._settings[self.KEY_UI_LANGUAGE] = defaults[self.KEY_UI_LANGUAGE]

        if self._settings.get(self.KEY_LOCALES_SOURCE) not in [config.LOCALES_SOURCE_DIRECTORY,
                                                               config.LOCALES_SOURCE_HTTP]:
            self._settings[self.KEY_LOCALES_SOURCE] = defaults[self.KEY_LOCALES_SOURCE]

        for key in [self.KEY_LOCALES_BASE_URL, self.KEY_LOCALES_DIR, self.KEY_ACTIVE_NAMESPACE]:
            if not isinstance(self._settings.get(key), str) or not self._settings.get(key):
                self._settings[key] = defaults[key]

        for key in [self.KEY_EDITOR_VISIBLE, self.KEY_SHORTCUTS_ENABLED]:
            if not isinstance(self._settings.get(key), bool):
                self._settings[key] = defaults[key]

        for key in [self.KEY_WINDOW_W, self.KEY_WINDOW_H]:
            if not isinstance(self._settings.get(key), int):
                self._settings[key] = defaults[key]

        if not isinstance(self._settings.get(self.KEY_SHORTCUTS), dict):
            self._settings[self.KEY_SHORTCUTS] = defaults[self.KEY_SHORTCUTS]

    # =============================================================================
    # OBSERVER PATTERN
    # =============================================================================

    def subscribe(self, key: str, callback: Callable[[Any], None]):
        """
        Subscribe to changes on a specific setting.

        Args:
            key: Setting key to watch
            callback: Function called with new value when setting changes
        """
        if key not in self._observers:
            self._observers[key] = []
        self._observers[key].append(callback)

    def unsubscribe(self, key: str, callback: Callable):
        """Unsubscribe from setting changes."""
        if key in self._observers and callback in self._observers[key]:
            self._observers[key].remove(callback)

    def _notify(self, key: str, value: Any):
        for callback in self._observers.get(key, []):
            try:
                callback(value)
            except Exception as e:
                logger.error(f"Error in settings observer for '{key}': {e}")

    # =============================================================================
    # GENERIC ACCESS
    # =============================================================================

    def get(self, key: str, default: Any = None) -> Any:
        return self._settings.get(key, default)

    def set(self, key: str, value: Any, save: bool = False):
        """
        Set a setting value.

        Args:
            key: Setting key
            value: New value
            save: If True, immediately persist to disk
        """
        old_value = self._settings.get(key)
        if old_value != value:
            self._settings[key] = value
            self._dirty = True
            self._notify(key, value)

            if save:
                self.save()

    # =============================================================================
    # TYPED PROPERTIES
    # =============================================================================

    @property
    def ui_language(self) -> Optional[str]:
        return self._settings.get(self.KEY_UI_LANGUAGE)

    @ui_language.setter
    def ui_language(self, value: Optional[str]):
        if value is not None and value not in config.SUPPORTED_LANGUAGES:
            raise ValueError(f"Invalid UI language: {value}")
        self.set(self.KEY_UI_LANGUAGE, value)

    @property
    def locales_source(self) -> str:
        return self._settings.get(self.KEY_LOCALES_SOURCE, config.DEFAULT_LOCALES_SOURCE)

    @locales_source.setter
    def locales_source(self, value: str):
        if value not in (config.LOCALES_SOURCE_DIRECTORY, config.LOCALES_SOURCE_HTTP):
            raise ValueError(f"Invalid locales source: {value}")
        self.set(self.KEY_LOCALES_SOURCE, value)

    @property
    def locales_base_url(self) -> str:
        return self._settings.get(self.KEY_LOCALES_BASE_URL, config.DEFAULT_LOCALES_BASE_URL)

    @locales_base_url.setter
    def locales_base_url(self, value: str):
        self.set(self.KEY_LOCALES_BASE_URL, value)

    @property
    def locales_dir(self) -> str:
        return self._settings.get(self.KEY_LOCALES_DIR, str(config.LOCALES_DIR))

    @locales_dir.setter
    def locales_dir(self, value: str):
        self.set(self.KEY_LOCALES_DIR, str(value))

    @property
    def active_namespace(self) -> str:
        return self._settings.get(self.KEY_ACTIVE_NAMESPACE, config.DEFAULT_NAMESPACE)

    @active_namespace.setter
    def active_namespace(self, value: str):
        self.set(self.KEY_ACTIVE_NAMESPACE, value)

    @property
    def editor_visible(self) -> bool:
        return self._settings.get(self.KEY_EDITOR_VISIBLE, False)

    @editor_visible.setter
    def editor_visible(self, value: bool):
        self.set(self.KEY_EDITOR_VISIBLE, bool(value))

    @property
    def window_size(self) -> tuple:
        """Get window size as (width, height) tuple."""
        return (
            self._settings.get(self.KEY_WINDOW_W, 1200),
            self._settings.get(self.KEY_WINDOW_H, 800)
        )

    @window_size.setter
    def window_size(self, value: tuple):
        self.set(self.KEY_WINDOW_W, value[0])
        self.set(self.KEY_WINDOW_H, value[1])

    @property
    def keyboard_shortcuts(self) -> Dict[str, str]:
        """Get stored keyboard shortcuts (action_id -> sequence)."""
        return self._settings.get(self.KEY_SHORTCUTS, {})

    @keyboard_shortcuts.setter
    def keyboard_shortcuts(self, value: Dict[str, str]):
        self.set(self.KEY_SHORTCUTS, value)

    @property
    def keyboard_shortcuts_enabled(self) -> bool:
        return self._settings.get(self.KEY_SHORTCUTS_ENABLED, True)

    @keyboard_shortcuts_enabled.setter
    def keyboard_shortcuts_enabled(self, value: bool):
        self.set(self.KEY_SHORTCUTS_ENABLED, value)

    # =============================================================================
    # UTILITY
    # =============================================================================

    @property
    def is_dirty(self) -> bool:
        """Check if settings have unsaved changes."""
        return self._dirty

    def __repr__(self) -> str:
        return f"SettingsModel(dirty={self._dirty})"
