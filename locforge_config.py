import os, sys
from pathlib import Path

def resource_path(relative_path):
    """Get absolute path to resource, works for dev and for PyInstaller."""
    try:
        # PyInstaller creates a temp folder and stores path in _MEIPASS
        base_path = sys._MEIPASS
    except AttributeError:
        # Development mode: use directory containing this config file (project root)
        base_path = os.path.dirname(os.path.abspath(__file__))

    return os.path.join(base_path, relative_path)

VERSION = "0.4.2"
APP_NAME = "LocForge"

# Languages: primary is the source of truth for the Vietnamese UI, secondary is English
PRIMARY_LANGUAGE = "vi"
SECONDARY_LANGUAGE = "en"
SUPPORTED_LANGUAGES = {
    "vi": "Tiếng Việt",
    "en": "English",
}
FALLBACK_LANGUAGE = "vi"

DEFAULT_NAMESPACE = "common"
NAMESPACES = ["common", "controls", "categories", "messages", "sheet", "board", "export"]

KEY_DELIMITER = "."
NAMESPACE_SEPARATOR = ":"

# Bundle sources
LOCALES_SOURCE_DIRECTORY = "directory"
LOCALES_SOURCE_HTTP = "http"
DEFAULT_LOCALES_SOURCE = LOCALES_SOURCE_DIRECTORY
DEFAULT_LOCALES_BASE_URL = "http://localhost:5173/kanji-app/locales"
LOCALES_DIR = Path(resource_path("locales"))

SETTINGS_DIR = Path.home() / ".locforge"
SETTINGS_FILE_PATH = SETTINGS_DIR / "settings.json"
STORAGE_FILE_PATH = SETTINGS_DIR / "storage.json"
LOG_DIR = SETTINGS_DIR / "logs"

OVERLAY_STORAGE_KEY = "translation-edits"
EXPORT_FILE_NAME = "translation-edits.json"

EDITOR_TOGGLE_SHORTCUT = "Ctrl+Alt+T"
EDITOR_CLOSE_SHORTCUT = "Esc"
MISSING_PLACEHOLDER = "(missing)"

STYLE_DEFAULTS = {
    "text_color": "#f0f0f0",
    "missing_text_color": "#ff6b6b",
    "missing_bg_color": "#3a1e1e",
    "key_text_color": "#60a5fa",
    "bg_even_color": "#2b2b2b",
    "bg_odd_color": "#3c3f41",
}

__all__ = [
    "VERSION", "APP_NAME", "resource_path",
    "PRIMARY_LANGUAGE", "SECONDARY_LANGUAGE", "SUPPORTED_LANGUAGES", "FALLBACK_LANGUAGE",
    "DEFAULT_NAMESPACE", "NAMESPACES", "KEY_DELIMITER", "NAMESPACE_SEPARATOR",
    "LOCALES_SOURCE_DIRECTORY", "LOCALES_SOURCE_HTTP", "DEFAULT_LOCALES_SOURCE",
    "DEFAULT_LOCALES_BASE_URL", "LOCALES_DIR",
    "SETTINGS_DIR", "SETTINGS_FILE_PATH", "STORAGE_FILE_PATH", "LOG_DIR",
    "OVERLAY_STORAGE_KEY", "EXPORT_FILE_NAME",
    "EDITOR_TOGGLE_SHORTCUT", "EDITOR_CLOSE_SHORTCUT", "MISSING_PLACEHOLDER",
    "STYLE_DEFAULTS",
]

# Import logger at the end to avoid circular imports
from locforge_logger import get_logger
_logger = get_logger("config")
_logger.debug("locforge_config.py loaded")
