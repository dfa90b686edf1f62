# -*- coding: utf-8 -*-
"""
LocForge Localization Runtime

Resolves translation keys against the LocaleBundleStore for the current UI
language. Lookups read the live trees, so saved edits show up immediately.

Usage::

    runtime = LocalizationRuntime(store)
    runtime.change_language("en")
    runtime.translate("buttons.save")                  # default namespace
    runtime.translate("controls:slider.size", size=3)  # explicit namespace
"""

import locale
import re
import threading
from typing import Any, Callable, List, Optional

from core.bundle_store import LocaleBundleStore
from core.locale_tree import get_at_path, leaf_to_text
from locforge_config import (
    DEFAULT_NAMESPACE, FALLBACK_LANGUAGE, NAMESPACE_SEPARATOR, SUPPORTED_LANGUAGES,
)
from locforge_logger import get_logger

logger = get_logger("core.localization")

_PLACEHOLDER = re.compile(r"\{\{\s*([\w.]+)\s*\}\}")


def interpolate(text: str, **kwargs: Any) -> str:
    """Replace {{name}} placeholders; unknown names are left as-is."""
    if not kwargs:
        return text

    def _sub(match):
        name = match.group(1)
        if name in kwargs:
            return str(kwargs[name])
        logger.warning(f"Missing interpolation value '{name}' in '{text}'")
        return match.group(0)

    return _PLACEHOLDER.sub(_sub, text)


def detect_language(preferred: Optional[str] = None) -> str:
    """
    Pick the UI language: explicit preference, then system locale, then fallback.
    """
    if preferred in SUPPORTED_LANGUAGES:
        return preferred

    try:
        system_locale = locale.getlocale()[0] or ""
    except ValueError:
        system_locale = ""

    code = system_locale.replace("-", "_").split("_")[0].lower()
    if code in SUPPORTED_LANGUAGES:
        return code
    return FALLBACK_LANGUAGE


class LocalizationRuntime:
    """Key lookup with namespace resolution, language fallback and interpolation."""

    def __init__(self, store: LocaleBundleStore, language: Optional[str] = None,
                 fallback: str = FALLBACK_LANGUAGE, default_namespace: str = DEFAULT_NAMESPACE):
        self.store = store
        self.fallback = fallback
        self.default_namespace = default_namespace
        self._lock = threading.Lock()
        self._language = language if language in SUPPORTED_LANGUAGES else fallback
        self._listeners: List[Callable[[str], None]] = []

    @property
    def language(self) -> str:
        with self._lock:
            return self._language

    def change_language(self, language: str) -> bool:
        if language not in SUPPORTED_LANGUAGES:
            logger.warning(f"Unsupported language code: '{language}'")
            return False

        with self._lock:
            changed = language != self._language
            self._language = language

        if changed:
            logger.debug(f"UI language set to: {language}")
            for cb in list(self._listeners):
                try:
                    cb(language)
                except Exception as e:
                    logger.error(f"Error in language listener: {e}")
        return True

    def add_listener(self, callback: Callable[[str], None]):
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[str], None]):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _split(self, key: str, namespace: Optional[str]):
        if namespace is None and NAMESPACE_SEPARATOR in key:
            namespace, key = key.split(NAMESPACE_SEPARATOR, 1)
        return namespace or self.default_namespace, key

    def _lookup(self, language: str, namespace: str, key: str) -> Optional[str]:
        value = get_at_path(self.store.get_bundle(language, namespace), key)
        if isinstance(value, dict):
            return None
        return leaf_to_text(value)

    def exists(self, key: str, namespace: Optional[str] = None, language: Optional[str] = None) -> bool:
        namespace, key = self._split(key, namespace)
        return self._lookup(language or self.language, namespace, key) is not None

    def translate(self, key: str, namespace: Optional[str] = None, language: Optional[str] = None,
                  default: Optional[str] = None, **kwargs: Any) -> str:
        """
        Look up a translated string.

        Args:
            key: Dotted key, optionally prefixed with "namespace:"
            namespace: Namespace override (wins over a prefix-free key)
            language: Language override for this call only
            default: Returned when neither language has the key (else the key)
            **kwargs: {{placeholder}} values

        Returns:
            The translated string
        """
        namespace, path = self._split(key, namespace)
        lang = language or self.language

        text = self._lookup(lang, namespace, path)
        if text is None and lang != self.fallback:
            text = self._lookup(self.fallback, namespace, path)
        if text is None:
            text = default if default is not None else path

        return interpolate(text, **kwargs)

    t = translate
