# -*- coding: utf-8 -*-
"""
LocForge Controllers Package

Controllers coordinate the engine (core/) with the Qt views (gui/).
"""

from controllers.editor_controller import TranslationEditorController, NamespaceLoadWorker

__all__ = [
    'TranslationEditorController',
    'NamespaceLoadWorker',
]
