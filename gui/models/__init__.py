# -*- coding: utf-8 -*-
"""
gui/models/__init__.py - Qt models for the translation table
"""

from gui.models.translation_table_model import (
    TranslationTableModel,
    TableColumn,
    ColorCache
)
from gui.models.translation_filter_proxy import TranslationFilterProxyModel

__all__ = [
    'TranslationTableModel',
    'TranslationFilterProxyModel',
    'TableColumn',
    'ColorCache'
]
