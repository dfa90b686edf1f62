# -*- coding: utf-8 -*-
"""
TranslationTableModel - bilingual entry table

Read-only QAbstractTableModel over a list of BilingualEntry:
    Key | Vietnamese | English
Editing goes through the EditOverlay (via the controller), never setData().

PERFORMANCE:
- data() is O(1): list[index] access only
- QBrush objects are cached at class level
"""

from typing import Any, Dict, List, Optional

from gui.qt import Qt, QAbstractTableModel, QModelIndex, QBrush, QColor, QFont

import locforge_config as config
from locforge_logger import get_logger
from models.bilingual_entry import BilingualEntry

logger = get_logger("gui.models.table")


# =============================================================================
# COLUMNS
# =============================================================================

class TableColumn:
    """Table column indices and headers."""
    KEY = 0
    PRIMARY = 1
    SECONDARY = 2

    HEADERS = ['Key', 'Vietnamese', 'English']
    COUNT = 3

    LANGUAGE = {PRIMARY: config.PRIMARY_LANGUAGE, SECONDARY: config.SECONDARY_LANGUAGE}


# =============================================================================
# COLOR CACHE
# =============================================================================

class ColorCache:
    """Frequently used brushes."""
    BG_EVEN = QBrush(QColor(config.STYLE_DEFAULTS["bg_even_color"]))
    BG_ODD = QBrush(QColor(config.STYLE_DEFAULTS["bg_odd_color"]))
    BG_MISSING = QBrush(QColor(config.STYLE_DEFAULTS["missing_bg_color"]))

    FG_DEFAULT = QBrush(QColor(config.STYLE_DEFAULTS["text_color"]))
    FG_MISSING = QBrush(QColor(config.STYLE_DEFAULTS["missing_text_color"]))
    FG_KEY = QBrush(QColor(config.STYLE_DEFAULTS["key_text_color"]))


# =============================================================================
# MODEL
# =============================================================================

class TranslationTableModel(QAbstractTableModel):
    """
    Table model for the translation editor.

    Rows are addressed by key (stable) rather than by index, because the
    filter proxy reorders and hides rows.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self._entries: List[BilingualEntry] = []
        self._key_to_index: Dict[str, int] = {}
        self._editing_key: Optional[str] = None

    # =========================================================================
    # QAbstractTableModel API
    # =========================================================================

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self._entries)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return TableColumn.COUNT

    def headerData(self, section: int, orientation: Qt.Orientation,
                   role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if orientation == Qt.Orientation.Horizontal and role == Qt.ItemDataRole.DisplayRole:
            if 0 <= section < len(TableColumn.HEADERS):
                return TableColumn.HEADERS[section]
        return None

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if not index.isValid():
            return None

        row_idx = index.row()
        col_idx = index.column()
        if row_idx < 0 or row_idx >= len(self._entries):
            return None

        entry = self._entries[row_idx]

        if role == Qt.ItemDataRole.DisplayRole:
            if col_idx == TableColumn.KEY:
                return entry.key
            return entry.display_value(TableColumn.LANGUAGE[col_idx])

        elif role == Qt.ItemDataRole.ForegroundRole:
            if col_idx == TableColumn.KEY:
                return ColorCache.FG_KEY
            if self._is_missing(entry, col_idx):
                return ColorCache.FG_MISSING
            return ColorCache.FG_DEFAULT

        elif role == Qt.ItemDataRole.BackgroundRole:
            if col_idx != TableColumn.KEY and self._is_missing(entry, col_idx):
                return ColorCache.BG_MISSING
            return ColorCache.BG_EVEN if row_idx % 2 == 0 else ColorCache.BG_ODD

        elif role == Qt.ItemDataRole.FontRole:
            if col_idx == TableColumn.KEY or entry.key == self._editing_key:
                font = QFont()
                if col_idx == TableColumn.KEY:
                    font.setFamily("monospace")
                if entry.key == self._editing_key:
                    font.setBold(True)
                return font
            if self._is_missing(entry, col_idx):
                font = QFont()
                font.setItalic(True)
                return font
            return None

        elif role == Qt.ItemDataRole.ToolTipRole:
            if col_idx == TableColumn.KEY:
                return f"{entry.namespace}:{entry.key}"
            value = entry.value_for(TableColumn.LANGUAGE[col_idx])
            if value is None:
                return "Key does not exist in this language"
            if value == "":
                return "Empty value"
            return None

        elif role == Qt.ItemDataRole.UserRole:
            return entry.key

        return None

    def flags(self, index: QModelIndex) -> Qt.ItemFlag:
        if not index.isValid():
            return Qt.ItemFlag.NoItemFlags
        return Qt.ItemFlag.ItemIsEnabled | Qt.ItemFlag.ItemIsSelectable

    @staticmethod
    def _is_missing(entry: BilingualEntry, col_idx: int) -> bool:
        if col_idx == TableColumn.PRIMARY:
            return entry.is_missing_primary
        if col_idx == TableColumn.SECONDARY:
            return entry.is_missing_secondary
        return False

    # =========================================================================
    # DATA API
    # =========================================================================

    def set_entries(self, entries: List[BilingualEntry]) -> None:
        """Replace all rows."""
        self.beginResetModel()
        self._entries = list(entries)
        self._key_to_index = {e.key: i for i, e in enumerate(self._entries)}
        self.endResetModel()
        logger.debug(f"[TranslationTableModel] Loaded {len(self._entries)} rows")

    def entry_at(self, row_idx: int) -> Optional[BilingualEntry]:
        if 0 <= row_idx < len(self._entries):
            return self._entries[row_idx]
        return None

    def entries(self) -> List[BilingualEntry]:
        return list(self._entries)

    def get_index_by_key(self, key: str) -> Optional[int]:
        return self._key_to_index.get(key)

    def set_editing_key(self, key: Optional[str]) -> None:
        """Highlight the row being edited (None clears)."""
        previous = self._editing_key
        self._editing_key = key
        for k in (previous, key):
            row_idx = self._key_to_index.get(k) if k else None
            if row_idx is not None:
                self.dataChanged.emit(self.index(row_idx, 0), self.index(row_idx, TableColumn.COUNT - 1))
