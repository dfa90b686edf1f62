# -*- coding: utf-8 -*-
"""
TranslationFilterProxyModel - search filtering

Filters the table model with the same case-insensitive matching the engine
uses (key, Vietnamese or English value). The source data is never changed.
"""

from typing import Optional

from gui.qt import QSortFilterProxyModel, QModelIndex

from core.translation_stats import entry_matches
from gui.models.translation_table_model import TranslationTableModel
from locforge_logger import get_logger

logger = get_logger("gui.models.filter_proxy")


class TranslationFilterProxyModel(QSortFilterProxyModel):
    """
    Search proxy for the translation table.

    ROW WARNING:
    Proxy rows are not source rows. Resolve the key with get_source_key()
    before acting on a row.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self._search_text: str = ""

        # Source order is already sorted by key; keep it
        self.setDynamicSortFilter(False)

    @property
    def search_text(self) -> str:
        return self._search_text

    def set_search_text(self, text: str) -> None:
        self._search_text = text or ""
        self.invalidateFilter()

    def filterAcceptsRow(self, source_row: int, source_parent: QModelIndex) -> bool:
        if not self._search_text:
            return True

        model = self.sourceModel()
        if not isinstance(model, TranslationTableModel):
            return True

        entry = model.entry_at(source_row)
        if entry is None:
            return False
        return entry_matches(entry, self._search_text)

    def get_source_key(self, proxy_row: int) -> Optional[str]:
        """Resolve the entry key behind a proxy row."""
        source_index = self.mapToSource(self.index(proxy_row, 0))
        if not source_index.isValid():
            return None
        entry = self.sourceModel().entry_at(source_index.row())
        return entry.key if entry else None
