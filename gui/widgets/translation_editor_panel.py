# -*- coding: utf-8 -*-
"""
LocForge Translation Editor Panel

Layout:
- Top: title + stats card (Total, Complete, Missing VI, Missing EN, %)
- Namespace segment + search box with "N of M" label
- Table (Key | Vietnamese | English)
- Edit bar: Vietnamese / English fields, Edit / Save / Cancel
- Footer: Export / Clear edits, loading indicator
"""

from gui.qt import (
    Signal, QWidget, QVBoxLayout, QHBoxLayout, QHeaderView,
    QAbstractItemView, QFileDialog,
)

from qfluentwidgets import (
    SubtitleLabel, BodyLabel, StrongBodyLabel, CardWidget, PushButton,
    PrimaryPushButton, SearchLineEdit, SegmentedWidget, LineEdit, TableView,
    IndeterminateProgressBar, InfoBar, InfoBarPosition,
)

import locforge_config as config
from controllers.editor_controller import TranslationEditorController
from gui.models.translation_filter_proxy import TranslationFilterProxyModel
from gui.models.translation_table_model import TableColumn, TranslationTableModel
from locforge_enums import LoadState, NoticeLevel
from locforge_logger import get_logger
from models.bilingual_entry import TranslationStats

logger = get_logger("gui.widgets.editor_panel")


class StatsCard(CardWidget):
    """Namespace statistics strip."""

    FIELDS = [
        ("total", "Total"),
        ("complete", "Complete"),
        ("missing_primary", "Missing VI"),
        ("missing_secondary", "Missing EN"),
        ("completion_percent", "Completion"),
    ]

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(16, 8, 16, 8)
        layout.setSpacing(24)

        self.value_labels = {}
        for field, caption in self.FIELDS:
            column = QVBoxLayout()
            column.setSpacing(2)
            value = StrongBodyLabel("0")
            column.addWidget(value)
            column.addWidget(BodyLabel(caption))
            layout.addLayout(column)
            self.value_labels[field] = value
        layout.addStretch()

    def set_stats(self, stats: TranslationStats):
        for field, value in stats.as_dict().items():
            label = self.value_labels.get(field)
            if label is None:
                continue
            label.setText(f"{value}%" if field == "completion_percent" else str(value))


class TranslationEditorPanel(QWidget):
    """
    Bilingual translation editor.

    All engine work goes through the controller; the panel only renders
    what the controller publishes.
    """

    close_requested = Signal()

    def __init__(self, controller: TranslationEditorController, parent=None):
        super().__init__(parent)
        self.controller = controller

        self.table_model = TranslationTableModel(self)
        self.proxy_model = TranslationFilterProxyModel(self)
        self.proxy_model.setSourceModel(self.table_model)

        self._setup_ui()
        self._connect_signals()

        self._on_load_state_changed(controller.namespace, controller.load_state.value)
        self._set_editing_ui(None)
        logger.debug("TranslationEditorPanel initialized")

    # =========================================================================
    # UI
    # =========================================================================

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(10)

        header = QHBoxLayout()
        header.addWidget(SubtitleLabel("Translation Editor"))
        header.addStretch()
        self.close_btn = PushButton("Close")
        header.addWidget(self.close_btn)
        layout.addLayout(header)

        self.stats_card = StatsCard(self)
        layout.addWidget(self.stats_card)

        # Namespace + search
        top_bar = QHBoxLayout()
        top_bar.setSpacing(12)

        self.namespace_segment = SegmentedWidget()
        for ns in config.NAMESPACES:
            self.namespace_segment.addItem(ns, ns)
        self.namespace_segment.setCurrentItem(self.controller.namespace)
        top_bar.addWidget(self.namespace_segment)
        top_bar.addStretch()

        self.search_edit = SearchLineEdit()
        self.search_edit.setPlaceholderText("Search keys and values...")
        self.search_edit.setMinimumWidth(200)
        self.search_edit.setMaximumWidth(320)
        top_bar.addWidget(self.search_edit)

        self.match_label = BodyLabel("0 of 0")
        top_bar.addWidget(self.match_label)
        layout.addLayout(top_bar)

        self.loading_bar = IndeterminateProgressBar(self)
        self.loading_bar.setVisible(False)
        layout.addWidget(self.loading_bar)

        # Table
        self.table_view = TableView(self)
        self.table_view.setModel(self.proxy_model)
        self.table_view.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.table_view.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.table_view.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.table_view.verticalHeader().setVisible(False)
        h_header = self.table_view.horizontalHeader()
        h_header.setSectionResizeMode(TableColumn.KEY, QHeaderView.ResizeMode.ResizeToContents)
        h_header.setSectionResizeMode(TableColumn.PRIMARY, QHeaderView.ResizeMode.Stretch)
        h_header.setSectionResizeMode(TableColumn.SECONDARY, QHeaderView.ResizeMode.Stretch)
        layout.addWidget(self.table_view, 1)

        # Edit bar
        edit_bar = QHBoxLayout()
        edit_bar.setSpacing(8)
        self.editing_label = StrongBodyLabel("")
        edit_bar.addWidget(self.editing_label)
        self.primary_edit = LineEdit()
        self.primary_edit.setPlaceholderText(config.SUPPORTED_LANGUAGES[config.PRIMARY_LANGUAGE])
        edit_bar.addWidget(self.primary_edit, 1)
        self.secondary_edit = LineEdit()
        self.secondary_edit.setPlaceholderText(config.SUPPORTED_LANGUAGES[config.SECONDARY_LANGUAGE])
        edit_bar.addWidget(self.secondary_edit, 1)
        self.edit_btn = PushButton("Edit")
        self.save_btn = PrimaryPushButton("Save")
        self.cancel_btn = PushButton("Cancel")
        for btn in (self.edit_btn, self.save_btn, self.cancel_btn):
            edit_bar.addWidget(btn)
        layout.addLayout(edit_bar)

        # Footer
        footer = QHBoxLayout()
        self.export_btn = PushButton("Export edits")
        self.clear_btn = PushButton("Clear edits")
        footer.addWidget(self.export_btn)
        footer.addWidget(self.clear_btn)
        footer.addStretch()
        self.state_label = BodyLabel("")
        footer.addWidget(self.state_label)
        layout.addLayout(footer)

    def _connect_signals(self):
        c = self.controller
        c.entries_changed.connect(self._on_entries_changed)
        c.stats_changed.connect(self.stats_card.set_stats)
        c.load_state_changed.connect(self._on_load_state_changed)
        c.notice.connect(self.show_notice)
        c.editing_changed.connect(self._on_editing_changed)

        self.namespace_segment.currentItemChanged.connect(c.set_namespace)
        self.search_edit.textChanged.connect(self._on_search_changed)
        self.table_view.doubleClicked.connect(lambda _index: self._on_edit_clicked())

        self.edit_btn.clicked.connect(self._on_edit_clicked)
        self.save_btn.clicked.connect(self._on_save_clicked)
        self.cancel_btn.clicked.connect(c.cancel_edit)
        self.export_btn.clicked.connect(self._on_export_clicked)
        self.clear_btn.clicked.connect(c.clear_edits)
        self.close_btn.clicked.connect(self.close_requested.emit)

    # =========================================================================
    # CONTROLLER CALLBACKS
    # =========================================================================

    def _on_entries_changed(self, entries: list):
        # The model holds the whole namespace; the proxy applies the query
        self.table_model.set_entries(self.controller.entries())
        self.table_model.set_editing_key(self.controller.editing_key)
        self.match_label.setText(self.controller.match_summary())

    def _on_search_changed(self, text: str):
        self.proxy_model.set_search_text(text)
        self.controller.set_search(text)

    def _on_load_state_changed(self, namespace: str, state: str):
        if namespace != self.controller.namespace:
            return
        loading = state == LoadState.LOADING.value
        self.loading_bar.setVisible(loading)
        self.table_view.setEnabled(not loading)
        self.state_label.setText("Loading..." if loading else "")

    def _on_editing_changed(self, key: str):
        self._set_editing_ui(key or None)

    def _set_editing_ui(self, key):
        editing = key is not None
        self.table_model.set_editing_key(key)
        self.editing_label.setText(key or "")
        self.primary_edit.setEnabled(editing)
        self.secondary_edit.setEnabled(editing)
        self.save_btn.setEnabled(editing)
        self.cancel_btn.setEnabled(editing)
        self.edit_btn.setEnabled(not editing)
        self.namespace_segment.setEnabled(not editing)

        draft = self.controller.overlay.draft if editing else None
        self.primary_edit.setText(draft.primary_value if draft else "")
        self.secondary_edit.setText(draft.secondary_value if draft else "")

    # =========================================================================
    # ACTIONS
    # =========================================================================

    def selected_key(self):
        rows = self.table_view.selectionModel().selectedRows()
        if not rows:
            return None
        return self.proxy_model.get_source_key(rows[0].row())

    def _on_edit_clicked(self):
        key = self.selected_key()
        if key is None:
            self.show_notice(NoticeLevel.INFO.value, "Select a row to edit")
            return
        self.controller.begin_edit(key)

    def _on_save_clicked(self):
        self.controller.commit_edit(self.primary_edit.text(), self.secondary_edit.text())

    def _on_export_clicked(self):
        if not self.controller.has_edits():
            # Raises the empty-overlay notice
            self.controller.export_edits(self.controller.default_export_path())
            return
        path, _ = QFileDialog.getSaveFileName(
            self, "Export edits", str(self.controller.default_export_path()), "JSON (*.json)")
        if path:
            self.controller.export_edits(path)

    def cancel_or_close(self):
        """Escape: cancel an edit in progress, otherwise ask to be closed."""
        if self.controller.editing_key is not None:
            self.controller.cancel_edit()
        else:
            self.close_requested.emit()

    # =========================================================================
    # NOTICES
    # =========================================================================

    def show_notice(self, level: str, message: str):
        show = {
            NoticeLevel.SUCCESS.value: InfoBar.success,
            NoticeLevel.WARNING.value: InfoBar.warning,
            NoticeLevel.ERROR.value: InfoBar.error,
        }.get(level, InfoBar.info)
        show(
            title=level.capitalize(),
            content=message,
            parent=self,
            duration=3000,
            position=InfoBarPosition.TOP,
        )
