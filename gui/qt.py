# -*- coding: utf-8 -*-
"""
Central Qt Import Module for LocForge

Single source for the Qt names used by the editing surface. The project uses
PySide6 exclusively.

Usage:
    from gui.qt import Qt, Signal, Slot, QWidget, ...
"""

# =============================================================================
# PySide6 Core
# =============================================================================
from PySide6.QtCore import (
    Qt,
    Signal,
    Slot,
    QObject,
    QRunnable,
    QThreadPool,
    QModelIndex,
    QSortFilterProxyModel,
    QAbstractTableModel,
)

# =============================================================================
# PySide6 GUI
# =============================================================================
from PySide6.QtGui import (
    QKeySequence,
    QShortcut,
    QColor,
    QBrush,
    QFont,
)

# =============================================================================
# PySide6 Widgets
# =============================================================================
from PySide6.QtWidgets import (
    QApplication,
    QMainWindow,
    QWidget,
    QFileDialog,
    QVBoxLayout,
    QHBoxLayout,
    QHeaderView,
    QAbstractItemView,
)


__all__ = [
    'Qt', 'Signal', 'Slot', 'QObject', 'QRunnable', 'QThreadPool', 'QModelIndex',
    'QSortFilterProxyModel', 'QAbstractTableModel',
    'QKeySequence', 'QShortcut', 'QColor', 'QBrush', 'QFont',
    'QApplication', 'QMainWindow', 'QWidget', 'QFileDialog',
    'QVBoxLayout', 'QHBoxLayout', 'QHeaderView', 'QAbstractItemView',
]
