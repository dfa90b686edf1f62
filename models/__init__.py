# -*- coding: utf-8 -*-
"""
LocForge Models Package

Data models shared by the engine, controllers and views.
"""

from models.bilingual_entry import BilingualEntry, EditDraft, TranslationStats
from models.settings_model import SettingsModel

__all__ = ['BilingualEntry', 'EditDraft', 'TranslationStats', 'SettingsModel']
