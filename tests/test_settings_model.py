# -*- coding: utf-8 -*-
"""
Tests for SettingsModel
"""

import json

import pytest

import locforge_config as config
from models.settings_model import SettingsModel


class TestSettingsModel:
    """Tests for SettingsModel."""

    def test_singleton(self, settings_model):
        assert SettingsModel.instance() is settings_model
        assert SettingsModel() is settings_model

    def test_defaults(self, settings_model):
        assert settings_model.ui_language is None
        assert settings_model.locales_source == config.LOCALES_SOURCE_DIRECTORY
        assert settings_model.active_namespace == "common"
        assert settings_model.editor_visible is False
        assert settings_model.keyboard_shortcuts == {}
        assert settings_model.keyboard_shortcuts_enabled is True

    def test_observer_notification(self, settings_model):
        received = []
        settings_model.subscribe(SettingsModel.KEY_ACTIVE_NAMESPACE, received.append)

        settings_model.active_namespace = "board"
        settings_model.active_namespace = "board"

        assert received == ["board"]
        assert settings_model.is_dirty

    def test_invalid_values_rejected(self, settings_model):
        with pytest.raises(ValueError):
            settings_model.ui_language = "fr"
        with pytest.raises(ValueError):
            settings_model.locales_source = "ftp"

    def test_save_and_reload(self, settings_model):
        settings_model.ui_language = "en"
        settings_model.window_size = (800, 600)
        assert settings_model.save()
        assert not settings_model.is_dirty

        SettingsModel.reset_instance()
        reloaded = SettingsModel.instance()
        assert reloaded.ui_language == "en"
        assert reloaded.window_size == (800, 600)

    def test_invalid_file_values_fall_back_to_defaults(self):
        config.SETTINGS_FILE_PATH.write_text(json.dumps({
            "ui_language": "klingon",
            "locales_source": 5,
            "editor_visible": "yes",
            "keyboard_shortcuts": [],
        }), encoding='utf-8')

        settings = SettingsModel.instance()

        assert settings.ui_language is None
        assert settings.locales_source == config.DEFAULT_LOCALES_SOURCE
        assert settings.editor_visible is False
        assert settings.keyboard_shortcuts == {}

    def test_corrupt_file_uses_defaults(self):
        config.SETTINGS_FILE_PATH.write_text("{oops", encoding='utf-8')
        assert SettingsModel.instance().active_namespace == "common"
