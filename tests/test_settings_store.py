import json

import pytest

from config import Settings
from src.sequencer.errors import ConfigurationError
from src.sequencer.settings_store import (
    load_settings,
    merge_settings,
    save_settings,
    settings_path,
    update_setting,
)


def test_missing_file_gives_defaults(tmp_path):
    assert load_settings(tmp_path / "nope.json") == Settings()


def test_round_trip(tmp_path):
    path = settings_path(tmp_path)
    settings = Settings(image_prefix="IMG", target_directory="att", scoop_vault_root=True)
    save_settings(settings, path)
    assert path == tmp_path / ".obsidian/plugins/image-sequencer/data.json"
    assert load_settings(path) == settings


def test_plugin_keys_are_merged_over_defaults(tmp_path):
    path = tmp_path / "data.json"
    path.write_text(
        json.dumps({"isEnabled": False, "imagePrefix": "X", "targetNote": "Trip", "extra": 1})
    )
    settings = load_settings(path)
    assert settings.is_enabled is False
    assert settings.image_prefix == "X"
    assert settings.targeted_note_path == "Trip"
    assert settings.rewrite_scope == "vault"


def test_wrong_types_rejected():
    with pytest.raises(ConfigurationError):
        merge_settings({"scoop_vault_root": "yes"})
    with pytest.raises(ConfigurationError):
        merge_settings({"image_prefix": True})


def test_invalid_json(tmp_path):
    path = tmp_path / "data.json"
    path.write_text("{oops")
    with pytest.raises(ConfigurationError):
        load_settings(path)
    path.write_text("[1, 2]")
    with pytest.raises(ConfigurationError):
        load_settings(path)


def test_update_setting_parses_booleans():
    settings = update_setting(Settings(), "scoop_vault_root", "yes")
    assert settings.scoop_vault_root is True
    assert update_setting(settings, "scoopVaultRoot", "off").scoop_vault_root is False
    assert update_setting(settings, "image_prefix", "Q").image_prefix == "Q"
    with pytest.raises(ConfigurationError):
        update_setting(settings, "scoop_vault_root", "maybe")
    with pytest.raises(ConfigurationError):
        update_setting(settings, "colour", "red")
