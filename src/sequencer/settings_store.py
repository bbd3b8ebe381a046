"""Persistence of user settings as JSON.

Stored values are merged over the defaults from ``config.Settings``. Keys
written by the note app's plugin (``imagePrefix``, ``targetNote`` ...) are
accepted as well.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path
from typing import Any, Dict

from config import CONFIG, SETTINGS_RELPATH, Settings
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

# Keys as stored by the plugin
PLUGIN_KEYS = {
    "isEnabled": "is_enabled",
    "imagePrefix": "image_prefix",
    "targetDirectory": "target_directory",
    "referenceDirectory": "reference_directory",
    "targetNote": "targeted_note_path",
    "targetedNotePath": "targeted_note_path",
    "scoopVaultRoot": "scoop_vault_root",
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def settings_path(vault_root: Path) -> Path:
    """Default settings file of a vault."""

    return Path(vault_root) / SETTINGS_RELPATH


def _field_types() -> Dict[str, type]:
    defaults = Settings()
    return {f.name: type(getattr(defaults, f.name)) for f in dataclasses.fields(Settings)}


def merge_settings(data: Dict[str, Any], base: Settings | None = None) -> Settings:
    """Overlay stored values on ``base`` (``CONFIG.settings`` if None).

    Unknown keys are ignored with a warning.

    Raises
    ------
    ConfigurationError
        If a value has the wrong type.
    """

    types = _field_types()
    values: Dict[str, Any] = {}
    for key, value in data.items():
        name = PLUGIN_KEYS.get(key, key)
        if name not in types:
            logger.warning("Ignoring unknown setting %r", key)
            continue
        expected = types[name]
        if not isinstance(value, expected) or (expected is not bool and isinstance(value, bool)):
            raise ConfigurationError(
                f"Setting {key!r} must be {expected.__name__}, got {type(value).__name__}"
            )
        values[name] = value
    return dataclasses.replace(base or CONFIG.settings, **values)


def load_settings(path: Path) -> Settings:
    """Load settings from ``path``; a missing file yields the defaults."""

    path = Path(path)
    if not path.exists():
        logger.debug("No settings at %s, using defaults", path)
        return dataclasses.replace(CONFIG.settings)
    try:
        data = json.loads(path.read_text(encoding="utf-8") or "{}")
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Settings file {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file {path} must hold a JSON object")
    return merge_settings(data)


def save_settings(settings: Settings, path: Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(dataclasses.asdict(settings), indent=2) + "\n", encoding="utf-8")
    logger.info("Saved settings to %s", path)


def parse_value(name: str, raw: str) -> Any:
    """Convert a string from the command line into the type of setting ``name``."""

    types = _field_types()
    name = PLUGIN_KEYS.get(name, name)
    if name not in types:
        choices = ", ".join(sorted(types))
        raise ConfigurationError(f"Unknown setting {name!r}. Choose from: {choices}")
    if types[name] is bool:
        lowered = raw.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise ConfigurationError(f"Setting {name!r} expects true or false, got {raw!r}")
    return raw


def update_setting(settings: Settings, name: str, raw: str) -> Settings:
    """Return a copy of ``settings`` with one value replaced from its string form."""

    value = parse_value(name, raw)
    return dataclasses.replace(settings, **{PLUGIN_KEYS.get(name, name): value})
