"""Global configuration for the vault image sequencer.

This module centralizes defaults and user-tunable settings for:
- recognizing image attachments inside a notes vault
- naming renamed attachments and choosing where they are moved
- how references to moved attachments are kept up to date

Persisted settings are merged over these defaults by
``src.sequencer.settings_store``; CLI flags may override them per run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


# Recognized image extensions, compared case-insensitively
IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".bmp", ".svg", ".webp"}

# Extension used when an attachment has none
DEFAULT_EXTENSION = ".png"

MARKDOWN_EXTENSION = ".md"

REWRITE_SCOPES = ("note", "vault")

# Settings file location, relative to the vault root
SETTINGS_RELPATH = Path(".obsidian/plugins/image-sequencer/data.json")


@dataclass
class Settings:
    """User configuration for a sequencing run.

    Attributes
    ----------
    is_enabled
        Master switch. A disabled run does nothing.
    image_prefix
        String prepended to every generated filename. Must be non-empty.
    target_directory
        Vault-relative folder receiving renamed files. ``"/"`` is the vault root.
    reference_directory
        Folder whose existing names seed the starting index. Empty means the
        target directory.
    targeted_note_path
        Markdown note whose references restrict the candidates. ``.md`` is
        appended when missing.
    scoop_vault_root
        When no note is targeted, also take images lying at the vault root.
    create_target_directory
        Create a missing target folder instead of failing.
    link_aware_rename
        Whether the vault repoints references itself when a file is moved.
    rewrite_scope
        Which notes get textual reference rewriting when the vault is not
        link-aware. One of ``"note"`` or ``"vault"``.
    use_exif_capture_time
        Fall back to the EXIF capture time when the platform reports no
        file birth time.
    """

    is_enabled: bool = True
    image_prefix: str = "prefix"
    target_directory: str = ""
    reference_directory: str = ""
    targeted_note_path: str = ""
    scoop_vault_root: bool = False
    create_target_directory: bool = False
    link_aware_rename: bool = True
    rewrite_scope: str = "vault"
    use_exif_capture_time: bool = True

    @property
    def effective_reference_directory(self) -> str:
        return self.reference_directory or self.target_directory


@dataclass
class Logging:
    """Logging defaults.

    Attributes
    ----------
    console_format
        Format of console records.
    file_format
        Format of records written to the optional log file.
    max_bytes, backup_count
        Rotation limits for the log file.
    """

    console_format: str = "[%(levelname)s] %(message)s"
    file_format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    max_bytes: int = 1_000_000
    backup_count: int = 3


@dataclass
class ProjectConfig:
    """Top-level configuration container."""

    settings: Settings = field(default_factory=Settings)
    logging: Logging = field(default_factory=Logging)


# Default singleton-style config instance used by CLI unless overridden
CONFIG = ProjectConfig()
