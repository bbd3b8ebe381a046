"""Shared fixtures: throwaway vaults on disk with pinned timestamps."""

import os
from pathlib import Path

import pytest

from src.sequencer import vault as vault_module
from src.sequencer.io_utils import is_image_name, read_capture_time
from src.sequencer.vault import LocalVault


def _creation_without_birthtime(path, stat, use_exif=True):
    # Birth times differ per platform and per checkout; tests pin mtimes instead
    if use_exif and is_image_name(path.name):
        return read_capture_time(path)
    return None


@pytest.fixture(autouse=True)
def no_birthtime(monkeypatch):
    monkeypatch.setattr(vault_module, "file_creation_time", _creation_without_birthtime)


@pytest.fixture
def make_vault(tmp_path):
    """Build a vault from ``{path: content}``.

    Files get increasing modification times in the order given, so processing
    order follows dict order unless a test overrides ``mtimes``.
    """

    def _make(files, mtimes=None, folders=()):
        root = tmp_path / "vault"
        root.mkdir(exist_ok=True)
        for folder in folders:
            (root / folder).mkdir(parents=True, exist_ok=True)
        for i, (rel, content) in enumerate(files.items()):
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
            stamp = (mtimes or {}).get(rel, 1_000_000 + i * 10)
            os.utime(path, (stamp, stamp))
        return root

    return _make


@pytest.fixture
def open_vault():
    def _open(root: Path, link_aware=True):
        return LocalVault(root, link_aware=link_aware, use_exif=True)

    return _open


@pytest.fixture
def listing():
    """All file paths under a root relative to it, sorted."""

    def _listing(root: Path):
        return sorted(
            p.relative_to(root).as_posix()
            for p in root.rglob("*")
            if p.is_file() and ".obsidian" not in p.parts
        )

    return _listing
