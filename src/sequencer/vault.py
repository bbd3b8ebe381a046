"""Local vault: a directory of markdown notes and their attachments.

The vault is the only part of the sequencer that touches the filesystem.
Paths handed in and out are vault-relative and ``/``-separated; the vault
root is ``""`` (``"/"`` is accepted as an alias). Dot-directories such as
``.obsidian`` are not part of the vault's content.
"""

from __future__ import annotations

import logging
import os
import posixpath
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from config import MARKDOWN_EXTENSION, Settings
from .errors import MoveFailure
from .io_utils import file_creation_time, split_extension
from .links import extract_link_targets, split_link_target
from .rewriter import capture_inbound, rewrite_inbound

logger = logging.getLogger(__name__)


def normalize_path(path: str) -> str:
    """Normalize a user-supplied vault path.

    Raises
    ------
    ValueError
        If the path escapes the vault root.
    """

    path = (path or "").strip().replace("\\", "/").strip("/")
    if not path:
        return ""
    norm = posixpath.normpath(path)
    if norm == ".":
        return ""
    if norm == ".." or norm.startswith("../"):
        raise ValueError(f"Path escapes the vault: {path}")
    return norm


@dataclass(frozen=True)
class VaultFolder:
    """A folder of the vault."""

    path: str

    is_file = False
    is_folder = True

    @property
    def name(self) -> str:
        return posixpath.basename(self.path)


@dataclass(frozen=True)
class VaultFile:
    """A file of the vault.

    Attributes
    ----------
    path
        Vault-relative path, the file's identity.
    ctime
        Creation timestamp in seconds, None when unknown.
    mtime
        Modification timestamp in seconds, None when unknown.
    """

    path: str
    ctime: Optional[float] = None
    mtime: Optional[float] = None

    is_file = True
    is_folder = False

    @property
    def name(self) -> str:
        return posixpath.basename(self.path)

    @property
    def basename(self) -> str:
        return split_extension(self.name)[0]

    @property
    def extension(self) -> str:
        return split_extension(self.name)[1]

    @property
    def parent(self) -> str:
        return posixpath.dirname(self.path)


VaultEntry = Union[VaultFile, VaultFolder]


class LocalVault:
    """Vault backed by a local directory.

    Parameters
    ----------
    root
        Directory holding the vault.
    link_aware
        When True, ``rename`` repoints references in every note of the vault.
    use_exif
        Fall back to EXIF capture times for image creation timestamps.
    """

    def __init__(self, root: Path, link_aware: bool = True, use_exif: bool = True) -> None:
        self.root = Path(root)
        if not self.root.is_dir():
            raise FileNotFoundError(f"Vault directory not found: {self.root}")
        self.link_aware = link_aware
        self.use_exif = use_exif

    @classmethod
    def from_settings(cls, root: Path, settings: Settings) -> "LocalVault":
        return cls(
            root,
            link_aware=settings.link_aware_rename,
            use_exif=settings.use_exif_capture_time,
        )

    def __repr__(self) -> str:
        return f"LocalVault({str(self.root)!r}, link_aware={self.link_aware})"

    # --- Lookup ---

    def _abs(self, path: str) -> Path:
        norm = normalize_path(path)
        return self.root / norm if norm else self.root

    def _make_file(self, path: str) -> VaultFile:
        abs_path = self._abs(path)
        st = abs_path.stat()
        return VaultFile(
            path=normalize_path(path),
            ctime=file_creation_time(abs_path, st, use_exif=self.use_exif),
            mtime=st.st_mtime,
        )

    def resolve(self, path: str) -> Optional[VaultEntry]:
        """Return the file or folder at ``path``, or None if absent."""

        try:
            norm = normalize_path(path)
        except ValueError:
            return None
        abs_path = self._abs(norm)
        if abs_path.is_dir():
            return VaultFolder(norm)
        if abs_path.is_file():
            return self._make_file(norm)
        return None

    def get_folder(self, path: str) -> VaultFolder:
        entry = self.resolve(path)
        if entry is None:
            raise FileNotFoundError(f"No such folder: {path}")
        if not entry.is_folder:
            raise NotADirectoryError(f"Not a folder: {path}")
        return entry

    def get_note(self, path: str) -> VaultFile:
        """Return the markdown note at ``path``; ``.md`` is appended if missing."""

        norm = normalize_path(path)
        if not split_extension(posixpath.basename(norm))[1]:
            norm += MARKDOWN_EXTENSION
        entry = self.resolve(norm)
        if entry is None or not entry.is_file:
            raise FileNotFoundError(f"No such note: {norm}")
        if entry.extension.lower() != MARKDOWN_EXTENSION:
            raise FileNotFoundError(f"Not a markdown note: {norm}")
        return entry

    def children(self, folder: VaultFolder) -> List[VaultEntry]:
        """Direct children of a folder, sorted by name."""

        out: List[VaultEntry] = []
        with os.scandir(self._abs(folder.path)) as it:
            entries = sorted(it, key=lambda e: e.name)
        for entry in entries:
            if entry.name.startswith("."):
                continue
            rel = posixpath.join(folder.path, entry.name) if folder.path else entry.name
            if entry.is_dir():
                out.append(VaultFolder(rel))
            elif entry.is_file():
                out.append(self._make_file(rel))
        return out

    def file_names(self, folder: VaultFolder) -> List[str]:
        """Names of the files directly inside a folder."""

        with os.scandir(self._abs(folder.path)) as it:
            return sorted(e.name for e in it if e.is_file() and not e.name.startswith("."))

    def _file_paths(self) -> List[str]:
        paths: List[str] = []
        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
            rel_dir = Path(dirpath).relative_to(self.root).as_posix()
            for name in sorted(filenames):
                if name.startswith("."):
                    continue
                paths.append(name if rel_dir == "." else f"{rel_dir}/{name}")
        return paths

    def markdown_files(self) -> List[VaultFile]:
        return [
            self._make_file(p)
            for p in self._file_paths()
            if p.lower().endswith(MARKDOWN_EXTENSION)
        ]

    # --- Content ---

    def read(self, file: VaultFile) -> str:
        return self._abs(file.path).read_text(encoding="utf-8")

    def write(self, file: VaultFile, text: str) -> None:
        self._abs(file.path).write_text(text, encoding="utf-8")

    def create_folder(self, path: str) -> VaultFolder:
        norm = normalize_path(path)
        self._abs(norm).mkdir(parents=True, exist_ok=True)
        logger.info("Created folder %s", norm or "/")
        return VaultFolder(norm)

    # --- Links ---

    def note_references(self, note: VaultFile) -> List[str]:
        """Raw embed and link targets of a note, in document order."""

        return extract_link_targets(self.read(note))

    def _link_path(self, target: str, source_path: str, paths: List[str]) -> Optional[str]:
        file_part = split_link_target(target)
        if not file_part:
            return None
        options = [file_part]
        if not split_extension(posixpath.basename(file_part))[1]:
            options.append(file_part + MARKDOWN_EXTENSION)

        source_dir = posixpath.dirname(source_path)
        for option in options:
            for base in (source_dir, ""):
                try:
                    norm = normalize_path(posixpath.join(base, option) if base else option)
                except ValueError:
                    continue
                if norm and self._abs(norm).is_file():
                    return norm

        for option in options:
            suffix = "/" + option.lstrip("/")
            matches = [p for p in paths if ("/" + p).endswith(suffix)]
            if matches:
                return min(matches, key=lambda p: (p.count("/"), p))
        return None

    def resolve_link(self, target: str, source_path: str) -> Optional[VaultFile]:
        """Resolve a link target the way the note app does.

        Tried in order: relative to the linking note's folder, relative to the
        vault root, then any file whose path ends with the target (shortest
        path wins). Targets without an extension may also name a note.
        """

        path = self._link_path(target, source_path, self._file_paths())
        return self._make_file(path) if path is not None else None

    def inbound_references(
        self, file: VaultFile, notes: Optional[Iterable[VaultFile]] = None
    ) -> Dict[str, List[str]]:
        """Map note path to the raw targets in that note resolving to ``file``."""

        if notes is None:
            notes = self.markdown_files()
        paths = self._file_paths()
        found: Dict[str, List[str]] = {}
        for note in notes:
            hits = [
                target
                for target in dict.fromkeys(self.note_references(note))
                if self._link_path(target, note.path, paths) == file.path
            ]
            if hits:
                found[note.path] = hits
        return found

    def count_named(self, name: str) -> int:
        return sum(1 for p in self._file_paths() if posixpath.basename(p) == name)

    # --- Mutation ---

    def rename(self, file: VaultFile, new_path: str) -> VaultFile:
        """Move ``file`` to ``new_path``.

        Never overwrites an existing file. When the vault is link-aware every
        reference to the file is repointed at its new location.

        Raises
        ------
        MoveFailure
            If the destination exists, lies outside the vault, its folder is
            missing, or the OS refuses the move.
        """

        try:
            dest = normalize_path(new_path)
        except ValueError as exc:
            raise MoveFailure(file.path, new_path, str(exc)) from exc
        if dest == file.path:
            return file
        src_abs, dest_abs = self._abs(file.path), self._abs(dest)
        if dest_abs.exists():
            raise MoveFailure(file.path, dest, "destination already exists")
        if not dest_abs.parent.is_dir():
            raise MoveFailure(file.path, dest, "destination folder does not exist")

        captured = capture_inbound(self, file, None) if self.link_aware else {}
        try:
            src_abs.rename(dest_abs)
        except OSError as exc:
            raise MoveFailure(file.path, dest, str(exc)) from exc
        moved = VaultFile(dest, ctime=file.ctime, mtime=file.mtime)
        logger.debug("Moved %s -> %s", file.path, dest)
        if captured:
            rewrite_inbound(self, captured, moved)
        return moved
