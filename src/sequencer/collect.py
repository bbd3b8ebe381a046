"""Candidate discovery: which image files a run should rename.

Three scopes, selected from the settings:

- note: every file embedded in or linked from a targeted markdown note
- folder: the direct image children of the target folder
- folder + vault root: as above, plus the images lying at the vault root
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List

from config import Settings
from .io_utils import is_image_name

logger = logging.getLogger(__name__)


class CandidateSet:
    """Insertion-ordered set of files keyed by path.

    Files whose name already starts with the prefix are refused, as are
    paths added before.
    """

    def __init__(self, prefix: str) -> None:
        self.prefix = prefix
        self._files: Dict[str, object] = {}

    def add(self, file) -> bool:
        if not is_image_name(file.name):
            return False
        if file.basename.startswith(self.prefix):
            logger.debug("Skipping %s: already prefixed", file.path)
            return False
        if file.path in self._files:
            return False
        self._files[file.path] = file
        return True

    def extend(self, files: Iterable) -> None:
        for file in files:
            self.add(file)

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self):
        return iter(self._files.values())

    def __contains__(self, path: str) -> bool:
        return path in self._files


def collect_from_note(vault, note, candidates: CandidateSet) -> None:
    """Add the image files referenced by a note. Dangling links are skipped."""

    for target in vault.note_references(note):
        file = vault.resolve_link(target, note.path)
        if file is None:
            logger.debug("Unresolved link %r in %s", target, note.path)
            continue
        candidates.add(file)


def collect_from_folder(vault, folder, candidates: CandidateSet) -> None:
    """Add the direct image children of a folder."""

    candidates.extend(entry for entry in vault.children(folder) if entry.is_file)


def collect_from_vault_root(vault, candidates: CandidateSet) -> None:
    """Add the image files lying at the vault root."""

    root = vault.get_folder("")
    candidates.extend(entry for entry in vault.children(root) if entry.is_file)


def collect(vault, settings: Settings, target_folder, note=None) -> List:
    """Build the candidate list for a run.

    Parameters
    ----------
    vault
        The vault to scan.
    settings
        Run configuration; supplies the prefix and the root fallback flag.
    target_folder
        Resolved target folder, scanned when no note is targeted.
    note
        Resolved targeted note, or None.
    """

    candidates = CandidateSet(settings.image_prefix)
    if note is not None:
        collect_from_note(vault, note, candidates)
    else:
        if target_folder is not None:
            collect_from_folder(vault, target_folder, candidates)
        if settings.scoop_vault_root:
            collect_from_vault_root(vault, candidates)
    logger.info("Found %d candidate image(s)", len(candidates))
    return list(candidates)
