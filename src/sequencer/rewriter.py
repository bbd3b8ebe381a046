"""Textual reference rewriting for moved attachments.

Used by link-aware vaults for every note, and by the executor when the vault
only moves bytes. References are captured before a move, because after it
the old targets no longer resolve.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from .links import retarget_links, split_link_target

logger = logging.getLogger(__name__)


def capture_inbound(vault, file, notes: Optional[Iterable] = None) -> Dict[str, List[str]]:
    """Record which notes reference ``file`` and through which raw targets.

    Parameters
    ----------
    vault
        The vault holding ``file`` and the notes.
    file
        The attachment about to move.
    notes
        Notes to scan; None scans every note of the vault.
    """

    return vault.inbound_references(file, notes)


def new_target_for(vault, old_target: str, new_file) -> str:
    """Target text pointing at ``new_file`` in the style of ``old_target``.

    A bare name stays a bare name while it is unambiguous in the vault;
    anything with a folder part becomes the full vault path.
    """

    if "/" not in split_link_target(old_target) and vault.count_named(new_file.name) == 1:
        return new_file.name
    return new_file.path


def rewrite_inbound(vault, captured: Dict[str, List[str]], new_file) -> int:
    """Apply captured references to the moved file.

    Returns
    -------
    int
        Number of notes whose content changed.
    """

    from .vault import VaultFile

    changed = 0
    for note_path, targets in captured.items():
        note = VaultFile(note_path)
        text = vault.read(note)
        updated = text
        for target in targets:
            updated = retarget_links(updated, target, new_target_for(vault, target, new_file))
        if updated != text:
            vault.write(note, updated)
            changed += 1
            logger.debug("Rewrote references in %s", note_path)
    return changed
