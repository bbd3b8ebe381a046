"""Next free sequence index for a filename prefix."""

from __future__ import annotations

import re
from typing import Iterable


def index_pattern(prefix: str) -> re.Pattern:
    """Pattern for a whole ``<prefix><digits>.<ext>`` name; the digits may be empty."""

    return re.compile(rf"{re.escape(prefix)}(\d*)\.[^.\n]+")


def compute_next_index(reference_names: Iterable[str], prefix: str) -> int:
    """Return one past the highest index already used with ``prefix``.

    ``T.png`` counts as index 0, ``T7.jpg`` as 7. Names that do not match
    are ignored; with no match the result is 0.

    Parameters
    ----------
    reference_names
        Existing file names (not paths).
    prefix
        Case-sensitive, taken literally.

    Raises
    ------
    ValueError
        If ``prefix`` is empty.
    """

    if not prefix:
        raise ValueError("Prefix must not be empty")

    pattern = index_pattern(prefix)
    highest = -1
    for name in reference_names:
        m = pattern.fullmatch(name)
        if m:
            highest = max(highest, int(m.group(1)) if m.group(1) else 0)
    return highest + 1


def next_index_for_folder(vault, folder, prefix: str) -> int:
    """``compute_next_index`` over the names of a folder's direct files."""

    return compute_next_index(vault.file_names(folder), prefix)
