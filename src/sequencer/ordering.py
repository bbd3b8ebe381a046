"""Deterministic processing order for rename candidates."""

from __future__ import annotations

import re
from typing import Iterable, List, Sequence, Tuple, Union

_DIGITS_RE = re.compile(r"(\d+)")


def natural_key(name: str) -> List[Tuple[int, Union[int, str]]]:
    """Sort key comparing digit runs numerically and text case-insensitively.

    ``img2`` sorts before ``img10``. Each part is tagged so that numbers and
    text never get compared with each other.
    """

    key: List[Tuple[int, Union[int, str]]] = []
    for part in _DIGITS_RE.split(name):
        if not part:
            continue
        if part.isdigit():
            key.append((0, int(part)))
        else:
            key.append((1, part.casefold()))
    return key


def order_key(file) -> tuple:
    return (file.ctime or 0, file.mtime or 0, natural_key(file.name))


def order_candidates(files: Iterable) -> Sequence:
    """Sort by creation time, then modification time, then natural name order.

    Missing timestamps count as 0. The sort is stable.
    """

    return sorted(files, key=order_key)
