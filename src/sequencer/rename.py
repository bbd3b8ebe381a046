"""Sequential renaming of image attachments.

Renames candidates to ``<prefix><N><ext>`` in a deterministic order, moving
them into the target folder and keeping the notes that reference them
pointing at the right file. Indices continue after the highest index already
present in the reference folder.
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set, Tuple

from config import DEFAULT_EXTENSION, REWRITE_SCOPES, Settings
from .collect import collect
from .errors import ConfigurationError, MoveFailure, SequencerError
from .index import compute_next_index
from .notify import Notifier, ConsoleNotifier
from .ordering import order_candidates
from .rewriter import capture_inbound, rewrite_inbound

logger = logging.getLogger(__name__)


@dataclass
class Assignment:
    """A planned rename."""

    file: object
    new_name: str
    new_path: str


@dataclass
class Plan:
    """Planned renames and the index following the last one."""

    assignments: List[Assignment]
    next_index: int


@dataclass
class RunResult:
    """Outcome of a run.

    Attributes
    ----------
    renamed
        ``(old_path, new_path)`` pairs in processing order. For a dry run,
        the renames that would happen.
    candidates
        Number of files eligible for renaming.
    next_index
        Index a subsequent run would start from; None when the run was
        disabled.
    dry_run
        Whether nothing was actually moved.
    """

    renamed: List[Tuple[str, str]] = field(default_factory=list)
    candidates: int = 0
    next_index: Optional[int] = None
    dry_run: bool = False


def assign_names(
    ordered: Iterable,
    prefix: str,
    counter: int,
    used_names: Iterable[str],
    target_folder_path: str = "",
) -> Plan:
    """Give each file a distinct ``<prefix><N><ext>`` name.

    Parameters
    ----------
    ordered
        Files in processing order.
    prefix
        Name prefix.
    counter
        First index to try.
    used_names
        Names that must not be produced. Not modified.
    target_folder_path
        Folder the new paths are built in.
    """

    used: Set[str] = set(used_names)
    assignments: List[Assignment] = []
    for file in ordered:
        ext = file.extension or DEFAULT_EXTENSION
        name = f"{prefix}{counter}{ext}"
        while name in used:
            counter += 1
            name = f"{prefix}{counter}{ext}"
        used.add(name)
        path = posixpath.join(target_folder_path, name) if target_folder_path else name
        assignments.append(Assignment(file, name, path))
        counter += 1
    return Plan(assignments, counter)


def execute(
    vault,
    ordered: Iterable,
    prefix: str,
    counter: int,
    used_names: Iterable[str],
    target_folder_path: str,
    rewrite_notes: Optional[List] = None,
) -> Plan:
    """Rename and move files one by one.

    Parameters
    ----------
    vault
        Vault performing the moves.
    ordered, prefix, counter, used_names, target_folder_path
        See ``assign_names``.
    rewrite_notes
        Notes whose references are rewritten textually after each move. None
        leaves references to the vault.

    Raises
    ------
    MoveFailure
        On the first failed move. ``completed`` on the exception lists the
        moves done before it; they are not undone.
    """

    plan = assign_names(ordered, prefix, counter, used_names, target_folder_path)
    completed: List[Tuple[str, str]] = []
    for item in plan.assignments:
        captured = (
            capture_inbound(vault, item.file, rewrite_notes) if rewrite_notes else {}
        )
        try:
            moved = vault.rename(item.file, item.new_path)
        except MoveFailure as exc:
            exc.completed = completed
            raise
        if captured:
            rewrite_inbound(vault, captured, moved)
        item.new_path = moved.path
        completed.append((item.file.path, moved.path))
        logger.info("Renamed %s -> %s", item.file.path, moved.path)
    return plan


def _folder(vault, path: str, label: str):
    try:
        return vault.get_folder(path)
    except (FileNotFoundError, NotADirectoryError, ValueError) as exc:
        raise ConfigurationError(f"{label} is not usable: {exc}") from exc


def _target_folder(vault, settings: Settings, dry_run: bool):
    try:
        return vault.get_folder(settings.target_directory)
    except FileNotFoundError:
        if settings.create_target_directory and not dry_run:
            try:
                return vault.create_folder(settings.target_directory)
            except (OSError, ValueError) as exc:
                raise ConfigurationError(f"Cannot create target directory: {exc}") from exc
        if settings.create_target_directory:
            return None
        raise ConfigurationError(
            f"Target directory does not exist: {settings.target_directory}"
        )
    except (NotADirectoryError, ValueError) as exc:
        raise ConfigurationError(f"Target directory is not usable: {exc}") from exc


def check_settings(settings: Settings) -> None:
    """Reject settings that cannot drive a run."""

    prefix = settings.image_prefix
    if not prefix:
        raise ConfigurationError("Image prefix is not set")
    if "/" in prefix or "\\" in prefix or prefix in (".", ".."):
        raise ConfigurationError(f"Image prefix must be a plain file name: {prefix!r}")
    if not settings.target_directory.strip():
        raise ConfigurationError("Target directory is not set")
    if settings.rewrite_scope not in REWRITE_SCOPES:
        raise ConfigurationError(
            f"Unknown rewrite scope {settings.rewrite_scope!r}; "
            f"choose from {', '.join(REWRITE_SCOPES)}"
        )


def _rewrite_notes(vault, settings: Settings, note) -> Optional[List]:
    if vault.link_aware:
        return None
    if settings.rewrite_scope == "note":
        if note is None:
            logger.warning("Rewrite scope is 'note' but no note is targeted")
            return []
        return [note]
    return vault.markdown_files()


def run_sequencer(
    vault,
    settings: Settings,
    notifier: Optional[Notifier] = None,
    dry_run: bool = False,
) -> RunResult:
    """Run a full rename pass over the vault.

    All settings are validated before anything is collected or moved.
    Outcomes are reported through ``notifier``; failures are reported and
    then raised.

    Parameters
    ----------
    vault
        Vault to operate on.
    settings
        Configuration of this run.
    notifier
        Receives user-facing messages. Defaults to the console.
    dry_run
        If True, only report the renames that would happen.

    Raises
    ------
    ConfigurationError
        Before any mutation, if a setting is missing or unresolvable.
    MoveFailure
        If a move fails; earlier moves of the batch stay in place.
    """

    notifier = notifier or ConsoleNotifier()
    if not settings.is_enabled:
        notifier.info("Image sequencer is disabled.")
        return RunResult(dry_run=dry_run)

    try:
        check_settings(settings)
        note = None
        if settings.targeted_note_path:
            try:
                note = vault.get_note(settings.targeted_note_path)
            except (FileNotFoundError, ValueError) as exc:
                raise ConfigurationError(f"Targeted note is not usable: {exc}") from exc

        if settings.reference_directory:
            reference = _folder(vault, settings.reference_directory, "Reference directory")
        else:
            reference = None
        target = _target_folder(vault, settings, dry_run)
        # None only for a dry run whose target folder would be created
        target_path = target.path if target is not None else settings.target_directory.strip("/")
        reference = reference or target
        reference_names: List[str] = vault.file_names(reference) if reference else []

        counter = compute_next_index(reference_names, settings.image_prefix)
        candidates = order_candidates(collect(vault, settings, target, note))
        if not candidates:
            notifier.info(f"No images to rename. Next index: {counter}")
            return RunResult(next_index=counter, dry_run=dry_run)

        if dry_run:
            plan = assign_names(
                candidates, settings.image_prefix, counter, reference_names, target_path
            )
            renamed = [(a.file.path, a.new_path) for a in plan.assignments]
            for old, new in renamed:
                notifier.info(f"Would rename {old} -> {new}")
            notifier.info(
                f"Dry run: {len(renamed)} image(s) would be renamed. "
                f"Next index: {plan.next_index}"
            )
            return RunResult(renamed, len(candidates), plan.next_index, dry_run=True)

        plan = execute(
            vault,
            candidates,
            settings.image_prefix,
            counter,
            reference_names,
            target_path,
            rewrite_notes=_rewrite_notes(vault, settings, note),
        )
    except MoveFailure as exc:
        notifier.error(f"{exc}. Renamed {len(exc.completed)} image(s) before the failure.")
        raise
    except SequencerError as exc:
        notifier.error(str(exc))
        raise

    renamed = [(a.file.path, a.new_path) for a in plan.assignments]
    notifier.info(f"Renamed {len(renamed)} image(s). Next index: {plan.next_index}")
    return RunResult(renamed, len(candidates), plan.next_index)
