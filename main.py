"""CLI for sequential renaming of image attachments in a notes vault.

Commands:
  - run: Rename using the saved settings
  - run-once: Rename with per-run overrides of the saved settings
  - dialog: Tkinter dialog for a one-off run
  - settings show / settings set: Inspect and edit saved settings
  - next-index: Report the index the next renamed image would get
"""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import click
from config import REWRITE_SCOPES, Settings
from src.sequencer.errors import ConfigurationError, SequencerError
from src.sequencer.index import next_index_for_folder
from src.sequencer.logging_utils import configure_logging
from src.sequencer.notify import ConsoleNotifier
from src.sequencer.rename import run_sequencer
from src.sequencer.settings_store import (
    load_settings,
    save_settings,
    settings_path,
    update_setting,
)
from src.sequencer.vault import LocalVault


@dataclass
class CliState:
    """Options shared by all commands."""

    vault_root: Path
    settings_file: Path

    def load(self) -> Settings:
        try:
            return load_settings(self.settings_file)
        except ConfigurationError as exc:
            raise click.ClickException(str(exc)) from exc


def _run(ctx: click.Context, settings: Settings, dry_run: bool) -> None:
    state: CliState = ctx.obj
    vault = LocalVault.from_settings(state.vault_root, settings)
    try:
        run_sequencer(vault, settings, ConsoleNotifier(), dry_run=dry_run)
    except SequencerError:
        # The notifier already reported it
        ctx.exit(1)


@click.group()
@click.option(
    "--vault",
    "vault_root",
    type=click.Path(path_type=Path, exists=True, file_okay=False),
    envvar="IMAGE_SEQUENCER_VAULT",
    default=".",
    show_default=True,
    help="Vault directory",
)
@click.option(
    "--settings",
    "settings_file",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Settings JSON file (defaults to the plugin data file inside the vault)",
)
@click.option("-v", "--verbose", count=True, help="Repeat for more log output")
@click.option(
    "--log-file",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Also write a debug log to this file",
)
@click.pass_context
def cli(
    ctx: click.Context,
    vault_root: Path,
    settings_file: Optional[Path],
    verbose: int,
    log_file: Optional[Path],
) -> None:
    """Rename image attachments of a notes vault to sequential names."""

    configure_logging(verbose, log_file)
    ctx.obj = CliState(vault_root, settings_file or settings_path(vault_root))


@cli.command(name="run")
@click.option("--dry-run", is_flag=True, help="Only list the renames")
@click.pass_context
def cmd_run(ctx: click.Context, dry_run: bool) -> None:
    """Rename images using the saved settings."""

    _run(ctx, ctx.obj.load(), dry_run)


@cli.command(name="run-once")
@click.option("--prefix", type=str, default=None, help="Filename prefix")
@click.option("--target", type=str, default=None, help="Target folder in the vault")
@click.option("--reference", type=str, default=None, help="Folder seeding the index")
@click.option("--note", type=str, default=None, help="Only rename images of this note")
@click.option("--scoop-root/--no-scoop-root", default=None, help="Include vault-root images")
@click.option(
    "--create-target/--no-create-target",
    default=None,
    help="Create a missing target folder",
)
@click.option(
    "--link-aware/--no-link-aware",
    default=None,
    help="Repoint links in every note when moving",
)
@click.option(
    "--rewrite-scope",
    type=click.Choice(REWRITE_SCOPES),
    default=None,
    help="Notes to rewrite when not link-aware",
)
@click.option("--dry-run", is_flag=True, help="Only list the renames")
@click.pass_context
def cmd_run_once(
    ctx: click.Context,
    prefix: Optional[str],
    target: Optional[str],
    reference: Optional[str],
    note: Optional[str],
    scoop_root: Optional[bool],
    create_target: Optional[bool],
    link_aware: Optional[bool],
    rewrite_scope: Optional[str],
    dry_run: bool,
) -> None:
    """Rename images with overrides that are not saved."""

    overrides = {
        "image_prefix": prefix,
        "target_directory": target,
        "reference_directory": reference,
        "targeted_note_path": note,
        "scoop_vault_root": scoop_root,
        "create_target_directory": create_target,
        "link_aware_rename": link_aware,
        "rewrite_scope": rewrite_scope,
    }
    settings = dataclasses.replace(
        ctx.obj.load(), **{k: v for k, v in overrides.items() if v is not None}
    )
    _run(ctx, settings, dry_run)


@cli.command(name="dialog")
@click.pass_context
def cmd_dialog(ctx: click.Context) -> None:
    """Open a dialog for a one-off run."""

    from src.sequencer.dialog import run_dialog

    run_dialog(ctx.obj.vault_root, ctx.obj.load())


@cli.command(name="next-index")
@click.option("--prefix", type=str, default=None, help="Filename prefix")
@click.option("--reference", type=str, default=None, help="Folder to inspect")
@click.pass_context
def cmd_next_index(
    ctx: click.Context, prefix: Optional[str], reference: Optional[str]
) -> None:
    """Print the index the next renamed image would get."""

    settings = ctx.obj.load()
    prefix = prefix if prefix is not None else settings.image_prefix
    reference = reference if reference is not None else settings.effective_reference_directory
    if not prefix:
        raise click.BadParameter("Prefix must not be empty", param_hint="--prefix")
    vault = LocalVault.from_settings(ctx.obj.vault_root, settings)
    try:
        folder = vault.get_folder(reference)
    except (FileNotFoundError, NotADirectoryError) as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(next_index_for_folder(vault, folder, prefix))


@cli.group(name="settings")
def cmd_settings() -> None:
    """Inspect or change saved settings."""


@cmd_settings.command(name="show")
@click.pass_context
def cmd_settings_show(ctx: click.Context) -> None:
    """Print the effective settings as JSON."""

    settings = ctx.obj.load()
    click.echo(json.dumps(dataclasses.asdict(settings), indent=2))


@cmd_settings.command(name="set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def cmd_settings_set(ctx: click.Context, key: str, value: str) -> None:
    """Change one saved setting."""

    try:
        settings = update_setting(ctx.obj.load(), key, value)
    except ConfigurationError as exc:
        raise click.BadParameter(str(exc), param_hint="KEY") from exc
    save_settings(settings, ctx.obj.settings_file)
    click.echo(f"{key} = {value}")


if __name__ == "__main__":
    cli()
