"""One-off run dialog using Tkinter.

The dialog is prefilled from the saved settings. Values entered here apply
to a single run only and are never saved.
"""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path

import tkinter as tk
from tkinter import ttk

from config import Settings
from .errors import SequencerError
from .notify import MessageboxNotifier
from .rename import RunResult, run_sequencer
from .vault import LocalVault

logger = logging.getLogger(__name__)


class SequencerDialog:
    """Tkinter form for a parameterized run.

    Parameters
    ----------
    vault_root
        Directory holding the vault.
    settings
        Saved settings used to prefill the form.
    """

    def __init__(self, vault_root: Path, settings: Settings) -> None:
        self.vault_root = Path(vault_root)
        self.settings = settings
        self.last_result: RunResult | None = None

        self.root = tk.Tk()
        self.root.title("Rename Image Attachments")
        self.notifier = MessageboxNotifier(parent=self.root)

        form = ttk.Frame(self.root, padding=10)
        form.pack(fill=tk.BOTH, expand=True)

        self.prefix_var = tk.StringVar(value=settings.image_prefix)
        self.target_var = tk.StringVar(value=settings.target_directory)
        self.reference_var = tk.StringVar(value=settings.reference_directory)
        self.note_var = tk.StringVar(value=settings.targeted_note_path)
        self.scoop_var = tk.BooleanVar(value=settings.scoop_vault_root)
        self.dry_run_var = tk.BooleanVar(value=False)

        rows = [
            ("Prefix", self.prefix_var),
            ("Target directory", self.target_var),
            ("Reference directory", self.reference_var),
            ("Targeted note", self.note_var),
        ]
        for row, (label, var) in enumerate(rows):
            ttk.Label(form, text=label).grid(row=row, column=0, sticky=tk.W, pady=2)
            ttk.Entry(form, textvariable=var, width=40).grid(
                row=row, column=1, sticky=tk.EW, padx=(6, 0), pady=2
            )

        ttk.Checkbutton(
            form, text="Include images at the vault root", variable=self.scoop_var
        ).grid(row=len(rows), column=0, columnspan=2, sticky=tk.W, pady=(6, 0))
        ttk.Checkbutton(
            form, text="Dry run (only list renames)", variable=self.dry_run_var
        ).grid(row=len(rows) + 1, column=0, columnspan=2, sticky=tk.W)

        buttons = ttk.Frame(form)
        buttons.grid(row=len(rows) + 2, column=0, columnspan=2, sticky=tk.E, pady=(10, 0))
        ttk.Button(buttons, text="Cancel", command=self.root.destroy).pack(
            side=tk.RIGHT, padx=4
        )
        ttk.Button(buttons, text="Run", command=self.on_run).pack(side=tk.RIGHT, padx=4)
        form.columnconfigure(1, weight=1)

    def run(self) -> None:
        """Start Tk event loop."""

        self.root.mainloop()

    def form_settings(self) -> Settings:
        return dataclasses.replace(
            self.settings,
            image_prefix=self.prefix_var.get(),
            target_directory=self.target_var.get().strip(),
            reference_directory=self.reference_var.get().strip(),
            targeted_note_path=self.note_var.get().strip(),
            scoop_vault_root=bool(self.scoop_var.get()),
        )

    def on_run(self) -> None:
        settings = self.form_settings()
        vault = LocalVault.from_settings(self.vault_root, settings)
        try:
            self.last_result = run_sequencer(
                vault, settings, self.notifier, dry_run=bool(self.dry_run_var.get())
            )
        except SequencerError as exc:
            # Already shown to the user
            logger.error("Run failed: %s", exc)
            return
        self.notifier.flush()
        if not self.last_result.dry_run:
            self.root.destroy()


def run_dialog(vault_root: Path, settings: Settings) -> RunResult | None:
    """Open the dialog and block until it is closed.

    Returns
    -------
    RunResult or None
        Result of the last run started from the dialog, if any.
    """

    dialog = SequencerDialog(Path(vault_root), settings)
    dialog.run()
    return dialog.last_result
