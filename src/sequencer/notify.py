"""User-facing notifications.

Notifications are fire-and-forget messages about the outcome of a run. They
are separate from logging: logs are for diagnosing, notifications are what
the user is shown.
"""

from __future__ import annotations

from typing import List, Optional, Protocol, Tuple

import click


class Notifier(Protocol):
    def info(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class ConsoleNotifier:
    """Print notifications to the terminal; errors go to stderr."""

    def info(self, message: str) -> None:
        click.echo(message)

    def error(self, message: str) -> None:
        click.secho(f"Error: {message}", fg="red", err=True)


class RecordingNotifier:
    """Keep notifications in memory as ``(level, message)`` pairs."""

    def __init__(self) -> None:
        self.messages: List[Tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    @property
    def errors(self) -> List[str]:
        return [m for level, m in self.messages if level == "error"]

    @property
    def infos(self) -> List[str]:
        return [m for level, m in self.messages if level == "info"]


class MessageboxNotifier:
    """Show notifications as Tk message boxes.

    Informational messages are batched and shown once by ``flush`` so that a
    dry run listing many files does not open one box per file.
    """

    def __init__(self, parent=None, title: str = "Image Sequencer") -> None:
        self.parent = parent
        self.title = title
        self._pending: List[str] = []

    def info(self, message: str) -> None:
        self._pending.append(message)

    def error(self, message: str) -> None:
        from tkinter import messagebox

        self.flush()
        messagebox.showerror(self.title, message, parent=self.parent)

    def flush(self) -> Optional[str]:
        from tkinter import messagebox

        if not self._pending:
            return None
        text = "\n".join(self._pending[-30:])
        self._pending = []
        messagebox.showinfo(self.title, text, parent=self.parent)
        return text
