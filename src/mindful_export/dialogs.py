"""Interactive desktop flow: confirm, pick the export, pick the CSV, report."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Protocol

from .config import ExtractorSettings
from .errors import MindfulExportError
from .models import ExtractionResult, ExtractionStatus
from .pipeline import export_result, extract_records, summarize

logger = logging.getLogger(__name__)

TITLE = "Bloom Bot Parser"
CONFIRM_MESSAGE = (
    "This will extract all Mindful Sessions from your Apple Health data into a CSV "
    "file, which can be imported using Bloom. Proceed?"
)
CANCELLED_MESSAGE = "Mindful Session extraction cancelled."
EMPTY_MESSAGE = "No Mindful Session entries found."


class DialogService(Protocol):
    def ask_yes_no(self, title: str, message: str) -> bool: ...

    def choose_input(self, title: str, initial: Path) -> Optional[Path]: ...

    def choose_output(self, title: str, initial: Path) -> Optional[Path]: ...

    def show_info(self, title: str, message: str) -> None: ...

    def show_warning(self, title: str, message: str) -> None: ...

    def show_error(self, title: str, message: str) -> None: ...


def success_message(result: ExtractionResult) -> str:
    filename = Path(result.destination).name if result.destination else ""
    return (
        "Mindful Session extraction successful!\n\n"
        f"{result.summary}\n"
        f"Upload {filename} to the #meditation-tracking channel and use /import "
        "to import the data into Bloom."
    )


def run_interactive(
    dialogs: DialogService,
    settings: Optional[ExtractorSettings] = None,
    initial_dir: Optional[Path] = None,
) -> Optional[ExtractionResult]:
    """Walk the user through one extraction. Returns ``None`` when it failed."""
    settings = settings or ExtractorSettings()
    initial_dir = initial_dir or Path.home()

    if not dialogs.ask_yes_no(TITLE, CONFIRM_MESSAGE):
        dialogs.show_warning(TITLE, CANCELLED_MESSAGE)
        return ExtractionResult(status=ExtractionStatus.CANCELLED)

    input_path = dialogs.choose_input("Open Apple Health data", initial_dir / "export.xml")
    if input_path is None:
        dialogs.show_warning(TITLE, CANCELLED_MESSAGE)
        return ExtractionResult(status=ExtractionStatus.CANCELLED)

    try:
        result = summarize(extract_records(input_path, settings))
        if result.status is ExtractionStatus.EMPTY:
            dialogs.show_warning(TITLE, EMPTY_MESSAGE)
            return result

        output_path = dialogs.choose_output(
            "Save Mindful Session CSV", initial_dir / settings.output_name
        )
        if output_path is None:
            dialogs.show_warning(TITLE, CANCELLED_MESSAGE)
            result.status = ExtractionStatus.CANCELLED
            return result

        export_result(result, output_path, settings)
    except MindfulExportError as exc:
        logger.error("Extraction of %s failed: %s", input_path, exc)
        dialogs.show_error(TITLE, f"Error extracting Mindful Sessions: {exc}")
        return None

    dialogs.show_info(TITLE, success_message(result))
    return result


class TkDialogService:
    """``DialogService`` backed by tkinter's stock dialogs."""

    @contextmanager
    def _root(self) -> Iterator[object]:
        import tkinter as tk

        root = tk.Tk()
        root.withdraw()
        try:
            yield root
        finally:
            root.destroy()

    def ask_yes_no(self, title: str, message: str) -> bool:
        from tkinter import messagebox

        with self._root():
            return bool(messagebox.askyesno(title, message, icon=messagebox.QUESTION))

    def choose_input(self, title: str, initial: Path) -> Optional[Path]:
        from tkinter import filedialog

        with self._root():
            chosen = filedialog.askopenfilename(
                title=title,
                initialdir=str(initial.parent),
                initialfile=initial.name,
                filetypes=[("Apple Health export data", "*.xml")],
            )
        return Path(chosen) if chosen else None

    def choose_output(self, title: str, initial: Path) -> Optional[Path]:
        from tkinter import filedialog

        with self._root():
            chosen = filedialog.asksaveasfilename(
                title=title,
                initialdir=str(initial.parent),
                initialfile=initial.name,
                defaultextension=".csv",
                filetypes=[("CSV", "*.csv")],
            )
        return Path(chosen) if chosen else None

    def show_info(self, title: str, message: str) -> None:
        from tkinter import messagebox

        with self._root():
            messagebox.showinfo(title, message)

    def show_warning(self, title: str, message: str) -> None:
        from tkinter import messagebox

        with self._root():
            messagebox.showwarning(title, message)

    def show_error(self, title: str, message: str) -> None:
        from tkinter import messagebox

        with self._root():
            messagebox.showerror(title, message)
