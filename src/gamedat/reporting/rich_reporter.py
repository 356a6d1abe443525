from __future__ import annotations

import time
from typing import Any, Dict, List

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from ..config import load_settings
from .base import Reporter, TaskStatus, TaskRecord, format_stats, get_verbosity

_STATUS_ICON = {
    TaskStatus.SUCCESS: "✔",
    TaskStatus.FAILED: "✖",
}


class RichReporter(Reporter):
    supports_progress = True

    def __init__(self, console: Console | None = None, transient: bool | None = None):
        self.console = console or Console(stderr=True, highlight=False, soft_wrap=False)
        self._transient = (
            load_settings().progress_transient if transient is None else transient
        )
        self.progress: Progress | None = None
        self._tasks: Dict[str, TaskRecord] = {}
        self._task_ids: Dict[str, TaskID] = {}
        self._transient_completions: List[str] = []

    def _ensure_progress(self) -> Progress:
        if self.progress is None:
            self.progress = Progress(
                SpinnerColumn(spinner_name="dots"),
                TextColumn("{task.fields[name]}", justify="left"),
                BarColumn(bar_width=None),
                TextColumn("{task.completed}/{task.total}"),
                TextColumn("[dim]{task.fields[item]}"),
                TimeElapsedColumn(),
                transient=self._transient,
                console=self.console,
                expand=True,
            )
            self.progress.start()
        return self.progress

    def _completion_line(self, rec: TaskRecord) -> str:
        icon = _STATUS_ICON.get(rec.status, "")
        total_part = f" {rec.completed}/{rec.total}" if rec.total is not None else ""
        return f"{icon} {rec.name}{total_part} ({rec.duration:.2f}s){format_stats(rec.meta)}"

    def start_task(
        self, task_id: str, name: str, total: int | None = None, **meta: Any
    ) -> None:
        # Tasks without a known total are shown as headers, not spinners.
        if total is None:
            self.console.rule(name)
            return
        progress = self._ensure_progress()
        self._task_ids[task_id] = progress.add_task("", total=total, name=name, item="")
        self._tasks[task_id] = TaskRecord(task_id, name, total, meta=meta)

    def advance(self, task_id: str, step: int = 1, **meta: Any) -> None:
        rec = self._tasks.get(task_id)
        if not rec or self.progress is None:
            return
        rec.completed += step
        rec.meta.update(meta)
        self.progress.update(
            self._task_ids[task_id],
            completed=rec.completed,
            item=escape(str(meta.get("current_item") or "")),
        )

    def end_task(
        self,
        task_id: str,
        status: TaskStatus = TaskStatus.SUCCESS,
        **final_meta: Any,
    ) -> None:
        rec = self._tasks.pop(task_id, None)
        if not rec:
            return
        rec.status = status
        rec.end_time = time.time()
        rec.meta.update(final_meta)
        rid = self._task_ids.pop(task_id, None)
        if rid is not None and self.progress is not None:
            if status == TaskStatus.SUCCESS:
                self.progress.update(rid, completed=rec.total, item="")
            if self._transient:
                self._transient_completions.append(self._completion_line(rec))
            else:
                self.console.print(self._completion_line(rec), markup=False)
        if not self._tasks:
            self.flush()

    def status(self, message: str, **fields: Any) -> None:
        self.console.print(f"[green]INFO[/]: {escape(message)}")

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() < level:
            return
        self.console.print(f"[cyan]VERB{level}[/]: {escape(message)}")

    def error(self, message: str, **fields: Any) -> None:
        self.console.print(f"[bold red]ERROR[/]: {escape(message)}")

    def warning(self, message: str, **fields: Any) -> None:
        self.console.print(f"[yellow]WARN[/]: {escape(message)}")

    def flush(self) -> None:
        if self.progress is None:
            return
        try:
            self.progress.stop()
        finally:
            self.progress = None
            if self._transient_completions:
                self.console.print("\n".join(self._transient_completions), markup=False)
                self._transient_completions.clear()
