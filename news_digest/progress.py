"""Progress display for command-line refreshes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)


@dataclass
class StageHandle:
    """Handle for updating one stage's progress bar."""

    progress: "RefreshProgress"
    task_id: TaskID
    description: str
    completed: bool = False

    def set_total(self, total: Optional[int]) -> None:
        self.progress._progress.update(self.task_id, total=total)

    def advance(self, amount: int = 1) -> None:
        if self.completed:
            return
        self.progress._progress.advance(self.task_id, amount)

    def complete(self) -> None:
        if self.completed:
            return
        self.progress._progress.update(self.task_id, description=f"{self.description} • done")
        self.completed = True

    def __enter__(self) -> "StageHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.complete()


class RefreshProgress:
    """Rich progress bars for the stages of a refresh run."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("{task.description}", justify="left"),
            BarColumn(bar_width=None),
            TextColumn("{task.completed}/{task.total}"),
            TimeElapsedColumn(),
            console=self.console,
            transient=False,
        )

    def __enter__(self) -> "RefreshProgress":
        self._progress.__enter__()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._progress.__exit__(exc_type, exc, tb)

    def stage(self, description: str, total: Optional[int] = None) -> StageHandle:
        task_id = self._progress.add_task(description, total=total)
        return StageHandle(progress=self, task_id=task_id, description=description)


__all__ = ["RefreshProgress", "StageHandle"]
