"""
Progress bars for the batch commands, built on Rich.

Every batch (thumbnail fetch, media pull, caption pull, legacy import) shows
one bar with per-outcome counters. The bars are optional: library code
accepts `progress=None` and tests never create one.

Usage:
    from tube_archive.core.progress import BatchProgressBar
    
    with BatchProgressBar(total=len(videos), description="Pulling") as progress:
        for future in as_completed(futures):
            progress.update(success=future.result())
"""

from typing import Optional

from rich import get_console
from rich.progress import BarColumn, Progress, ProgressColumn, Task, TaskID
from rich.text import Text
from rich.theme import Theme


PROGRESS_THEME = Theme({
    "bar.back": "grey23",
    "bar.complete": "rgb(204,0,0)",
    "bar.finished": "rgb(114,156,31)",
    "bar.pulse": "rgb(204,0,0)",
    "progress.percentage": "white",
})


class FixedWidthTextColumn(ProgressColumn):
    """Text column truncated (with ellipsis) or padded to a fixed width."""

    def __init__(self, text_format: str, width: int = 20, style: str = "none") -> None:
        self.text_format = text_format
        self.width = width
        self.style = style
        super().__init__()

    def render(self, task: Task) -> Text:
        text = Text.from_markup(self.text_format.format(task=task), style=self.style)
        text.truncate(max_width=self.width, overflow="ellipsis", pad=True)
        return text


class BatchProgressBar:
    """
    Progress bar for a batch of per-video tasks.
    
    Displays:
    - Description (e.g., "Pulling")
    - Status: ✓ succeeded, ✗ failed, ⊘ skipped
    - Bar and percentage
    
    Example:
        Thumbnails      ✓ 41  ✗ 1  ⊘ 2        ━━━━━━━━━━━━━━━━━  64%
    """
    
    def __init__(self, total: int, description: str, status_width: int = 30) -> None:
        """
        Args:
            total: Number of tasks in the batch.
            description: Label shown on the left.
            status_width: Width of the counters column.
        """
        self.total = total
        self.description = description
        self.completed = 0
        self.succeeded = 0
        self.failed = 0
        self.skipped = 0
        
        self.console = get_console()
        
        self.progress = Progress(
            FixedWidthTextColumn("[white]{task.description}", width=15),
            FixedWidthTextColumn("{task.fields[status]}", width=status_width, style="white"),
            BarColumn(bar_width=40, finished_style="green"),
            "[progress.percentage]{task.percentage:>3.0f}%",
            console=self.console,
            transient=False,
            refresh_per_second=10,
        )
        
        self.task_id: Optional[TaskID] = None
        self._started = False
    
    def __enter__(self) -> "BatchProgressBar":
        self.start()
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
    
    def start(self) -> None:
        if not self._started:
            self.console.push_theme(PROGRESS_THEME)
            self.progress.start()
            self.task_id = self.progress.add_task(
                description=self.description,
                total=self.total,
                status=self._status_text(),
            )
            self._started = True
    
    def stop(self) -> None:
        if self._started:
            self.progress.stop()
            self.console.pop_theme()
            self._started = False
    
    def _status_text(self) -> str:
        parts = [
            f"[green]✓ {self.succeeded}[/green]",
            f"[red]✗ {self.failed}[/red]",
        ]
        if self.skipped > 0:
            parts.append(f"[yellow]⊘ {self.skipped}[/yellow]")
        return "  ".join(parts)
    
    def update(self, success: bool, skipped: bool = False) -> None:
        """
        Record one finished task.
        
        Args:
            success: Whether the task produced its result.
            skipped: Whether the task had nothing to do.
        """
        self.completed += 1
        if skipped:
            self.skipped += 1
        elif success:
            self.succeeded += 1
        else:
            self.failed += 1
        
        if self.task_id is not None:
            self.progress.update(
                self.task_id,
                completed=self.completed,
                status=self._status_text(),
            )


__all__ = [
    "PROGRESS_THEME",
    "FixedWidthTextColumn",
    "BatchProgressBar",
]
