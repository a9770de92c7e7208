"""
Delayed callbacks for TicTacToe.

The session never blocks while the computer "thinks": it asks a
scheduler to run the move later. Everything runs on one thread.
"""

import time
import logging
from typing import Callable, List, Any
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


class Scheduler:
    """
    Interface used by GameSession.

    call_later returns an opaque handle that can be passed to cancel.
    """

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> Any:
        raise NotImplementedError

    def cancel(self, handle: Any) -> None:
        raise NotImplementedError


class TkScheduler(Scheduler):
    """Runs callbacks on the Tk event loop with root.after."""

    def __init__(self, root):
        """
        Args:
            root: Any Tk widget, usually the main window.
        """
        self.root = root

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> str:
        return self.root.after(delay_ms, callback)

    def cancel(self, handle: str) -> None:
        import tkinter as tk

        try:
            self.root.after_cancel(handle)
        except tk.TclError as e:
            # Window already destroyed
            logger.debug("Could not cancel %s: %s", handle, e)


@dataclass(order=True)
class _Task:
    due_ms: int
    task_id: int
    callback: Callable[[], None] = field(compare=False)


class ManualScheduler(Scheduler):
    """
    Scheduler driven by an explicit clock.

    Time only moves when advance() or run_pending() is called, which makes
    it suitable for tests and for the console front end.
    """

    def __init__(self):
        self.now_ms = 0
        self._tasks: List[_Task] = []
        self._next_id = 1

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> int:
        task = _Task(self.now_ms + max(0, int(delay_ms)), self._next_id, callback)
        self._next_id += 1
        self._tasks.append(task)
        return task.task_id

    def cancel(self, handle: int) -> None:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.task_id != handle]
        if len(self._tasks) == before:
            logger.debug("Task %s already ran or was cancelled", handle)

    @property
    def pending(self) -> int:
        """Number of callbacks waiting to run."""
        return len(self._tasks)

    def advance(self, ms: int) -> int:
        """
        Move the clock forward and run every callback that comes due.

        Callbacks scheduled while advancing also run if they fall inside
        the window.

        Returns:
            Number of callbacks run.
        """
        target = self.now_ms + ms
        ran = 0
        while True:
            due = [t for t in self._tasks if t.due_ms <= target]
            if not due:
                break
            task = min(due)
            self._tasks.remove(task)
            self.now_ms = task.due_ms
            task.callback()
            ran += 1
        self.now_ms = target
        return ran

    def run_pending(self, real_time: bool = False) -> int:
        """
        Run callbacks until none are left.

        Args:
            real_time: Sleep until each callback is due instead of
                       jumping the clock.

        Returns:
            Number of callbacks run.
        """
        ran = 0
        while self._tasks:
            task = min(self._tasks)
            wait_ms = task.due_ms - self.now_ms
            if real_time and wait_ms > 0:
                time.sleep(wait_ms / 1000.0)
            ran += self.advance(max(0, wait_ms))
        return ran
