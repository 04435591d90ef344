"""A small interval scheduler and the command that runs the example job."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Callable, Sequence

from dotenv import load_dotenv

from .logs import log_info

_log = logging.getLogger(__name__)


@dataclass
class _Job:
    interval: float
    func: Callable[..., Any]
    args: tuple[Any, ...] = field(default_factory=tuple)
    thread: threading.Thread | None = None


class IntervalScheduler:
    """Runs each job repeatedly, waiting its interval before every run."""

    def __init__(self) -> None:
        self._jobs: list[_Job] = []
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._running = False

    def __enter__(self) -> "IntervalScheduler":
        self.start()
        return self

    def __exit__(self, *exc: object) -> None:
        self.shutdown()

    def add_job(self, interval: float | timedelta, func: Callable[..., Any], *args: Any) -> _Job:
        """Register func(*args) to run every interval seconds; raise ValueError if not positive."""
        seconds = interval.total_seconds() if isinstance(interval, timedelta) else float(interval)
        if seconds <= 0:
            raise ValueError("duration job interval must be greater than zero")
        job = _Job(seconds, func, args)
        with self._lock:
            self._jobs.append(job)
            if self._running:
                self._launch(job, self._stop)
        return job

    def start(self) -> None:
        with self._lock:
            if self._running:
                return
            self._running = True
            self._stop = threading.Event()
            for job in self._jobs:
                self._launch(job, self._stop)

    def shutdown(self) -> None:
        with self._lock:
            self._running = False
            self._stop.set()
            threads = [job.thread for job in self._jobs if job.thread is not None]
            for job in self._jobs:
                job.thread = None
        current = threading.current_thread()
        for thread in threads:
            if thread is not current:
                thread.join()

    def _launch(self, job: _Job, stop: threading.Event) -> None:
        thread = threading.Thread(target=self._run, args=(job, stop), daemon=True)
        job.thread = thread
        thread.start()

    @staticmethod
    def _run(job: _Job, stop: threading.Event) -> None:
        while not stop.wait(job.interval):
            try:
                job.func(*job.args)
            except Exception:
                _log.exception("scheduled job failed")


def _example_task(name: str, count: int) -> None:
    print("uwu")
    log_info("Process", "func_name", {}, "message")


def main(argv: Sequence[str] | None = None) -> int:
    load_dotenv()
    scheduler = IntervalScheduler()
    print("Starting scheduler...")
    scheduler.add_job(4, _example_task, "hello", 1)
    scheduler.start()
    print("Scheduler started!")
    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        pass
    finally:
        scheduler.shutdown()
    return 0