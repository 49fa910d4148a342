import os
import signal
import sys
from dataclasses import dataclass
from typing import Any, Optional

import psutil


@dataclass
class BackgroundJob:
    pid: int
    seq: int
    command: str = ""
    process: Optional[Any] = None  # subprocess.Popen

    def finished(self):
        """Non-blocking check; reaps the child if it has exited."""
        if self.process is not None:
            return self.process.poll() is not None
        try:
            pid, _ = os.waitpid(self.pid, os.WNOHANG)
        except ChildProcessError:
            # Không phải con của shell (hoặc đã được thu hồi)
            return True
        return pid != 0

    def status(self):
        try:
            if psutil.pid_exists(self.pid):
                return psutil.Process(self.pid).status()
            return "terminated"
        except psutil.NoSuchProcess:
            return "terminated"
        except psutil.Error:
            return "unknown"


class JobTable:
    """
    Bounded registry of background processes.

    Nothing is looked up by pid: the table only accounts for capacity and
    reclaims finished children. SIGCHLD just marks the table dirty; the
    actual reaping happens at the next reap_if_pending() call.
    """

    def __init__(self, capacity=100):
        self.capacity = capacity
        self._jobs = []
        self._next_seq = 1
        self._pending = False

    def __len__(self):
        return len(self._jobs)

    def __iter__(self):
        return iter(list(self._jobs))

    @property
    def full(self):
        return len(self._jobs) >= self.capacity

    def register(self, pid, command="", process=None):
        """
        Add a background job.
        Returns False (after a warning) if the table is full; the process
        itself keeps running, just untracked.
        """
        if self.full:
            self.reap()
        if self.full:
            print(f"minishell: warning: job table full ({self.capacity} jobs), "
                  f"pid {pid} not tracked", file=sys.stderr)
            return False

        self._jobs.append(BackgroundJob(pid, self._next_seq, command, process))
        self._next_seq += 1
        return True

    def reap(self):
        """Remove and return the jobs whose process has terminated."""
        self._pending = False
        done, alive = [], []
        for job in self._jobs:
            (done if job.finished() else alive).append(job)
        self._jobs = alive
        return done

    def mark_dirty(self):
        self._pending = True

    @property
    def pending(self):
        return self._pending

    def reap_if_pending(self):
        if not self.pending:
            return []
        return self.reap()


def init_signal_handlers(table):
    """Install the SIGCHLD hook for a job table"""
    def handle_sigchld(signum, frame):
        table.mark_dirty()

    signal.signal(signal.SIGCHLD, handle_sigchld)


def report_finished(jobs):
    for job in jobs:
        print(f"[{job.pid}] Done {job.command}")


def show_jobs(table):
    """Hiển thị danh sách tiến trình nền"""
    report_finished(table.reap())

    if not len(table):
        print("No background jobs.")
        return

    print(f"{'PID':<8} {'Status':<12} {'Command'}")
    print("-" * 40)
    for job in table:
        print(f"{job.pid:<8} {job.status():<12} {job.command}")
