import sys

from config import PROMPT, MAX_COMMAND_LENGTH, MAX_BG_JOBS
from Interp.builtin import execute_builtin
from Interp.executor import execute_pipeline, launch_command
from Interp.job_control import JobTable, init_signal_handlers, report_finished
from Interp.parser import parse_command, split_pipeline, split_statements


class LineTooLong(Exception):
    pass


class ShellState:
    """Per-interpreter state passed to every command: just the job table."""

    def __init__(self, jobs=None, max_jobs=MAX_BG_JOBS):
        self.jobs = jobs if jobs is not None else JobTable(max_jobs)


def run_segment(segment, state):
    """Run one ';'-separated segment. Returns its exit code."""
    if "|" in segment:
        stages = split_pipeline(segment)
        if not stages:
            return 0
        return execute_pipeline(stages, state.jobs)

    cmd = parse_command(segment)
    if cmd.empty:
        return 0

    executed, exit_code = execute_builtin(cmd, state)
    if executed:
        return exit_code
    return launch_command(cmd, state.jobs)


def run_line(line, state):
    """
    Execute every segment of a line, left to right.
    Returns: exit code of the last segment
    """
    status = 0
    for segment in split_statements(line):
        status = run_segment(segment, state)
    return status


def read_line(prompt=PROMPT, max_length=MAX_COMMAND_LENGTH):
    line = input(prompt)
    if len(line) > max_length:
        raise LineTooLong(max_length)
    return line


def main_loop(state=None):
    """Main shell loop"""
    if state is None:
        state = ShellState()
    init_signal_handlers(state.jobs)

    while True:
        report_finished(state.jobs.reap_if_pending())
        try:
            line = read_line()
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print()
            continue
        except LineTooLong as e:
            print(f"minishell: input line too long (max {e.args[0]})", file=sys.stderr)
            continue

        report_finished(state.jobs.reap_if_pending())
        try:
            run_line(line, state)
        except KeyboardInterrupt:
            print()

    return 0
