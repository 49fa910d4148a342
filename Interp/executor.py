import os
import subprocess
import sys

OUTPUT_MODE = 0o644


def error_reason(e):
    # ValueError (e.g. embedded null byte) has no strerror
    return getattr(e, "strerror", None) or str(e)


def open_input(path):
    """Open a redirection source read-only. Returns fd or None."""
    try:
        return os.open(path, os.O_RDONLY)
    except (OSError, ValueError) as e:
        print(f"minishell: input file error: {path}: {error_reason(e)}", file=sys.stderr)
        return None


def open_output(path):
    """Create/truncate a redirection target. Returns fd or None."""
    try:
        return os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, OUTPUT_MODE)
    except (OSError, ValueError) as e:
        print(f"minishell: output file error: {path}: {error_reason(e)}", file=sys.stderr)
        return None


def run_external(args, stdin=None, stdout=None, background=False):
    """
    Chạy lệnh ngoài với subprocess.
    Returns: Popen object or None
    """
    try:
        if background:
            # preexec_fn=os.setpgrp giúp tách process group cho background jobs
            return subprocess.Popen(args, stdin=stdin, stdout=stdout,
                                    preexec_fn=os.setpgrp)
        return subprocess.Popen(args, stdin=stdin, stdout=stdout)
    except PermissionError:
        print(f"minishell: permission denied: {args[0]}", file=sys.stderr)
        return None
    except FileNotFoundError:
        print(f"minishell: command not found: {args[0]}", file=sys.stderr)
        return None
    except (OSError, ValueError) as e:
        print(f"minishell: failed to execute '{args[0]}': {e}", file=sys.stderr)
        return None


def wait_foreground(procs):
    """
    Wait for every process in order.
    Returns: exit code of the last one
    """
    code = 0
    for p in procs:
        while True:
            try:
                code = p.wait()
                break
            except KeyboardInterrupt:
                # Ctrl+C cũng đã tới tiến trình con, tiếp tục chờ nó kết thúc
                continue
    return code


def _close_all(fds):
    for fd in fds:
        os.close(fd)
    fds.clear()


def launch_command(cmd, jobs):
    """
    Run one external command with its redirections.
    Returns: exit_code (0 for background launches)
    """
    fds = []
    try:
        stdin = stdout = None
        if cmd.input_path is not None:
            stdin = open_input(cmd.input_path)
            if stdin is None:
                return 1
            fds.append(stdin)
        if cmd.output_path is not None:
            stdout = open_output(cmd.output_path)
            if stdout is None:
                return 1
            fds.append(stdout)

        p = run_external(cmd.argv, stdin=stdin, stdout=stdout,
                         background=cmd.background)
    finally:
        # Child has its own copies now
        _close_all(fds)

    if p is None:
        return 127

    if cmd.background:
        print(f"[PID {p.pid}] Running in background")
        jobs.register(p.pid, str(cmd), p)
        return 0

    return wait_foreground([p])


def execute_pipeline(cmds, jobs):
    """
    Execute pipeline of commands.
    Returns: exit_code of the last stage
    """
    if not cmds:
        return 0

    last = len(cmds) - 1
    background = cmds[last].background
    procs, fds = [], []
    prev_stdout = None
    status = None

    try:
        for idx, cmd in enumerate(cmds):
            stdin = prev_stdout
            stdout = subprocess.PIPE if idx < last else None

            if idx == 0 and cmd.input_path is not None:
                stdin = open_input(cmd.input_path)
                if stdin is None:
                    status = 1
                    break
                fds.append(stdin)
            if idx == last and cmd.output_path is not None:
                stdout = open_output(cmd.output_path)
                if stdout is None:
                    status = 1
                    break
                fds.append(stdout)

            p = run_external(cmd.argv, stdin=stdin, stdout=stdout,
                             background=background)
            _close_all(fds)
            # The read end now belongs to the next stage only
            if prev_stdout is not None:
                prev_stdout.close()
                prev_stdout = None
            if p is None:
                status = 127
                break

            procs.append(p)
            prev_stdout = p.stdout
    finally:
        _close_all(fds)
        if prev_stdout is not None:
            prev_stdout.close()

    if background and procs:
        cmdline = " | ".join(str(c) for c in cmds)
        for p in procs:
            print(f"[PID {p.pid}] Running in background")
            jobs.register(p.pid, cmdline, p)
        return status or 0

    code = wait_foreground(procs)
    return code if status is None else status
