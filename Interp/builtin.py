import os
import sys

from Interp.executor import error_reason
from Interp.job_control import show_jobs


def builtin_help():
    """Print help message"""
    print("""minishell help:
 Built-in commands:
  cd [dir]      : change directory (no dir: $HOME)
  exit, quit    : exit shell
  jobs          : list background jobs
  help          : print this help

Features:
  Sequencing using ;
  Pipes using |
  Redirection using < >
  Background with & (run command in background)
""")


def builtin_exit():
    """Exit immediately; background jobs are left running"""
    print("Exiting shell...")
    sys.exit(0)


def builtin_cd(args):
    """Change directory"""
    if args:
        path = args[0]
    else:
        path = os.environ.get("HOME")
        if not path:
            return 0
    try:
        os.chdir(path)
        return 0
    except (OSError, ValueError) as e:
        print(f"cd: {path}: {error_reason(e)}", file=sys.stderr)
        return 1


def execute_builtin(cmd, state):
    """
    Execute built-in command if it matches.
    Returns (executed: bool, exit_code: int)
    """
    if cmd.empty:
        return False, 0

    name, args = cmd.argv[0], cmd.argv[1:]

    if name in ("exit", "quit"):
        builtin_exit()
    elif name == "cd":
        return True, builtin_cd(args)
    elif name == "jobs":
        show_jobs(state.jobs)
        return True, 0
    elif name == "help":
        builtin_help()
        return True, 0

    return False, 0
