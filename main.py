import argparse
import sys

from config import MAX_BG_JOBS
from Interp.shell import ShellState, main_loop, run_line


def parse_args(args=None):
    parser = argparse.ArgumentParser(
        prog="minishell",
        description="minishell - a small command interpreter with pipes, redirection and background jobs",
    )
    parser.add_argument(
        "-c",
        dest="command",
        metavar="COMMAND",
        help="run one command line and exit",
    )
    parser.add_argument(
        "--max-jobs",
        type=int,
        default=MAX_BG_JOBS,
        metavar="N",
        help=f"number of background jobs to track (default: {MAX_BG_JOBS})",
    )
    return parser.parse_args(args)


def main(argv=None):
    args = parse_args(argv)
    state = ShellState(max_jobs=args.max_jobs)

    if args.command is not None:
        run_line(args.command, state)
        return 0

    return main_loop(state)


if __name__ == "__main__":
    sys.exit(main())
