import subprocess
import sys
import time
from pathlib import Path

import pytest

from Interp import shell
from Interp.job_control import JobTable
from Interp.shell import LineTooLong, ShellState, main_loop, read_line, run_line

ROOT = Path(__file__).resolve().parents[1]


def test_cd_applies_before_next_segment(state, sandbox):
    sub = sandbox / "sub"
    sub.mkdir()
    run_line(f"cd {sub}; pwd > pwd.txt", state)
    assert (sub / "pwd.txt").read_text().strip() == str(sub.resolve())


def test_segments_run_in_order(state, sandbox):
    run_line("echo one > a.txt; cat a.txt > b.txt; echo two > a.txt", state)
    assert (sandbox / "b.txt").read_text() == "one\n"
    assert (sandbox / "a.txt").read_text() == "two\n"


def test_redirected_segment_finishes_before_next(state, sandbox):
    (sandbox / "in.txt").write_text("data\n")
    run_line("cat < in.txt > copy.txt; cat copy.txt > again.txt", state)
    assert (sandbox / "again.txt").read_text() == "data\n"


def test_failed_cd_does_not_stop_line(state, sandbox, capfd):
    run_line("cd nowhere; echo still > ran.txt", state)
    assert (sandbox / "ran.txt").read_text() == "still\n"
    assert "cd: nowhere" in capfd.readouterr().err


def test_missing_input_does_not_stop_line(state, sandbox, capfd):
    run_line("cat < missing.txt; echo next > next.txt", state)
    assert (sandbox / "next.txt").exists()
    assert "input file error" in capfd.readouterr().err


def test_background_segment_does_not_block(state, sandbox):
    start = time.monotonic()
    run_line("sleep 2 &; echo after > after.txt", state)
    assert time.monotonic() - start < 1.5
    assert (sandbox / "after.txt").read_text() == "after\n"
    assert len(state.jobs) == 1


def test_pipeline_segment(state, sandbox):
    (sandbox / "in.txt").write_text("a\nb\n")
    assert run_line("cat < in.txt | wc -l > n.txt", state) == 0
    assert (sandbox / "n.txt").read_text().strip() == "2"


def test_builtins_are_not_run_inside_pipeline(state, sandbox, capfd):
    before = Path.cwd()
    run_line("cd / | cat", state)
    assert Path.cwd() == before


@pytest.mark.parametrize("line", ["", "   ", ";;", "ls | | wc", "< in.txt", "&"])
def test_empty_lines_do_nothing(state, capfd, line):
    assert run_line(line, state) == 0
    captured = capfd.readouterr()
    assert captured.out == ""
    assert captured.err == ""


def test_injected_job_table(sandbox):
    table = JobTable(capacity=1)
    state = ShellState(table)
    run_line("sleep 2 &; sleep 2 &", state)
    assert state.jobs is table
    assert len(table) == 1
    for job in table:
        job.process.kill()
        job.process.wait()


def test_read_line_too_long(monkeypatch):
    monkeypatch.setattr("builtins.input", lambda prompt: "x" * 20)
    with pytest.raises(LineTooLong):
        read_line("> ", max_length=10)


def test_main_loop_runs_lines_until_eof(sandbox, monkeypatch, capsys):
    lines = iter(["echo hi > out.txt", "x" * 5000, "cd sub"])
    (sandbox / "sub").mkdir()

    def fake_input(prompt):
        try:
            return next(lines)
        except StopIteration:
            raise EOFError

    monkeypatch.setattr("builtins.input", fake_input)
    monkeypatch.setattr(shell, "init_signal_handlers", lambda table: None)
    assert main_loop(ShellState(JobTable())) == 0
    assert (sandbox / "out.txt").read_text() == "hi\n"
    assert Path.cwd() == (sandbox / "sub").resolve()
    assert "input line too long" in capsys.readouterr().err


def test_quit_exits_with_success_despite_jobs(sandbox):
    res = subprocess.run(
        [sys.executable, str(ROOT / "main.py"), "-c", "sleep 1 &; quit; echo never"],
        capture_output=True,
        text=True,
        timeout=10,
        cwd=ROOT,
    )
    assert res.returncode == 0
    assert "Running in background" in res.stdout
    assert "Exiting shell..." in res.stdout
    assert "never" not in res.stdout


def test_main_single_command(sandbox):
    import main

    assert main.main(["-c", "echo hi > hi.txt; false"]) == 0
    assert (sandbox / "hi.txt").read_text() == "hi\n"


def test_main_max_jobs_option():
    import main

    args = main.parse_args(["--max-jobs", "3"])
    assert args.max_jobs == 3
    assert args.command is None


def test_null_byte_in_program_name_does_not_stop_line(state, sandbox, capfd):
    run_line("ec\x00ho hi; echo next > n.txt", state)
    assert (sandbox / "n.txt").read_text() == "next\n"
    assert "failed to execute" in capfd.readouterr().err


def test_null_byte_in_redirection_paths(state, sandbox, capfd):
    assert run_line("cat < a\x00b", state) == 1
    assert run_line("echo hi > a\x00b", state) == 1
    assert run_line("cat < a\x00b | wc -l", state) == 1
    err = capfd.readouterr().err
    assert "input file error" in err
    assert "output file error" in err


def test_null_byte_in_cd_target(state, sandbox, capfd):
    before = Path.cwd()
    assert run_line("cd a\x00b; echo ok > ok.txt", state) == 0
    assert Path.cwd() == before
    assert (sandbox / "ok.txt").exists()
    assert "cd: " in capfd.readouterr().err
