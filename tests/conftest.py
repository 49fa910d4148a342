import pytest

from Interp.job_control import JobTable
from Interp.shell import ShellState


@pytest.fixture()
def sandbox(tmp_path, monkeypatch):
    # Work in an isolated temp directory
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


@pytest.fixture()
def state(sandbox):
    st = ShellState(JobTable(capacity=4))
    yield st
    # Don't leave children behind
    for job in st.jobs:
        if job.process is not None:
            job.process.kill()
            job.process.wait()
