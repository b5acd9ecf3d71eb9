import subprocess
import time

import pytest


@pytest.fixture
def sleeps(monkeypatch):
    """Records every time.sleep() call instead of sleeping."""
    calls = []
    monkeypatch.setattr(time, "sleep", lambda seconds: calls.append(seconds))
    return calls


@pytest.fixture
def commands(monkeypatch):
    """
    Replaces subprocess.run; returns the list of recorded commands.
    Set `commands.returncodes` / `commands.stdout` to script the results.
    """

    class Recorder(list):
        returncodes = []
        stdout = ""

    recorder = Recorder()

    def fake_run(command, **kwargs):
        recorder.append((command, kwargs))
        returncode = recorder.returncodes.pop(0) if recorder.returncodes else 0
        if kwargs.get("check") and returncode != 0:
            raise subprocess.CalledProcessError(returncode, command, "", "boom")
        return subprocess.CompletedProcess(command, returncode, recorder.stdout, "")

    monkeypatch.setattr(subprocess, "run", fake_run)
    return recorder


@pytest.fixture
def azure_env(monkeypatch):
    for name in [
        "ARM_SUBSCRIPTION_ID",
        "ARM_CLIENT_ID",
        "ARM_TENANT_ID",
        "ARM_CLIENT_SECRET",
    ]:
        monkeypatch.setenv(name, "x")
