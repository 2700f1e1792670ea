import subprocess

import pytest

from commitbump import git
from commitbump.errors import GitError


class Recorder:
    def __init__(self, stdout="", fail_on=None):
        self.cmds = []
        self.stdout = stdout
        self.fail_on = fail_on

    def __call__(self, cmd, cwd=None, capture_output=False, text=False, check=False):
        self.cmds.append(cmd)
        if self.fail_on and cmd[1] == self.fail_on:
            raise subprocess.CalledProcessError(1, cmd, output="", stderr="rejected\n")
        return subprocess.CompletedProcess(cmd, 0, stdout=self.stdout, stderr="")


def test_latest_commit_message(monkeypatch):
    rec = Recorder(stdout="fix: crash\n\nbody text\n\n")
    monkeypatch.setattr(git.subprocess, "run", rec)
    assert git.latest_commit_message() == "fix: crash\n\nbody text"
    assert rec.cmds == [["git", "log", "-1", "--pretty=%B"]]


def test_commit_and_push_sequence(monkeypatch):
    rec = Recorder()
    monkeypatch.setattr(git.subprocess, "run", rec)
    git.commit_and_push("pubspec.yaml", "Bump version to 1.0.1+2 [skip ci]", "Bot", "bot@x")
    assert rec.cmds == [
        ["git", "config", "user.name", "Bot"],
        ["git", "config", "user.email", "bot@x"],
        ["git", "add", "pubspec.yaml"],
        ["git", "commit", "-m", "Bump version to 1.0.1+2 [skip ci]"],
        ["git", "push"],
    ]


def test_commit_without_push(monkeypatch):
    rec = Recorder()
    monkeypatch.setattr(git.subprocess, "run", rec)
    git.commit_and_push("pubspec.yaml", "m", "Bot", "bot@x", push=False)
    assert ["git", "push"] not in rec.cmds


def test_failure_raises_git_error(monkeypatch):
    monkeypatch.setattr(git.subprocess, "run", Recorder(fail_on="push"))
    with pytest.raises(GitError) as exc:
        git.commit_and_push("pubspec.yaml", "m", "Bot", "bot@x")
    assert exc.value.cmd == ["git", "push"]
    assert "rejected" in str(exc.value)
