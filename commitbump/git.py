import subprocess

from .errors import GitError


def _git(*args: str, cwd: str | None = None) -> str:
    cmd = ["git", *args]
    try:
        return subprocess.run(cmd, cwd=cwd, capture_output=True, text=True, check=True).stdout
    except subprocess.CalledProcessError as e:
        raise GitError(cmd, e.returncode, e.stderr or "") from e


def latest_commit_message(cwd: str | None = None) -> str:
    return _git("log", "-1", "--pretty=%B", cwd=cwd).strip()


def commit_and_push(
    path: str,
    message: str,
    user_name: str,
    user_email: str,
    push: bool = True,
    cwd: str | None = None,
) -> None:
    _git("config", "user.name", user_name, cwd=cwd)
    _git("config", "user.email", user_email, cwd=cwd)
    _git("add", path, cwd=cwd)
    _git("commit", "-m", message, cwd=cwd)
    if push:
        _git("push", cwd=cwd)
