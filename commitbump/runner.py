"""One CI invocation: classify the latest commit and, if it qualifies, bump the manifest.

The manifest is only written after the new text has been fully computed, so
any parse or format error aborts with the file untouched. The read-modify-write
is not atomic; CI is expected to run one invocation per manifest at a time.
"""
import json
import logging
import pathlib

from pydantic import BaseModel

from . import git
from .classify import classify
from .config import Settings
from .errors import ManifestParseError
from .manifest import apply_bump
from .version import Bump

logger = logging.getLogger("commitbump")

SKIP_REASON = "non-qualifying commit"


class RunResult(BaseModel):
    decision: Bump
    skipped: bool
    reason: str | None = None
    manifest_path: str
    old_version: str | None = None
    new_version: str | None = None
    committed: bool = False
    pushed: bool = False

    def summary(self) -> str:
        if self.skipped:
            return f"no bump performed, reason: {self.reason}"
        return f"bumped {self.decision.value}: {self.old_version} -> {self.new_version}"


def log_event(settings: Settings, event: str, **fields) -> None:
    if settings.structured_logging:
        logger.info(json.dumps({"event": event, **fields}))
    else:
        logger.info("%s %s", event, " ".join(f"{k}={v}" for k, v in fields.items()))


def write_github_output(path: str, values: dict[str, str]) -> None:
    p = pathlib.Path(path)
    with p.open("a", encoding="utf-8") as f:
        for k, v in values.items():
            f.write(f"{k}={v}\n")


def run(
    settings: Settings,
    message: str | None = None,
    dry_run: bool = False,
    cwd: str | None = None,
) -> RunResult:
    if message is None:
        message = git.latest_commit_message(cwd=cwd)
    decision = classify(message)
    manifest_path = pathlib.Path(cwd or ".") / settings.manifest_path

    if decision == Bump.NONE:
        result = RunResult(
            decision=decision, skipped=True, reason=SKIP_REASON, manifest_path=str(manifest_path)
        )
        log_event(settings, "bump_skipped", decision=decision.value, reason=SKIP_REASON)
        if settings.github_output and not dry_run:
            write_github_output(settings.github_output, {"SKIPPED": "true"})
        return result

    # bytes in and out so CRLF manifests are not normalised
    raw = manifest_path.read_bytes()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ManifestParseError(
            f"{manifest_path} is not valid UTF-8 (byte {e.start})", text=str(manifest_path)
        ) from e
    old, new, updated = apply_bump(text, decision, settings.version_key)

    result = RunResult(
        decision=decision,
        skipped=False,
        manifest_path=str(manifest_path),
        old_version=str(old),
        new_version=str(new),
    )
    if dry_run:
        log_event(settings, "bump_planned", **result.model_dump(mode="json"))
        return result

    manifest_path.write_bytes(updated.encode("utf-8"))
    if settings.commit:
        git.commit_and_push(
            settings.manifest_path,
            settings.commit_message(str(new)),
            settings.git_user_name,
            settings.git_user_email,
            push=settings.push,
            cwd=cwd,
        )
        result.committed = True
        result.pushed = settings.push
    if settings.github_output:
        write_github_output(settings.github_output, {"NEW_VERSION": str(new), "SKIPPED": "false"})
    log_event(settings, "bump_applied", **result.model_dump(mode="json"))
    return result
