import os

from pydantic import BaseModel


def _flag(name: str, default: str = "1") -> bool:
    return os.getenv(name, default) != "0"


class Settings(BaseModel):
    # manifest
    manifest_path: str = "pubspec.yaml"
    version_key: str = "version"

    # version commit
    skip_marker: str = "[skip ci]"  # keeps the bump commit from re-triggering CI
    commit_template: str = "Bump version to {version} {marker}"
    git_user_name: str = "GitHub Action"
    git_user_email: str = "action@github.com"
    commit: bool = True  # COMMITBUMP_COMMIT ("0" to disable)
    push: bool = True  # COMMITBUMP_PUSH ("0" to disable)

    # step outputs file provided by GitHub Actions
    github_output: str | None = None  # GITHUB_OUTPUT

    # structured logging toggle
    structured_logging: bool = True  # COMMITBUMP_STRUCT_LOG ("0" to disable)

    # service
    auth_token: str | None = None  # COMMITBUMP_AUTH_TOKEN
    max_body_bytes: int = 1_000_000

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            manifest_path=os.getenv("COMMITBUMP_MANIFEST", "pubspec.yaml"),
            version_key=os.getenv("COMMITBUMP_VERSION_KEY", "version"),
            skip_marker=os.getenv("COMMITBUMP_SKIP_MARKER", "[skip ci]"),
            commit_template=os.getenv(
                "COMMITBUMP_COMMIT_TEMPLATE", "Bump version to {version} {marker}"
            ),
            git_user_name=os.getenv("COMMITBUMP_GIT_USER_NAME", "GitHub Action"),
            git_user_email=os.getenv("COMMITBUMP_GIT_USER_EMAIL", "action@github.com"),
            commit=_flag("COMMITBUMP_COMMIT"),
            push=_flag("COMMITBUMP_PUSH"),
            github_output=os.getenv("GITHUB_OUTPUT") or None,
            structured_logging=_flag("COMMITBUMP_STRUCT_LOG"),
            auth_token=os.getenv("COMMITBUMP_AUTH_TOKEN") or None,
            max_body_bytes=int(os.getenv("COMMITBUMP_MAX_BODY_BYTES", "1000000") or "1000000"),
        )

    def commit_message(self, version: str) -> str:
        return self.commit_template.format(version=version, marker=self.skip_marker).strip()
