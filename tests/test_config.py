from commitbump.config import Settings


def test_defaults_from_empty_env(monkeypatch):
    for k in [
        "COMMITBUMP_MANIFEST",
        "COMMITBUMP_SKIP_MARKER",
        "COMMITBUMP_COMMIT",
        "COMMITBUMP_PUSH",
        "COMMITBUMP_STRUCT_LOG",
        "GITHUB_OUTPUT",
        "COMMITBUMP_AUTH_TOKEN",
        "COMMITBUMP_MAX_BODY_BYTES",
    ]:
        monkeypatch.delenv(k, raising=False)
    s = Settings.from_env()
    assert s.manifest_path == "pubspec.yaml" and s.version_key == "version"
    assert s.commit and s.push and s.structured_logging
    assert s.github_output is None and s.auth_token is None
    assert s.max_body_bytes == 1_000_000


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("COMMITBUMP_MANIFEST", "app/pubspec.yaml")
    monkeypatch.setenv("COMMITBUMP_PUSH", "0")
    monkeypatch.setenv("COMMITBUMP_STRUCT_LOG", "0")
    monkeypatch.setenv("COMMITBUMP_SKIP_MARKER", "[ci skip]")
    monkeypatch.setenv("GITHUB_OUTPUT", "/tmp/out")
    s = Settings.from_env()
    assert s.manifest_path == "app/pubspec.yaml"
    assert s.push is False and s.structured_logging is False
    assert s.github_output == "/tmp/out"
    assert s.commit_message("1.2.3+4") == "Bump version to 1.2.3+4 [ci skip]"


def test_commit_message_without_marker():
    s = Settings(skip_marker="")
    assert s.commit_message("0.0.1+1") == "Bump version to 0.0.1+1"
