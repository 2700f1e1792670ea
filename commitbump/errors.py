class BumpError(Exception):
    """Base class for failures that must abort before the manifest is written."""

    def __init__(self, message: str, text: str | None = None):
        super().__init__(message)
        self.text = text


class ManifestParseError(BumpError):
    pass


class AmbiguousManifestError(BumpError):
    pass


class VersionFormatError(BumpError):
    pass


class GitError(Exception):
    def __init__(self, cmd: list[str], returncode: int, stderr: str = ""):
        super().__init__(f"{' '.join(cmd)} exited {returncode}: {stderr.strip()}")
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
