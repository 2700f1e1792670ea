import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, NonNegativeInt

from .errors import VersionFormatError

# ASCII digits only; \d would also accept other unicode digits
VERSION_RE = re.compile(r"([0-9]+)\.([0-9]+)\.([0-9]+)(?:\+([0-9]+))?")


class Bump(str, Enum):
    NONE = "none"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"


class Version(BaseModel):
    model_config = ConfigDict(frozen=True)

    major: NonNegativeInt = 0
    minor: NonNegativeInt = 0
    patch: NonNegativeInt = 0
    build: NonNegativeInt = 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}+{self.build}"


def parse_version(text: str) -> Version:
    # 'MAJOR.MINOR.PATCH' or 'MAJOR.MINOR.PATCH+BUILD'; missing build reads as 0
    m = VERSION_RE.fullmatch(text)
    if not m:
        raise VersionFormatError(f"malformed version {text!r}", text=text)
    major, minor, patch, build = m.groups()
    return Version(major=int(major), minor=int(minor), patch=int(patch), build=int(build or 0))


def bump(current: Version, decision: Bump) -> Version:
    """Derive the next version; build always advances by one."""
    build = current.build + 1
    if decision == Bump.MAJOR:
        return Version(major=current.major + 1, minor=0, patch=0, build=build)
    if decision == Bump.MINOR:
        return Version(major=current.major, minor=current.minor + 1, patch=0, build=build)
    if decision == Bump.PATCH:
        return Version(
            major=current.major, minor=current.minor, patch=current.patch + 1, build=build
        )
    raise ValueError(f"cannot bump with decision {decision!r}")
