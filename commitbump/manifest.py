"""Locate and rewrite the version declaration of a manifest such as pubspec.yaml.

The manifest is treated as opaque text: only the value after ``<key>:`` on the
single top-level declaration line is ever replaced. Comments, blank lines,
quoting, key order and line endings are left exactly as they were.
"""
import re
from typing import NamedTuple

from .errors import AmbiguousManifestError, ManifestParseError, VersionFormatError
from .version import Bump, Version, bump, parse_version

DEFAULT_KEY = "version"

# value, optionally quoted, followed by an optional ' # comment'
VALUE_RE = re.compile(r"[ \t]*(?P<quote>[\"']?)(?P<value>.*?)(?P=quote)[ \t]*(?:[ \t]#.*)?")


class Declaration(NamedTuple):
    lineno: int
    line: str
    value: str
    start: int  # offsets of the value inside the whole manifest
    end: int


def _key_re(key: str) -> re.Pattern[str]:
    # top-level only: indented keys (e.g. under dependencies) never match;
    # a leading byte-order mark is kept as part of the first line
    return re.compile(
        rf"(?:^|\A\ufeff){re.escape(key)}[ \t]*:(?P<rest>[^\r\n]*)", re.MULTILINE
    )


def locate_version(manifest: str, key: str = DEFAULT_KEY) -> Declaration:
    matches = list(_key_re(key).finditer(manifest))
    if not matches:
        raise ManifestParseError(f"no '{key}:' declaration found in manifest")
    if len(matches) > 1:
        linenos = [manifest.count("\n", 0, m.start()) + 1 for m in matches]
        lines = "; ".join(f"{n}: {m.group(0)!r}" for n, m in zip(linenos, matches))
        raise AmbiguousManifestError(
            f"{len(matches)} '{key}:' declarations found (lines {lines})",
            text="\n".join(m.group(0) for m in matches),
        )
    m = matches[0]
    vm = VALUE_RE.fullmatch(m.group("rest"))
    offset = m.start("rest")
    return Declaration(
        lineno=manifest.count("\n", 0, m.start()) + 1,
        line=m.group(0),
        value=vm.group("value"),
        start=offset + vm.start("value"),
        end=offset + vm.end("value"),
    )


def _parse(decl: Declaration) -> Version:
    try:
        return parse_version(decl.value)
    except VersionFormatError as e:
        raise VersionFormatError(f"line {decl.lineno}: {e}", text=decl.line) from e


def read_version(manifest: str, key: str = DEFAULT_KEY) -> Version:
    return _parse(locate_version(manifest, key))


def render(manifest: str, old: Version, new: Version, key: str = DEFAULT_KEY) -> str:
    """Return ``manifest`` with the declared ``old`` version replaced by ``new``.

    Everything is validated before any text is produced, so a failure never
    results in a partially rewritten document.
    """
    decl = locate_version(manifest, key)
    current = _parse(decl)
    if current != old:
        raise ManifestParseError(
            f"line {decl.lineno} declares {decl.value!r}, expected {old}", text=decl.line
        )
    if new == old:
        return manifest
    return manifest[: decl.start] + str(new) + manifest[decl.end :]


def apply_bump(
    manifest: str, decision: Bump, key: str = DEFAULT_KEY
) -> tuple[Version, Version, str]:
    """Read the declared version, bump it and return ``(old, new, rewritten manifest)``."""
    old = read_version(manifest, key)
    new = bump(old, decision)
    return old, new, render(manifest, old, new, key)
