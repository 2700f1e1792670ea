import re
from collections.abc import Callable

from .version import Bump

# ASCII-only case folding: 'ı' must not stand in for 'i'
BREAKING_RE = re.compile(r"BREAKING CHANGE", re.IGNORECASE | re.ASCII)
# type prefix anchored at the start of the subject, optional '(scope)'
FEAT_RE = re.compile(r"feat(?:\([^)\r\n]*\))?:", re.IGNORECASE | re.ASCII)
FIX_RE = re.compile(r"fix(?:\([^)\r\n]*\))?:", re.IGNORECASE | re.ASCII)


def _subject(message: str) -> str:
    lines = message.splitlines()
    return lines[0] if lines else ""


def is_breaking(message: str) -> bool:
    return BREAKING_RE.search(message) is not None


def is_feature(message: str) -> bool:
    return FEAT_RE.match(_subject(message)) is not None


def is_fix(message: str) -> bool:
    return FIX_RE.match(_subject(message)) is not None


# First match wins; a breaking-change marker overrides the type prefix.
RULES: tuple[tuple[Callable[[str], bool], Bump], ...] = (
    (is_breaking, Bump.MAJOR),
    (is_feature, Bump.MINOR),
    (is_fix, Bump.PATCH),
)


def classify(message: str) -> Bump:
    for predicate, decision in RULES:
        if predicate(message):
            return decision
    return Bump.NONE
