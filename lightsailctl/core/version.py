"""
Semantic versions as used by lightsailctl releases.

Versions follow semver 2.0 with an optional leading "v". Shorthands such
as "v1" and "v1.2" are accepted and stand for "v1.0.0" and "v1.2.0".
Build metadata is ignored for ordering. An invalid version orders before
every valid one.
"""

from __future__ import annotations

__all__ = ["Semver", "VERSION", "__version__"]

import re
from functools import total_ordering

__version__ = "1.0.7"

_IDENT = r"[0-9A-Za-z-]+"
_SEMVER_RE = re.compile(
    r"^v(?P<major>0|[1-9]\d*)"
    r"(?:\.(?P<minor>0|[1-9]\d*)"
    r"(?:\.(?P<patch>0|[1-9]\d*)"
    rf"(?:-(?P<pre>{_IDENT}(?:\.{_IDENT})*))?"
    rf"(?:\+(?P<build>{_IDENT}(?:\.{_IDENT})*))?"
    r")?)?$"
)


@total_ordering
class Semver:
    def __init__(self, value: str):
        self.value = value

    def _prefixed(self) -> str:
        if self.value == "" or self.value.startswith("v"):
            return self.value
        return "v" + self.value

    def _parse(self) -> tuple[int, int, int, tuple[str, ...]] | None:
        match = _SEMVER_RE.match(self._prefixed())
        if match is None:
            return None
        pre = match.group("pre")
        prerelease: tuple[str, ...] = ()
        if pre:
            prerelease = tuple(pre.split("."))
            for ident in prerelease:
                if ident.isdigit() and len(ident) > 1 and ident[0] == "0":
                    return None
        return (
            int(match.group("major")),
            int(match.group("minor") or 0),
            int(match.group("patch") or 0),
            prerelease,
        )

    def is_valid(self) -> bool:
        return self._parse() is not None

    def canonical(self) -> str:
        parsed = self._parse()
        if parsed is None:
            return ""
        major, minor, patch, prerelease = parsed
        text = f"v{major}.{minor}.{patch}"
        if prerelease:
            text += "-" + ".".join(prerelease)
        return text

    def _key(self) -> tuple:
        parsed = self._parse()
        if parsed is None:
            return (0,)
        major, minor, patch, prerelease = parsed
        if not prerelease:
            # A release orders after all of its pre-releases.
            pre_key: tuple = (1,)
        else:
            pre_key = (
                0,
                tuple(
                    (0, int(ident), "") if ident.isdigit() else (1, 0, ident)
                    for ident in prerelease
                ),
            )
        return (1, major, minor, patch, pre_key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Semver):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: Semver) -> bool:
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        return self.canonical()

    def __repr__(self) -> str:
        return f"Semver({self.value!r})"


VERSION = Semver(__version__)
