"""Semantic version parsing and precedence (semver 2.0.0)"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Literal

SEMVER_PATTERN = re.compile(
    r"^(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<prerelease>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)

BumpPart = Literal["major", "minor", "patch"]


def _compare_identifiers(left: tuple[str, ...], right: tuple[str, ...]) -> int:
    for a, b in zip(left, right):
        if a == b:
            continue
        a_num, b_num = a.isdigit(), b.isdigit()
        if a_num and b_num:
            return -1 if int(a) < int(b) else 1
        if a_num != b_num:
            # Numeric identifiers have lower precedence than alphanumeric ones
            return -1 if a_num else 1
        return -1 if a < b else 1
    if len(left) == len(right):
        return 0
    return -1 if len(left) < len(right) else 1


@total_ordering
@dataclass(frozen=True, eq=False)
class SemVer:
    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> "SemVer":
        match = SEMVER_PATTERN.match(str(text).strip())
        if not match:
            raise ValueError(f"'{text}' is not a valid semantic version (e.g. 1.0.0)")

        prerelease = match.group("prerelease")
        build = match.group("build")
        if prerelease:
            for ident in prerelease.split("."):
                if ident.isdigit() and len(ident) > 1 and ident.startswith("0"):
                    raise ValueError(f"'{text}': numeric pre-release identifiers must not have leading zeros")

        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            prerelease=tuple(prerelease.split(".")) if prerelease else (),
            build=tuple(build.split(".")) if build else (),
        )

    @staticmethod
    def is_valid(text: str) -> bool:
        try:
            SemVer.parse(text)
        except ValueError:
            return False
        return True

    def compare(self, other: "SemVer") -> int:
        """Return -1, 0 or 1 by semver precedence; build metadata is ignored"""
        left = (self.major, self.minor, self.patch)
        right = (other.major, other.minor, other.patch)
        if left != right:
            return -1 if left < right else 1

        # A pre-release version has lower precedence than the release
        if self.prerelease and not other.prerelease:
            return -1
        if other.prerelease and not self.prerelease:
            return 1
        return _compare_identifiers(self.prerelease, other.prerelease)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: "SemVer") -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self.compare(other) < 0

    def __hash__(self) -> int:
        return hash((self.major, self.minor, self.patch, self.prerelease))

    def bump(self, part: BumpPart) -> "SemVer":
        """Next version for the given part; pre-release and build are dropped"""
        if part == "major":
            return SemVer(self.major + 1, 0, 0)
        if part == "minor":
            return SemVer(self.major, self.minor + 1, 0)
        if part == "patch":
            # 1.2.3-rc.1 bumps to its release 1.2.3
            if self.prerelease:
                return SemVer(self.major, self.minor, self.patch)
            return SemVer(self.major, self.minor, self.patch + 1)
        raise ValueError(f"Unknown version part: {part}. Use 'major', 'minor' or 'patch'.")

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text
