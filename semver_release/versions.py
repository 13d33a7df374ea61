"""Version label parsing, prefixing and bumping utilities.

A label is a ``[v]MAJOR.MINOR.PATCH[-PRERELEASE]`` string where the
pre-release part is either a run of digits or ``identifier.digits``.
Whether the leading ``v`` is present depends on the active prefix flag,
never on the label itself, so comparisons always go through semver.Version
on the unprefixed form.
"""

from __future__ import annotations

import re
from functools import cmp_to_key

import semver

from .errors import InvalidBumpTypeError, InvalidLabelError

FIRST_LABEL = "0.0.0"

_CORE = r"(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
# Numeric identifiers carry no leading zeros
_NUMERIC = r"(?:0|[1-9]\d*)"
_IDENTIFIER = rf"(?:{_NUMERIC}|[0-9A-Za-z-]*[A-Za-z-][0-9A-Za-z-]*)"
_PRERELEASE = rf"(?:-((?:{_IDENTIFIER}\.)?{_NUMERIC}))?"

VALID_SEMVER_RE = re.compile(rf"^v?{_CORE}{_PRERELEASE}$")
PREFIXED_SEMVER_RE = re.compile(rf"^v{_CORE}{_PRERELEASE}$")
UNPREFIXED_SEMVER_RE = re.compile(rf"^{_CORE}{_PRERELEASE}$")

BUMP_TYPES = (
    "major",
    "minor",
    "patch",
    "premajor",
    "preminor",
    "prepatch",
    "prerelease",
)


def is_valid(label: str | None) -> bool:
    """Return True when label matches the semver label pattern."""
    return bool(label) and VALID_SEMVER_RE.match(label) is not None


def normalize(label: str, prefixed: bool) -> str:
    """Add or strip the leading ``v`` according to the prefix flag.

    Examples:
        normalize("1.2.3", True) → "v1.2.3"
        normalize("v1.2.3", True) → "v1.2.3"
        normalize("v1.2.3", False) → "1.2.3"

    Raises:
        InvalidLabelError: If label is not a semver label.
    """
    if not is_valid(label):
        raise InvalidLabelError(label)
    if prefixed:
        return label if label.startswith("v") else f"v{label}"
    return label.removeprefix("v")


def parse_version(label: str) -> semver.Version:
    """Parse a (possibly prefixed) label into a semver.Version object."""
    if not is_valid(label):
        raise InvalidLabelError(label)
    try:
        return semver.Version.parse(label.removeprefix("v"))
    except ValueError as err:
        raise InvalidLabelError(label) from err


def _prerelease_start(identifier: str | None) -> str:
    return f"{identifier}.0" if identifier else "0"


def _next_prerelease(current: str, identifier: str | None) -> str:
    """Increment the trailing number of a pre-release, switching identifier if asked.

    Examples:
        ("0", None) → "1"
        ("beta.0", "beta") → "beta.1"
        ("beta.3", "rc") → "rc.0"
    """
    head, _, number = current.rpartition(".")
    if identifier and head != identifier:
        return _prerelease_start(identifier)
    if number.isdigit():
        bumped = str(int(number) + 1)
        return f"{head}.{bumped}" if head else bumped
    return f"{current}.0"


def increment(label: str, bump_type: str, identifier: str | None = None) -> str:
    """Increment a label by bump type, returning it without prefix.

    A release bump on a pre-release label only drops the pre-release when
    it already sits on the target version (1.3.0-0 → minor → 1.3.0).
    The "pre" bump types start a pre-release series, using identifier
    when given (1.2.3 → premajor "beta" → 2.0.0-beta.0).

    Raises:
        InvalidLabelError: If label is not a semver label.
        InvalidBumpTypeError: If bump_type is not one of BUMP_TYPES.
    """
    version = parse_version(label)
    if bump_type not in BUMP_TYPES:
        raise InvalidBumpTypeError(bump_type)

    if bump_type in ("major", "minor", "patch"):
        if version.prerelease and (
            bump_type == "patch"
            or (bump_type == "minor" and version.patch == 0)
            or (bump_type == "major" and version.minor == version.patch == 0)
        ):
            return str(version.replace(prerelease=None, build=None))
        return str(getattr(version, f"bump_{bump_type}")())

    if bump_type == "prerelease":
        if version.prerelease:
            return str(
                version.replace(
                    prerelease=_next_prerelease(version.prerelease, identifier),
                    build=None,
                )
            )
        bumped = version.bump_patch()
        return str(bumped.replace(prerelease=_prerelease_start(identifier)))

    # premajor, preminor, prepatch
    bumped = getattr(version, f"bump_{bump_type[3:]}")()
    return str(bumped.replace(prerelease=_prerelease_start(identifier)))


def compare_descending(a: str, b: str) -> int:
    """Reverse semver comparator: -1 when a sorts before b (a is newer)."""
    return -parse_version(a).compare(parse_version(b))


def sort_descending(labels: list[str]) -> list[str]:
    """Sort labels newest first by semver precedence."""
    return sorted(labels, key=cmp_to_key(compare_descending))


def latest(labels: list[str]) -> str | None:
    """Return the newest label, or None for an empty list."""
    ordered = sort_descending(labels)
    return ordered[0] if ordered else None


def same_version(a: str, b: str) -> bool:
    """True when two labels differ at most by their prefix."""
    return parse_version(a) == parse_version(b)
