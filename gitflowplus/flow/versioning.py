"""Guess the name of the next release or hotfix from the latest tag."""

import re

from gitflowplus.constants import FALLBACK_VERSION, Bump

_VERSION_RE = re.compile(r"^(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)$")


def guess_new_version(latest_tag: str | None, tag_prefix: str, bump: Bump | str) -> str:
    """Suggest the next version, without the tag prefix.

    A release bumps MINOR and zeroes PATCH, a hotfix bumps PATCH. Anything that
    is not ``MAJOR.MINOR.PATCH`` once the prefix is stripped, including no tag
    at all, yields ``"0.0.0"``.

    >>> guess_new_version("v1.2.3", "v", "release")
    '1.3.0'
    >>> guess_new_version("v1.2.3", "v", "hotfix")
    '1.2.4'
    """
    bump = Bump(bump)
    if not latest_tag:
        return FALLBACK_VERSION

    match = _VERSION_RE.match(latest_tag.removeprefix(tag_prefix))
    if not match:
        return FALLBACK_VERSION

    major, minor, patch = (int(match.group(g)) for g in ("major", "minor", "patch"))
    if bump is Bump.RELEASE:
        return f"{major}.{minor + 1}.0"
    return f"{major}.{minor}.{patch + 1}"
