"""
Semantic version ordering for action tags.

Tags are compared as SemVer 2.0.0 versions with two relaxations common in
action tags: a leading "v" is optional and the minor/patch components may
be left out ("v4" is v4.0.0). Tags that still don't parse, such as branch
names or commit SHAs, sort below every valid version and equal to each
other, so comparing two tags never raises.
"""

import logging
from typing import Optional

import semver

logger = logging.getLogger(__name__)


def parse_version(tag: str) -> Optional[semver.Version]:
    """Parse a tag like "v1.2.3", "1.2" or "v2.0.0-rc.1"; None if it isn't a version."""
    text = tag[1:] if tag.startswith("v") else tag
    try:
        return semver.Version.parse(text, optional_minor_and_patch=True)
    except (ValueError, TypeError):
        return None


def compare_versions(left: str, right: str) -> int:
    """
    Compare two tags by semantic version.

    Returns:
        -1 if left < right
         0 if left == right (or neither is a version)
         1 if left > right
    """
    left_ver = parse_version(left)
    right_ver = parse_version(right)

    if left_ver is None or right_ver is None:
        if left_ver is None and right_ver is None:
            return 0
        logger.debug(
            "Not a semantic version: %s",
            left if left_ver is None else right,
        )
        return -1 if left_ver is None else 1

    return left_ver.compare(right_ver)


def is_newer(candidate: str, current: str) -> bool:
    """True if `candidate` is strictly greater than `current`."""
    return compare_versions(candidate, current) > 0
