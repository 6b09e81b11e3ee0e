"""
Action references: `owner/repo[/path]@tag` strings found in `uses:` fields.
"""

import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

# Prefixes of references that don't point at a repository with tags
_NON_REPOSITORY_PREFIXES = ("./", "docker://")


@dataclass(frozen=True)
class ActionReference:
    """A `uses:` reference split into repository identity and pinned tag."""
    raw: str           # e.g. "github/codeql-action/init@v2"
    repository: str    # e.g. "github/codeql-action"
    tag: str           # e.g. "v2", a branch name, or a SHA

    @classmethod
    def parse(cls, reference: str) -> Optional["ActionReference"]:
        """
        Parse a reference string, or return None if it can't be resolved.

        The string is split on the first '@'. Only the first two path
        segments (owner and repository name) are kept, since tags belong
        to the repository and not to a subdirectory of it.
        """
        if reference.startswith(_NON_REPOSITORY_PREFIXES):
            logger.debug("Skipping local/docker action: %s", reference)
            return None

        identifier, sep, tag = reference.partition("@")
        if not sep or not identifier or not tag:
            logger.debug("Skipping reference without a pinned tag: %s", reference)
            return None

        repository = "/".join(identifier.split("/")[:2])
        return cls(raw=reference, repository=repository, tag=tag)
