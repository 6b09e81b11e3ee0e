"""
Update checks: decide, per action reference, whether a newer tag exists.

An ActionsUpdater owns the run's cache of latest tags, so every repository
is listed at most once no matter how many references or files point at it.
"""

import fnmatch
import logging
import time
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional

from gha_updater.errors import ResolutionError, WorkflowParseError
from gha_updater.parser import parse_workflow
from gha_updater.resolver.references import ActionReference
from gha_updater.resolver.tags import RemoteTagLister
from gha_updater.resolver.versions import is_newer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdateSuggestion:
    """A reference whose repository has a newer tag than the pinned one."""
    reference: str      # e.g. "actions/checkout@v3"
    latest: str         # e.g. "v4.1.1"
    repository: str = ""
    current: str = ""
    line_numbers: tuple[int, ...] = ()


@dataclass
class ScanResult:
    """Outcome of scanning one workflow file."""
    file_path: str
    suggestions: list[UpdateSuggestion] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ActionsUpdater:
    """Checks action references against the latest tags of their repositories."""

    def __init__(self, lister: RemoteTagLister, ignore: Iterable[str] = ()):
        self.lister = lister
        self.ignore = list(ignore)
        self.repos: dict[str, str] = {}
        self.lookups = 0

    def _is_ignored(self, repository: str) -> bool:
        return any(fnmatch.fnmatch(repository, pat) for pat in self.ignore)

    def latest_tag(self, repository: str) -> str:
        """Latest tag of a repository, "" if it has none. Cached for the updater's lifetime."""
        if repository in self.repos:
            logger.debug("%s: cache hit -> %r", repository, self.repos[repository])
            return self.repos[repository]

        logger.debug("%s: listing remote tags", repository)
        self.lookups += 1
        tags = self.lister.list_tags(repository)
        latest = tags[-1] if tags else ""
        self.repos[repository] = latest
        return latest

    def update(self, reference: str) -> Optional[str]:
        """
        Return the newer tag for `reference`, or None if there is nothing to suggest.

        References that aren't `owner/repo@tag` are skipped without error.

        Raises:
            ResolutionError: If the repository's tags can't be listed.
        """
        action = ActionReference.parse(reference)
        if action is None:
            return None
        if self._is_ignored(action.repository):
            logger.debug("Ignoring %s via config", action.repository)
            return None

        latest = self.latest_tag(action.repository)
        if latest and is_newer(latest, action.tag):
            return latest
        return None

    def check(self, reference: str) -> Optional[UpdateSuggestion]:
        latest = self.update(reference)
        if latest is None:
            return None
        action = ActionReference.parse(reference)
        return UpdateSuggestion(
            reference=reference,
            latest=latest,
            repository=action.repository,
            current=action.tag,
        )

    def scan(self, references: Iterable[str]) -> list[UpdateSuggestion]:
        """Check every reference, in sorted order, and return the suggestions."""
        suggestions = []
        for reference in sorted(set(references)):
            suggestion = self.check(reference)
            if suggestion is not None:
                suggestions.append(suggestion)
        return suggestions

    def scan_file(self, file_path: str) -> ScanResult:
        """
        Scan one workflow file.

        Read, parse and resolution errors stop this file and are returned in
        the result so the caller can carry on with other files. Suggestions
        found before a resolution error are kept in the result.
        """
        t0 = time.monotonic()
        try:
            workflow = parse_workflow(file_path)
        except (OSError, WorkflowParseError) as e:
            logger.info("Scan of %s failed: %s", file_path, e)
            return ScanResult(file_path=file_path, error=e)

        suggestions = []
        for reference in sorted(workflow.references()):
            try:
                suggestion = self.check(reference)
            except ResolutionError as e:
                logger.info("Scan of %s failed: %s", file_path, e)
                return ScanResult(file_path=file_path, suggestions=suggestions, error=e)
            if suggestion is not None:
                suggestions.append(
                    replace(suggestion, line_numbers=tuple(workflow.locations(reference)))
                )

        elapsed_ms = (time.monotonic() - t0) * 1000
        logger.info(
            "Completed: %d update(s) for %s in %.1fms",
            len(suggestions), file_path, elapsed_ms,
        )
        return ScanResult(file_path=file_path, suggestions=suggestions)
