"""
Exceptions raised while scanning workflow files for action updates.

Reading a workflow file that does not exist or is unreadable raises the
built-in OSError family; everything else derives from UpdaterError.
"""

from typing import Optional


class UpdaterError(Exception):
    """Base class for gha-updater errors."""


class WorkflowParseError(UpdaterError, ValueError):
    """The workflow is not valid YAML or not shaped like a workflow."""

    def __init__(self, message: str, source: str = "<string>"):
        super().__init__(f"{source}: {message}")
        self.source = source


class ResolutionError(UpdaterError, RuntimeError):
    """Listing the remote tags of a repository failed."""

    def __init__(self, repository: str, message: str, stderr: Optional[str] = None):
        self.repository = repository
        self.stderr = (stderr or "").strip()
        text = f"cannot list tags for {repository}: {message}"
        if self.stderr:
            text = f"{text}\n{self.stderr}"
        super().__init__(text)
