"""
Remote tag listing through the git client.

`git ls-remote --tags --sort=v:refname` returns the tags of a repository in
ascending version order without cloning it. With `versionsort.suffix=-`,
pre-release tags such as v2.0.0-rc.1 sort before the v2.0.0 release.
"""

import logging
import os
import shutil
import subprocess
from typing import Optional, Protocol

from gha_updater.errors import ResolutionError

logger = logging.getLogger(__name__)

TAG_REF_PREFIX = "refs/tags/"
PEELED_SUFFIX = "^{}"
DEFAULT_HOST = "github.com"
DEFAULT_TIMEOUT = 60.0


class RemoteTagLister(Protocol):
    """Anything that can list the tags of a repository, oldest version first."""

    def list_tags(self, repository: str) -> list[str]:
        ...


def parse_tag_listing(output: str) -> list[str]:
    """
    Extract tag names from `git ls-remote` output.

    Each line is "<sha><whitespace><ref>". Only refs under refs/tags/ are
    kept; peeled entries of annotated tags ("v1.0.0^{}") repeat the tag
    just before them and are dropped.
    """
    tags = []
    for line in output.replace("\r", "").split("\n"):
        fields = line.split()
        if len(fields) < 2 or not fields[1].startswith(TAG_REF_PREFIX):
            continue
        tag = fields[1][len(TAG_REF_PREFIX):]
        if not tag or tag.endswith(PEELED_SUFFIX):
            continue
        tags.append(tag)
    return tags


class GitTagLister:
    """Lists tags of `https://<host>/<owner>/<repo>.git` with `git ls-remote`."""

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        git: Optional[str] = None,
    ):
        self.host = host
        self.timeout = timeout
        self.git = git

    def repository_url(self, repository: str) -> str:
        return f"https://{self.host}/{repository}.git"

    def _find_git(self, repository: str) -> str:
        git_path = self.git or shutil.which("git")
        if not git_path:
            raise ResolutionError(repository, "git executable not found on PATH")
        return git_path

    def list_tags(self, repository: str) -> list[str]:
        """
        List the tags of a repository in ascending version order.

        Raises:
            ResolutionError: If git is missing, fails, times out or prints
                output that isn't UTF-8.
        """
        cmd = [
            self._find_git(repository),
            "-c", "versionsort.suffix=-",
            "ls-remote", "--tags", "--sort=v:refname",
            self.repository_url(repository),
        ]
        # Never wait for credentials on a private or missing repository
        env = dict(os.environ, GIT_TERMINAL_PROMPT="0")

        logger.debug("Running: %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                timeout=self.timeout,
                env=env,
            )
        except subprocess.TimeoutExpired as e:
            raise ResolutionError(
                repository,
                f"git ls-remote timed out after {self.timeout}s",
                _decode_stderr(e.stderr),
            ) from e
        except OSError as e:
            raise ResolutionError(repository, f"cannot run git: {e}") from e

        stderr = _decode_stderr(result.stderr)
        if result.returncode != 0:
            logger.debug("git ls-remote failed for %s: %s", repository, stderr.strip())
            raise ResolutionError(
                repository,
                f"git ls-remote exited with status {result.returncode}",
                stderr,
            )

        try:
            output = result.stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ResolutionError(repository, "unreadable git ls-remote output", stderr) from e

        tags = parse_tag_listing(output)
        logger.debug("%s: %d tag(s)", repository, len(tags))
        return tags


def _decode_stderr(stderr: Optional[bytes]) -> str:
    if not stderr:
        return ""
    return stderr.decode("utf-8", errors="replace")
