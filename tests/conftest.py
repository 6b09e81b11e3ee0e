"""Shared fixtures for all tests."""

import os
import pytest

from gha_updater.errors import ResolutionError
from gha_updater.parser import parse_workflow
from gha_updater.resolver import ActionsUpdater


FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures/.github/workflows")

# Tag listings in ascending version order, as `git ls-remote --sort=v:refname` returns them
REMOTE_TAGS = {
    "actions/checkout": ["v3.0.0", "v3.6.0", "v4.0.0-rc.1", "v4.0.0", "v4.1.1"],
    "actions/setup-python": ["v4.0.0", "v4.7.1", "v5.0.0"],
    "github/codeql-action": ["v2.0.0", "v2.22.5", "v3.22.0"],
    "some-org/deploy-action": [],
}


class FakeTagLister:
    """RemoteTagLister returning canned tags and recording every call."""

    def __init__(self, tags=None, failures=None):
        self.tags = REMOTE_TAGS if tags is None else tags
        self.failures = failures or {}
        self.calls = []

    def list_tags(self, repository):
        self.calls.append(repository)
        if repository in self.failures:
            raise ResolutionError(repository, "git ls-remote exited with status 128", self.failures[repository])
        return list(self.tags.get(repository, []))


@pytest.fixture
def fixtures_dir():
    """Path to the fixtures workflow directory."""
    return FIXTURES_DIR


@pytest.fixture
def ci_workflow_path():
    """Path to the CI workflow fixture with outdated actions."""
    return os.path.join(FIXTURES_DIR, "ci.yml")


@pytest.fixture
def up_to_date_workflow_path():
    """Path to the workflow fixture whose actions are all current."""
    return os.path.join(FIXTURES_DIR, "up-to-date.yaml")


@pytest.fixture
def ci_workflow(ci_workflow_path):
    """Parsed CI workflow fixture."""
    return parse_workflow(ci_workflow_path)


@pytest.fixture
def lister():
    return FakeTagLister()


@pytest.fixture
def updater(lister):
    return ActionsUpdater(lister)
