"""
Parser for GitHub Actions workflow files.

Only the parts of a workflow that matter for version checks are decoded:
the `jobs` mapping, each job's `steps` sequence and each step's `uses`
reference. Everything else in the document is ignored.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from gha_updater.errors import WorkflowParseError

logger = logging.getLogger(__name__)

LINE_KEY = "__line__"


class _LineLoader(yaml.SafeLoader):
    """PyYAML loader that stores the start line number on every mapping node."""


def _construct_mapping(loader: _LineLoader, node: yaml.MappingNode) -> dict[Any, Any]:
    mapping: dict[Any, Any] = loader.construct_mapping(node, deep=True)
    mapping[LINE_KEY] = node.start_mark.line + 1  # YAML lines are 0-indexed
    return mapping


_LineLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass
class Step:
    """A single step within a job."""
    uses: Optional[str]
    line_number: Optional[int] = None


@dataclass
class Job:
    """A single job within a workflow."""
    job_id: str
    steps: list[Step]
    line_number: Optional[int] = None


@dataclass
class Workflow:
    """A parsed GitHub Actions workflow."""
    file_path: str
    jobs: list[Job] = field(default_factory=list)

    def references(self) -> set[str]:
        """Unique non-empty `uses` values across all jobs and steps."""
        return {
            step.uses
            for job in self.jobs
            for step in job.steps
            if step.uses
        }

    def locations(self, reference: str) -> list[int]:
        """Sorted line numbers of the steps that use `reference`."""
        return sorted(
            step.line_number
            for job in self.jobs
            for step in job.steps
            if step.uses == reference and step.line_number is not None
        )


def _parse_step(step_raw: Optional[dict[str, Any]], source: str) -> Step:
    if step_raw is None:
        return Step(uses=None)
    if not isinstance(step_raw, dict):
        raise WorkflowParseError(
            f"step must be a mapping, got {type(step_raw).__name__}", source,
        )
    uses = step_raw.get("uses")
    if isinstance(uses, (dict, list)):
        raise WorkflowParseError(
            f"'uses' must be a scalar, got {type(uses).__name__}", source,
        )
    return Step(uses=_scalar_text(uses) or None, line_number=step_raw.get(LINE_KEY))


def _scalar_text(value: Any) -> Optional[str]:
    """Text of a YAML scalar: `uses: 123` is "123", `uses: true` is "true"."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _parse_job(job_id: str, job_raw: Optional[dict[str, Any]], source: str) -> Job:
    if job_raw is None:
        return Job(job_id=job_id, steps=[])
    if not isinstance(job_raw, dict):
        raise WorkflowParseError(
            f"job '{job_id}' must be a mapping, got {type(job_raw).__name__}", source,
        )
    steps_raw = job_raw.get("steps") or []
    if not isinstance(steps_raw, list):
        raise WorkflowParseError(f"steps of job '{job_id}' must be a sequence", source)
    logger.debug("Parsing job '%s' with %d step(s)", job_id, len(steps_raw))
    return Job(
        job_id=job_id,
        steps=[_parse_step(s, source) for s in steps_raw],
        line_number=job_raw.get(LINE_KEY),
    )


def load_workflow(data: Union[bytes, str], source: str = "<string>") -> Workflow:
    """
    Decode workflow YAML into a Workflow.

    Args:
        data: Raw bytes or text of the YAML document.
        source: Name used in error messages and as Workflow.file_path.

    Raises:
        WorkflowParseError: If the data isn't YAML or isn't shaped like a workflow.
    """
    try:
        raw = yaml.load(data, Loader=_LineLoader)  # noqa: S506  # _LineLoader is safe
    except yaml.YAMLError as e:
        raise WorkflowParseError(f"invalid YAML: {e}", source) from e

    if raw is None:
        logger.debug("Empty workflow document: %s", source)
        return Workflow(file_path=source)
    if not isinstance(raw, dict):
        raise WorkflowParseError("workflow is not a YAML mapping", source)

    jobs_raw = raw.get("jobs") or {}
    if not isinstance(jobs_raw, dict):
        raise WorkflowParseError("'jobs' must be a mapping", source)

    jobs = [
        _parse_job(str(job_id), job_data, source)
        for job_id, job_data in jobs_raw.items()
        if job_id != LINE_KEY
    ]
    logger.debug("Parsed '%s': %d job(s)", source, len(jobs))
    return Workflow(file_path=source, jobs=jobs)


def extract_references(data: Union[bytes, str], source: str = "<string>") -> set[str]:
    """Return the unique action references used by the steps of a workflow document."""
    return load_workflow(data, source).references()


def parse_workflow(file_path: str) -> Workflow:
    """
    Parse a single GitHub Actions workflow YAML file.

    Raises:
        OSError: If the file can't be read (FileNotFoundError, IsADirectoryError, ...).
        WorkflowParseError: If the file isn't a valid workflow.
    """
    path = Path(file_path)
    logger.info("Parsing workflow: %s", file_path)
    data = path.read_bytes()
    return load_workflow(data, source=str(path))


def find_workflow_files(dir_path: str) -> list[str]:
    """
    List the workflow files in a directory (typically .github/workflows/).

    Returns:
        Sorted paths of the .yml/.yaml files directly inside `dir_path`.
    """
    path = Path(dir_path)
    if not path.is_dir():
        raise NotADirectoryError(f"Not a directory: {dir_path}")

    yaml_files = sorted(
        str(f) for f in path.iterdir()
        if f.is_file() and f.suffix in (".yml", ".yaml")
    )
    logger.debug("Found %d YAML file(s) in %s", len(yaml_files), dir_path)
    return yaml_files
