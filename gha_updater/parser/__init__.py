from .workflow_parser import (
    Job,
    Step,
    Workflow,
    extract_references,
    find_workflow_files,
    load_workflow,
    parse_workflow,
)

__all__ = [
    "Job",
    "Step",
    "Workflow",
    "extract_references",
    "find_workflow_files",
    "load_workflow",
    "parse_workflow",
]
