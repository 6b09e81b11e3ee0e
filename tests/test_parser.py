"""Tests for the workflow parser."""

import pytest

from gha_updater.errors import WorkflowParseError
from gha_updater.parser import (
    extract_references,
    find_workflow_files,
    load_workflow,
    parse_workflow,
)


# ---------------------------------------------------------------------------
# extract_references
# ---------------------------------------------------------------------------

class TestExtractReferences:
    def test_collects_uses_across_jobs(self):
        data = (
            b"jobs:\n"
            b"  build:\n"
            b"    steps:\n"
            b"      - uses: actions/checkout@v3\n"
            b"      - run: make\n"
            b"  test:\n"
            b"    steps:\n"
            b"      - uses: actions/checkout@v4\n"
        )
        assert extract_references(data) == {"actions/checkout@v3", "actions/checkout@v4"}

    def test_duplicates_collapse(self):
        data = (
            "jobs:\n"
            "  a:\n"
            "    steps:\n"
            "      - uses: actions/checkout@v4\n"
            "  b:\n"
            "    steps:\n"
            "      - uses: actions/checkout@v4\n"
            "      - uses: actions/checkout@v4\n"
        )
        assert extract_references(data) == {"actions/checkout@v4"}

    def test_ignores_other_fields(self):
        data = (
            "name: CI\n"
            "on: push\n"
            "env:\n"
            "  uses: not-a-step@v1\n"
            "jobs:\n"
            "  build:\n"
            "    runs-on: ubuntu-latest\n"
            "    uses: org/repo/.github/workflows/reusable.yml@v1\n"
            "    steps:\n"
            "      - name: Checkout\n"
            "        uses: actions/checkout@v4\n"
            "        with:\n"
            "          fetch-depth: 0\n"
        )
        assert extract_references(data) == {"actions/checkout@v4"}

    def test_empty_uses_is_skipped(self):
        data = "jobs:\n  build:\n    steps:\n      - uses: ''\n      - uses:\n"
        assert extract_references(data) == set()

    def test_empty_document(self):
        assert extract_references(b"") == set()

    def test_null_jobs_and_steps(self):
        data = "jobs:\n  build:\n  test:\n    steps:\n"
        assert extract_references(data) == set()

    def test_no_jobs(self):
        assert extract_references("name: nothing\n") == set()

    def test_number_uses_is_text(self):
        data = "jobs:\n  build:\n    steps:\n      - uses: 123\n"
        assert extract_references(data) == {"123"}

    def test_boolean_uses_is_text(self):
        data = "jobs:\n  build:\n    steps:\n      - uses: true\n"
        assert extract_references(data) == {"true"}


# ---------------------------------------------------------------------------
# Malformed documents
# ---------------------------------------------------------------------------

class TestMalformedDocuments:
    def test_invalid_yaml(self):
        with pytest.raises(WorkflowParseError):
            extract_references(b"jobs: [unclosed\n")

    def test_not_a_mapping(self):
        with pytest.raises(WorkflowParseError):
            extract_references("just a string, not a mapping")

    def test_jobs_not_a_mapping(self):
        with pytest.raises(WorkflowParseError):
            extract_references("jobs:\n  - build\n")

    def test_steps_not_a_sequence(self):
        with pytest.raises(WorkflowParseError):
            extract_references("jobs:\n  build:\n    steps: checkout\n")

    def test_step_not_a_mapping(self):
        with pytest.raises(WorkflowParseError):
            extract_references("jobs:\n  build:\n    steps:\n      - actions/checkout@v4\n")

    def test_uses_sequence(self):
        with pytest.raises(WorkflowParseError):
            extract_references("jobs:\n  build:\n    steps:\n      - uses: [a, b]\n")

    def test_uses_mapping(self):
        with pytest.raises(WorkflowParseError, match="scalar"):
            extract_references("jobs:\n  build:\n    steps:\n      - uses: {ref: a}\n")

    def test_parse_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            extract_references("jobs: 3\n")

    def test_error_names_source(self):
        with pytest.raises(WorkflowParseError, match="ci.yml"):
            load_workflow("jobs: 3\n", source="ci.yml")


# ---------------------------------------------------------------------------
# parse_workflow (integration with fixture files)
# ---------------------------------------------------------------------------

class TestParseWorkflow:
    def test_jobs(self, ci_workflow):
        assert [j.job_id for j in ci_workflow.jobs] == ["build", "analyze"]

    def test_references(self, ci_workflow):
        assert ci_workflow.references() == {
            "actions/checkout@v3",
            "actions/setup-python@v4",
            "./.github/actions/local-lint",
            "actions/checkout@v4",
            "github/codeql-action/init@v2",
            "docker://alpine:3.8",
            "some-org/deploy-action@main",
        }

    def test_run_steps_have_no_uses(self, ci_workflow):
        build = ci_workflow.jobs[0]
        assert build.steps[2].uses is None

    def test_step_line_numbers(self, ci_workflow):
        build = ci_workflow.jobs[0]
        assert build.steps[0].line_number == 11
        # A step's line is where its mapping starts, here the `name:` key
        assert build.steps[1].line_number == 12

    def test_job_has_line_number(self, ci_workflow):
        assert ci_workflow.jobs[0].line_number is not None
        assert ci_workflow.jobs[0].line_number >= 1

    def test_locations(self, ci_workflow):
        assert ci_workflow.locations("actions/checkout@v4") == [22]
        assert ci_workflow.locations("unknown/action@v1") == []

    def test_locations_of_repeated_reference(self, up_to_date_workflow_path):
        workflow = parse_workflow(up_to_date_workflow_path)
        assert workflow.locations("actions/checkout@v4.1.1") == [8, 9]

    def test_file_path(self, ci_workflow, ci_workflow_path):
        assert ci_workflow.file_path == ci_workflow_path

    def test_file_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            parse_workflow(str(tmp_path / "nonexistent.yml"))

    def test_directory_is_an_os_error(self, tmp_path):
        with pytest.raises(OSError):
            parse_workflow(str(tmp_path))

    def test_invalid_yaml(self, tmp_path):
        bad_file = tmp_path / "bad.yml"
        bad_file.write_text("just a string, not a mapping")
        with pytest.raises(WorkflowParseError):
            parse_workflow(str(bad_file))


# ---------------------------------------------------------------------------
# find_workflow_files
# ---------------------------------------------------------------------------

class TestFindWorkflowFiles:
    def test_finds_all_workflows(self, fixtures_dir):
        files = find_workflow_files(fixtures_dir)
        assert [f.rsplit("/", 1)[-1] for f in files] == ["ci.yml", "up-to-date.yaml"]

    def test_skips_other_files(self, tmp_path):
        (tmp_path / "ci.yml").write_text("jobs: {}\n")
        (tmp_path / "README.md").write_text("docs\n")
        (tmp_path / "nested.yml").mkdir()
        assert find_workflow_files(str(tmp_path)) == [str(tmp_path / "ci.yml")]

    def test_not_a_directory(self, tmp_path):
        fake = tmp_path / "not-a-dir"
        fake.write_text("hello")
        with pytest.raises(NotADirectoryError):
            find_workflow_files(str(fake))

    def test_empty_directory(self, tmp_path):
        assert find_workflow_files(str(tmp_path)) == []
