"""
Console reporter: prints the update suggestions of one workflow file.

    File: .github/workflows/ci.yml
    - actions/checkout@v3 -> v4.1.1
    - actions/setup-python@v4 -> v5.0.0
"""

from gha_updater.resolver.updater import ScanResult


def format_error(error: Exception) -> str:
    """One-line (or, with git diagnostics, multi-line) error message for the console."""
    if isinstance(error, OSError) and error.strerror:
        return f"ERROR: cannot read {error.filename}: {error.strerror}"
    return f"ERROR: {error}"


def report_console(result: ScanResult) -> str:
    """
    Format one file's scan result as console text.

    Args:
        result: The ScanResult of a single workflow file.

    Returns:
        The formatted report string, without a trailing newline.
    """
    lines = [f"File: {result.file_path}"]

    for s in result.suggestions:
        lines.append(f"- {s.reference} -> {s.latest}")

    # Suggestions found before a failure stay above the error
    if result.error is not None:
        lines.append(format_error(result.error))

    return "\n".join(lines)
