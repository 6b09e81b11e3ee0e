"""
JSON reporter: outputs update suggestions as structured JSON for programmatic use.
"""

import json
import logging

from gha_updater.resolver.updater import ScanResult

logger = logging.getLogger(__name__)


def report_json(results: list[ScanResult]) -> str:
    """
    Format scan results as a JSON string.

    Args:
        results: One ScanResult per scanned workflow file.

    Returns:
        A JSON string with every file, its suggestions and its error, if any.
    """
    data = {
        "total": sum(len(r.suggestions) for r in results),
        "files": [
            {
                "file_path": r.file_path,
                "error": None if r.error is None else str(r.error),
                "updates": [
                    {
                        "reference": s.reference,
                        "repository": s.repository,
                        "current": s.current,
                        "latest": s.latest,
                        "line_numbers": list(s.line_numbers),
                    }
                    for s in r.suggestions
                ],
            }
            for r in results
        ],
    }
    output = json.dumps(data, indent=2)
    logger.info("JSON report: %d file(s), %d bytes", len(results), len(output))
    return output
