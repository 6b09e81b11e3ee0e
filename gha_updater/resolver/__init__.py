from .references import ActionReference
from .tags import GitTagLister, RemoteTagLister, parse_tag_listing
from .updater import ActionsUpdater, ScanResult, UpdateSuggestion
from .versions import compare_versions, is_newer

__all__ = [
    "ActionReference",
    "ActionsUpdater",
    "GitTagLister",
    "RemoteTagLister",
    "ScanResult",
    "UpdateSuggestion",
    "compare_versions",
    "is_newer",
    "parse_tag_listing",
]
