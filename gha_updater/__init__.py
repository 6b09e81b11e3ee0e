"""
gha-updater: report GitHub Actions pinned to an outdated tag.
"""

__version__ = "0.1.0"
