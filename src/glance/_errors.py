"""Glance error hierarchy.

All glance-specific errors inherit from GlanceError for easy catching.
"""


class GlanceError(Exception):
    """Base error for all glance operations."""


class ConfigError(GlanceError):
    """Invalid or conflicting configuration."""


class SourceError(GlanceError):
    """The Markdown source could not be read or rendered."""


class WatchError(GlanceError):
    """No change-detection strategy could observe the source."""


class ExportError(GlanceError):
    """Error while writing a static preview."""
