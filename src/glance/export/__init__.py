"""Export layer — one-shot static previews."""

from glance.export.static import ExportResult, remove_preview, write_preview

__all__ = ["ExportResult", "remove_preview", "write_preview"]
