"""
Errors raised by the export pipeline.

Only `ExportError` and its subclasses leave the orchestrator. A
`PhotoReadError` is absorbed by the image embedder and replaced by a
placeholder.
"""


class PhotoReadError(Exception):
    """A photo could not be read or encoded."""

    def __init__(self, source_ref: str, reason: str = ""):
        self.source_ref = source_ref
        self.reason = reason
        super().__init__(f"Cannot read photo {source_ref!r}: {reason}" if reason else f"Cannot read photo {source_ref!r}")


class ExportError(Exception):
    """Base class for fatal export failures."""


class EmptyAlbumListError(ExportError):
    """Export was requested with no albums selected."""

    def __init__(self, message: str = "No albums selected for export"):
        super().__init__(message)


class RenderServiceError(ExportError):
    """The rendering or sharing service failed."""


class UnexpectedError(ExportError):
    """Any other failure during composition or assembly."""
