"""Named failures for edits the layer stack or canvas cannot accept."""
from __future__ import annotations


class TextureError(RuntimeError):
    """Base class for refusals reported to the caller."""

    code = "texture-error"


class LastLayerError(TextureError):
    """Raised when removing the only remaining layer."""

    code = "last-layer"


class EmptyRegionError(TextureError):
    """Raised when a transform region has no cells on the canvas."""

    code = "empty-region"


class NonSquareRegionError(TextureError):
    """Raised when a 90 degree rotation is requested over a non-square region."""

    code = "non-square-region"
