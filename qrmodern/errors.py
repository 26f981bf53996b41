"""Exceptions raised by qrmodern."""


class InvalidInputError(ValueError):
    """The caller supplied a matrix or configuration that cannot be rendered.

    Raised before any pixel is drawn. Subclasses ValueError so callers that
    already guard against bad arguments keep working.
    """
