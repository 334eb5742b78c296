"""Error taxonomy shared by the fingerprinting core and its collaborators."""


class PixprintError(Exception):
    """Base class for all pixprint failures."""


class InputError(PixprintError, ValueError):
    """Raised when a mandatory argument is missing or invalid."""


class DecodeError(PixprintError):
    """Raised when no usable luma grid can be produced from an image."""


class FormatError(PixprintError, ValueError):
    """Raised when a fingerprint fails codec validation or widths mismatch."""
