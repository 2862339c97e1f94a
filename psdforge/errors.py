"""Exception classes for psdforge."""


class PsdForgeError(Exception):
    """Base exception for psdforge errors."""

    pass


class InputError(PsdForgeError):
    """Raised for malformed or missing caller input."""

    pass


class InvalidColorError(InputError, ValueError):
    """Raised when a color is not a 6-digit hex string."""

    pass


class FetchError(PsdForgeError):
    """Raised when remote bytes cannot be retrieved."""

    pass


class TemplateDecodeError(PsdForgeError):
    """Raised when template bytes cannot be parsed into a document."""

    pass


class ImageDecodeError(PsdForgeError):
    """Raised when replacement image bytes cannot be decoded."""

    pass


class SerializationError(PsdForgeError):
    """Raised when a document cannot be written back to bytes."""

    pass
